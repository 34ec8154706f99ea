from __future__ import annotations

import logging
from typing import Any, Dict

from ..bcd.entries import add_boot_entry
from ..disk import InstallDisk
from ..errors import SourceMediaError

logger = logging.getLogger(__name__)


class AddBootEntriesStep:
    step_id = "70_add_boot_entries"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state.get("config") or {}
        exe = state.setdefault("execution", {})
        disk = InstallDisk.from_state(state)

        image_path = exe.get("image_path")
        if not image_path:
            raise RuntimeError("execution.image_path missing; stage the installer first")
        description = cfg["description"]

        if bool(cfg.get("dry_run", False)):
            logger.info("Would add boot entry %r -> %s on %s", description, image_path, disk.boot_volume)
            return state

        store_paths = disk.bcd_store_paths
        if not store_paths:
            raise SourceMediaError(f"No BCD store found on boot volume {disk.boot_volume}")

        new_ids = add_boot_entry(store_paths, description, image_path)
        exe.setdefault("boot_entries", {}).update(dict(zip(store_paths, new_ids)))
        return state
