from __future__ import annotations

import logging
from typing import Any, Dict

from ..disk import InstallDisk
from ..lib.assets import BOOT_ENTRIES, copy_tree

logger = logging.getLogger(__name__)


class CopyBootFilesStep:
    step_id = "40_copy_boot_files"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state.get("config") or {}
        disk = InstallDisk.from_state(state)

        # bootmgr, bootmgr.efi, boot\ and efi\ (with both BCD stores).
        copy_tree(
            cfg["source"],
            str(disk.boot_root),
            include=BOOT_ENTRIES,
            dry_run=bool(cfg.get("dry_run", False)),
        )
        logger.info("Boot files copied to %s", disk.boot_volume)
        return state
