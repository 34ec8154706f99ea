from __future__ import annotations

import logging
from typing import Any, Dict

from ..disk import InstallDisk, get_install_disk
from ..lib.env import DRY_RUN_BOOT_VOLUME, DRY_RUN_INSTALLER_VOLUME

logger = logging.getLogger(__name__)


class DiscoverVolumesStep:
    step_id = "25_discover_volumes"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state.get("config") or {}

        disk_number = cfg.get("disk_number")
        if disk_number is None:
            raise RuntimeError("config.disk_number is required")

        if bool(cfg.get("dry_run", False)):
            disk = InstallDisk(
                disk_number=int(disk_number),
                boot_volume=DRY_RUN_BOOT_VOLUME,
                installer_volume=DRY_RUN_INSTALLER_VOLUME,
            )
            logger.info("Dry run: assuming boot=%s installer=%s", disk.boot_volume, disk.installer_volume)
        else:
            disk = get_install_disk(int(disk_number))

        state["disk"] = disk.to_dict()
        return state
