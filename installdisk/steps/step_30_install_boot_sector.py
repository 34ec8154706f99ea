from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..config import DiskConfig
from ..disk import InstallDisk
from ..lib.bootsect import install_boot_sector

logger = logging.getLogger(__name__)


class InstallBootSectorStep:
    step_id = "30_install_boot_sector"

    def __init__(self, disk_config: DiskConfig) -> None:
        self.disk_config = disk_config

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state.get("config") or {}
        disk = InstallDisk.from_state(state)

        install_boot_sector(
            source_root=Path(cfg["source"]),
            volume=disk.boot_volume,
            mode=self.disk_config.bootsect_mode,
            dry_run=bool(cfg.get("dry_run", False)),
        )
        return state
