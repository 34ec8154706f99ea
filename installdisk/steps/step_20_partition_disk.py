from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import DiskConfig
from ..lib.diskpart import PartitionPlan, partition_disk

logger = logging.getLogger(__name__)


class PartitionDiskStep:
    step_id = "20_partition_disk"

    def __init__(self, disk_config: DiskConfig) -> None:
        self.disk_config = disk_config

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state.get("config") or {}

        disk_number = cfg.get("disk_number")
        if disk_number is None:
            raise RuntimeError("config.disk_number is required for partitioning")

        plan = PartitionPlan(
            disk_number=int(disk_number),
            boot_size_mib=self.disk_config.boot_volume_size_mib,
            boot_label=self.disk_config.boot_label,
            installer_label=self.disk_config.installer_label,
        )
        partition_disk(plan, dry_run=bool(cfg.get("dry_run", False)))

        # Letters assigned by diskpart are rediscovered by the next step.
        state["disk"] = None
        logger.info("Disk %s wiped and partitioned", disk_number)
        return state
