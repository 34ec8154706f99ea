from __future__ import annotations

import logging
from typing import Any, Dict

from ..bcd.entries import set_boot_manager_menu, set_boot_manager_timeout
from ..bcd.store import open_store
from ..config import DiskConfig
from ..disk import InstallDisk
from ..errors import SourceMediaError

logger = logging.getLogger(__name__)


class ConfigureBootManagerStep:
    """Set menu timeout and visibility, and empty the menu of every store.

    The media's own loader entry points at the boot volume, which holds no
    boot.wim, so the menu starts empty and only lists entries we add.
    """

    step_id = "60_configure_boot_manager"

    def __init__(self, disk_config: DiskConfig) -> None:
        self.disk_config = disk_config

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state.get("config") or {}
        disk = InstallDisk.from_state(state)

        if bool(cfg.get("dry_run", False)):
            logger.info(
                "Would set timeout=%s display=%s on BCD stores of %s",
                self.disk_config.timeout,
                self.disk_config.display_boot_menu,
                disk.boot_volume,
            )
            return state

        store_paths = disk.bcd_store_paths
        if not store_paths:
            raise SourceMediaError(f"No BCD store found on boot volume {disk.boot_volume}")

        for path in store_paths:
            store = open_store(path)
            set_boot_manager_timeout(store, self.disk_config.timeout)
            set_boot_manager_menu(store, [], display_menu=self.disk_config.display_boot_menu)
        return state
