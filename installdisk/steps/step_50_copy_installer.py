from __future__ import annotations

import logging
from typing import Any, Dict

from ..disk import InstallDisk
from ..lib.assets import BOOT_ENTRIES, copy_tree

logger = logging.getLogger(__name__)


class CopyInstallerStep:
    """Copy installation payload (everything but boot files) to the installer volume.

    The first installer lives at the volume root. Later ones go under a
    unique subdirectory so their images can find them at boot.
    """

    step_id = "50_copy_installer"

    def __init__(self, *, into_subdirectory: bool = False) -> None:
        self.into_subdirectory = into_subdirectory

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state.get("config") or {}
        exe = state.setdefault("execution", {})
        disk = InstallDisk.from_state(state)

        if self.into_subdirectory:
            subdir = exe.get("subdir") or disk.unique_subdirectory(cfg.get("name") or cfg["description"])
            exe["subdir"] = subdir
            dst = disk.installer_root / subdir
            exe["image_path"] = disk.image_path(subdir, "sources", "boot.wim")
        else:
            dst = disk.installer_root
            exe["image_path"] = disk.image_path("sources", "boot.wim")

        copy_tree(cfg["source"], str(dst), exclude=BOOT_ENTRIES, dry_run=bool(cfg.get("dry_run", False)))
        logger.info("Installer payload copied to %s", dst)
        return state
