from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Any, Dict

from ..config import DiskConfig
from ..disk import InstallDisk
from ..lib.dism import mounted_image
from ..lib.winpe import write_search_launcher, write_wds_launcher

logger = logging.getLogger(__name__)


def _remove_mount_dir(mount_dir: Path) -> None:
    # Empty once dism has unmounted; a failed unmount leaves files behind.
    try:
        mount_dir.rmdir()
    except OSError as e:
        logger.warning("Mount directory %s left in place: %s", mount_dir, e)


class CustomizeImageStep:
    """Rewrite the WinPE launch configuration inside the staged boot image.

    mode="search": launch setup.exe from the installer subdirectory on
    whichever drive it appears. mode="wds": launch setup.exe as a WDS client.
    """

    step_id = "55_customize_image"

    def __init__(self, disk_config: DiskConfig, *, mode: str = "search") -> None:
        if mode not in {"search", "wds"}:
            raise ValueError(f"mode must be 'search' or 'wds', got {mode!r}")
        self.disk_config = disk_config
        self.mode = mode

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state.get("config") or {}
        exe = state.get("execution") or {}
        disk = InstallDisk.from_state(state)
        dry_run = bool(cfg.get("dry_run", False))

        subdir = exe.get("subdir")
        if not subdir:
            raise RuntimeError("execution.subdir missing; stage the installer first")

        image = disk.installer_root / subdir / "sources" / "boot.wim"
        work_dir = Path(self.disk_config.work_dir)
        if dry_run:
            mount_dir = work_dir / "mount"
        else:
            work_dir.mkdir(parents=True, exist_ok=True)
            mount_dir = Path(tempfile.mkdtemp(prefix="mount-", dir=str(work_dir)))

        try:
            with mounted_image(image, self.disk_config.image_index, mount_dir, dry_run=dry_run) as root:
                if self.mode == "wds":
                    write_wds_launcher(root, cfg.get("wds_server"), dry_run=dry_run)
                else:
                    write_search_launcher(root, subdir, dry_run=dry_run)
        finally:
            if not dry_run:
                _remove_mount_dir(mount_dir)
        logger.info("Customized %s (%s)", image, self.mode)
        return state
