from __future__ import annotations

import logging
from pathlib import Path

from .command import run_cmd

logger = logging.getLogger(__name__)


def bootsect_path(source_root: Path) -> Path:
    return source_root / "boot" / "bootsect.exe"


def install_boot_sector(
    *,
    source_root: Path,
    volume: str,
    mode: str = "nt60",
    dry_run: bool = False,
) -> None:
    """Write a bootmgr-compatible boot sector and MBR for ``volume``.

    Uses the bootsect.exe shipped on the source media so the boot code matches
    the bootmgr that gets copied next to it.
    """

    tool = bootsect_path(source_root)
    run_cmd([str(tool), f"/{mode}", volume, "/force", "/mbr"], dry_run=dry_run)
    logger.info("Boot sector installed on %s (%s)", volume, mode)
