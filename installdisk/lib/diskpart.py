from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartitionPlan:
    disk_number: int
    boot_size_mib: int = 1024
    boot_label: str = "BOOT"
    installer_label: str = "INSTALL"


def render_partition_script(plan: PartitionPlan) -> str:
    """Build the diskpart script for the two-volume MBR layout.

    Layout:
    - Boot: active FAT32 primary partition (bootmgr, boot/, efi/, BCD stores)
    - Installer: NTFS primary partition taking the rest of the disk

    Letters are left to the mount manager; callers discover them afterwards.
    """

    lines = [
        f"select disk {plan.disk_number}",
        "clean",
        "convert mbr",
        f"create partition primary size={plan.boot_size_mib}",
        f"format fs=fat32 label={plan.boot_label} quick",
        "active",
        "assign",
        "create partition primary",
        f"format fs=ntfs label={plan.installer_label} quick",
        "assign",
        "exit",
    ]
    return "\n".join(lines) + "\n"


def run_diskpart_script(script: str, *, dry_run: bool = False) -> CmdResult:
    """Run a diskpart script via ``diskpart /s`` so errors set the exit code."""

    if dry_run:
        logger.info("Would run diskpart script:\n%s", script)
        return run_cmd(["diskpart", "/s", "<script>"], dry_run=True)

    fd, script_path = tempfile.mkstemp(prefix="installdisk-", suffix=".txt")
    try:
        with os.fdopen(fd, "w", encoding="ascii") as f:
            f.write(script)
        return run_cmd(["diskpart", "/s", script_path])
    finally:
        os.remove(script_path)


def partition_disk(plan: PartitionPlan, *, dry_run: bool = False) -> None:
    logger.info("Partitioning disk=%s boot_size_mib=%s", plan.disk_number, plan.boot_size_mib)
    run_diskpart_script(render_partition_script(plan), dry_run=dry_run)
