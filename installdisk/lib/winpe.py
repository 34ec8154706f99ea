from __future__ import annotations

import logging
import string
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

SEARCH_SCRIPT_NAME = "installdisk.cmd"

# A: and B: are floppy letters and X: is the WinPE ramdisk itself.
SEARCH_LETTERS = [c for c in string.ascii_uppercase if c not in {"A", "B", "X"}]


def _system32(mount_dir: Path) -> Path:
    return mount_dir / "Windows" / "System32"


def render_search_launch_config() -> str:
    return (
        "[LaunchApps]\r\n"
        "%SYSTEMROOT%\\System32\\wpeinit.exe\r\n"
        f"%SYSTEMROOT%\\System32\\cmd.exe, /c %SYSTEMROOT%\\System32\\{SEARCH_SCRIPT_NAME}\r\n"
    )


def render_search_script(subdir: str) -> str:
    """Boot-time script that finds ``<subdir>\\sources\\setup.exe`` on any drive.

    The letter the installer volume gets inside WinPE is not the one it had
    when the disk was prepared, so every candidate letter is probed.
    """

    letters = " ".join(SEARCH_LETTERS)
    setup = f"%%d:\\{subdir}\\sources\\setup.exe"
    return (
        "@echo off\r\n"
        f"for %%d in ({letters}) do (\r\n"
        f"    if exist {setup} (\r\n"
        f"        {setup}\r\n"
        "        exit /b 0\r\n"
        "    )\r\n"
        ")\r\n"
        f"echo Unable to locate {subdir}\\sources\\setup.exe on any drive.\r\n"
        "cmd.exe\r\n"
    )


def render_wds_launch_config(server: Optional[str] = None) -> str:
    args = "/wds /wdsdiscover"
    if server:
        args += f" /wdsserver:{server}"
    return (
        "[LaunchApps]\r\n"
        "%SYSTEMROOT%\\System32\\wpeinit.exe\r\n"
        f"%SYSTEMDRIVE%\\sources\\setup.exe, {args}\r\n"
    )


def write_search_launcher(mount_dir: Path, subdir: str, *, dry_run: bool = False) -> None:
    system32 = _system32(mount_dir)
    if dry_run:
        logger.info("Would write winpeshl.ini and %s into %s", SEARCH_SCRIPT_NAME, system32)
        return
    system32.mkdir(parents=True, exist_ok=True)
    (system32 / "winpeshl.ini").write_text(render_search_launch_config(), encoding="ascii", newline="")
    (system32 / SEARCH_SCRIPT_NAME).write_text(render_search_script(subdir), encoding="ascii", newline="")
    logger.info("Wrote drive search launcher for %s", subdir)


def write_wds_launcher(mount_dir: Path, server: Optional[str] = None, *, dry_run: bool = False) -> None:
    system32 = _system32(mount_dir)
    if dry_run:
        logger.info("Would write WDS winpeshl.ini into %s", system32)
        return
    system32.mkdir(parents=True, exist_ok=True)
    (system32 / "winpeshl.ini").write_text(render_wds_launch_config(server), encoding="ascii", newline="")
    logger.info("Wrote WDS launcher (server=%s)", server or "<discover>")
