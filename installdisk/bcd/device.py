from __future__ import annotations

import logging
import ntpath
import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ..errors import NoDeviceMappingError
from .ids import PARTITION_DEVICE_TYPE, RAMDISK_DEVICE_TYPE, RAMDISK_OPTIONS_ID

logger = logging.getLogger(__name__)

_DRIVE_RE = re.compile(r"^([A-Za-z]):?$")


@dataclass(frozen=True)
class DeviceDescriptor:
    """Boot-time location of a file: device type, path and parent device."""

    device_type: int
    path: str = ""
    additional_options: str = ""
    parent: Optional["DeviceDescriptor"] = None


def normalize_drive_letter(drive_letter: str) -> str:
    m = _DRIVE_RE.match(drive_letter or "")
    if not m:
        raise ValueError(f"Expected a bare drive letter such as 'E:', got {drive_letter!r}")
    return f"{m.group(1).upper()}:"


def split_drive_path(path: str) -> Tuple[str, str]:
    """Split ``E:\\sources\\boot.wim`` into ``("E:", "\\sources\\boot.wim")``."""

    qualifier, rest = ntpath.splitdrive(path)
    if not qualifier:
        raise ValueError(f"Path has no drive letter: {path!r}")
    return normalize_drive_letter(qualifier), rest


def _query_dos_device(name: str) -> Optional[str]:
    import ctypes

    buf = ctypes.create_unicode_buffer(1024)
    n = ctypes.windll.kernel32.QueryDosDeviceW(name, buf, len(buf))
    if not n:
        return None
    # The buffer is a MULTI_SZ list; the first entry is the current target.
    return buf.value or None


def resolve_device_path(drive_letter: str) -> str:
    """Return the NT device path (``\\Device\\HarddiskVolumeN``) behind a letter.

    Only valid for the current session; the firmware-side boot manager
    resolves the same partition from the path at next boot. A volume whose
    letter is reassigned in between is not detected here.
    """

    name = normalize_drive_letter(drive_letter)
    target = _query_dos_device(name)
    if not target:
        raise NoDeviceMappingError(f"No device mapping for drive {name}")
    logger.debug("Resolved %s -> %s", name, target)
    return target


def file_device(
    image_path: str,
    *,
    resolve: Optional[Callable[[str], str]] = None,
) -> DeviceDescriptor:
    """Ramdisk device for a file, with the partition it lives on as parent."""

    qualifier, rel = split_drive_path(image_path)
    parent_path = (resolve or resolve_device_path)(qualifier)
    parent = DeviceDescriptor(device_type=PARTITION_DEVICE_TYPE, path=parent_path)
    return DeviceDescriptor(
        device_type=RAMDISK_DEVICE_TYPE,
        path=rel,
        additional_options=RAMDISK_OPTIONS_ID,
        parent=parent,
    )
