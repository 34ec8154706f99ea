from __future__ import annotations

import logging
import ntpath
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .bcd.device import normalize_drive_letter
from .errors import InstallDiskNotFoundError

logger = logging.getLogger(__name__)

# Relative to the boot volume root; legacy store first.
BCD_STORE_PATHS = (
    ("boot", "bcd"),
    ("efi", "microsoft", "boot", "bcd"),
)


def volume_root(drive_letter: str) -> Path:
    return Path(normalize_drive_letter(drive_letter) + "\\")


def connect_cim() -> Any:
    import wmi  # type: ignore

    return wmi.WMI()


@dataclass(frozen=True)
class UsbDisk:
    number: int
    model: str
    size: int
    interface: str = "USB"


@dataclass(frozen=True)
class InstallDisk:
    disk_number: int
    boot_volume: str
    installer_volume: str

    @property
    def boot_root(self) -> Path:
        return volume_root(self.boot_volume)

    @property
    def installer_root(self) -> Path:
        return volume_root(self.installer_volume)

    @property
    def bcd_store_paths(self) -> List[str]:
        """BCD stores present on the boot volume (legacy, then UEFI)."""

        found = []
        for parts in BCD_STORE_PATHS:
            p = self.boot_root.joinpath(*parts)
            if p.is_file():
                found.append(str(p))
        return found

    def image_path(self, *parts: str) -> str:
        """Drive-qualified Windows path of a file on the installer volume."""

        return ntpath.join(normalize_drive_letter(self.installer_volume) + "\\", *parts)

    def unique_subdirectory(self, name: str) -> str:
        base = slugify(name)
        candidate = base
        n = 2
        while (self.installer_root / candidate).exists():
            candidate = f"{base}-{n}"
            n += 1
        return candidate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "disk_number": self.disk_number,
            "boot_volume": self.boot_volume,
            "installer_volume": self.installer_volume,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InstallDisk":
        return cls(
            disk_number=int(data["disk_number"]),
            boot_volume=str(data["boot_volume"]),
            installer_volume=str(data["installer_volume"]),
        )

    @classmethod
    def from_state(cls, state: Dict[str, Any]) -> "InstallDisk":
        data = state.get("disk")
        if not data:
            raise RuntimeError("Install disk volumes unknown; run 25_discover_volumes first")
        return cls.from_dict(data)


def slugify(name: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "-", name).strip("-").lower()
    if not slug:
        raise ValueError(f"Cannot derive a directory name from {name!r}")
    return slug


def get_usb_disks(*, cim: Optional[Any] = None) -> List[UsbDisk]:
    cim = cim or connect_cim()
    disks = [
        UsbDisk(
            number=int(d.Index),
            model=str(d.Model or "").strip(),
            size=int(d.Size or 0),
            interface=str(d.InterfaceType),
        )
        for d in cim.Win32_DiskDrive(InterfaceType="USB")
    ]
    disks.sort(key=lambda d: d.number)
    logger.info("Found %d USB disk(s)", len(disks))
    return disks


def get_install_disk(disk_number: int, *, cim: Optional[Any] = None) -> InstallDisk:
    """Identify the boot (FAT32) and installer (NTFS) volumes of a disk."""

    cim = cim or connect_cim()
    drives = cim.Win32_DiskDrive(Index=disk_number)
    if not drives:
        raise InstallDiskNotFoundError(f"Disk {disk_number} does not exist")

    volumes: Dict[str, List[str]] = {}
    for partition in drives[0].associators("Win32_DiskDriveToDiskPartition"):
        for logical in partition.associators("Win32_LogicalDiskToPartition"):
            fs = str(logical.FileSystem or "").upper()
            volumes.setdefault(fs, []).append(str(logical.DeviceID))

    fat = volumes.get("FAT32", [])
    ntfs = volumes.get("NTFS", [])
    if len(fat) != 1 or len(ntfs) != 1:
        raise InstallDiskNotFoundError(
            f"Disk {disk_number} is not an install disk (FAT32={fat}, NTFS={ntfs})"
        )

    disk = InstallDisk(disk_number=disk_number, boot_volume=fat[0], installer_volume=ntfs[0])
    logger.info("Install disk %s: boot=%s installer=%s", disk_number, disk.boot_volume, disk.installer_volume)
    return disk
