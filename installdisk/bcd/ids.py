"""Well-known identifiers of Windows install media BCD stores."""

from __future__ import annotations

# "Windows Setup" loader shipped in every install media store. New loaders are
# copies of it because it carries ramdisk and WinPE elements we never set.
DEFAULT_BOOTLOADER_ID = "{7619dcc9-fafe-11d9-b411-000476eba25f}"

# Ramdisk options object (boot.sdi location) referenced by the loader devices.
RAMDISK_OPTIONS_ID = "{7619dcca-fafe-11d9-b411-000476eba25f}"

BOOT_MANAGER_ID = "{9dea862c-5cdd-4e70-acc1-f32b344d4795}"

BOOT_MANAGER_OBJECT_TYPE = 0x10100002
OS_LOADER_OBJECT_TYPE = 0x10200003

# BcdDeviceData.DeviceType
PARTITION_DEVICE_TYPE = 2
RAMDISK_DEVICE_TYPE = 4

# BcdStore.CopyObject flags
COPY_CREATE_NEW_ID = 0x1
