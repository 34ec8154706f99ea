from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    STORE_NOT_FOUND = "store_not_found"
    NO_BOOT_MANAGER = "no_boot_manager"
    OBJECT_NOT_FOUND = "object_not_found"
    UNKNOWN_ELEMENT_TYPE = "unknown_element_type"
    ELEMENT_NOT_FOUND = "element_not_found"
    ELEMENT_WRITE = "element_write"
    ELEMENT_KIND = "element_kind"
    COPY_FAILED = "copy_failed"
    NO_DEVICE_MAPPING = "no_device_mapping"
    INSTALL_DISK_NOT_FOUND = "install_disk_not_found"
    SOURCE_MEDIA = "source_media"
    PRIVILEGE = "privilege"


class InstallDiskError(RuntimeError):
    """Base for every failure raised by this package's own logic.

    External tool failures are not wrapped here; they surface as
    ``lib.command.CommandError``.
    """

    kind: ErrorKind


class StoreNotFoundError(InstallDiskError):
    kind = ErrorKind.STORE_NOT_FOUND


class NoBootManagerError(InstallDiskError):
    kind = ErrorKind.NO_BOOT_MANAGER


class ObjectNotFoundError(InstallDiskError):
    kind = ErrorKind.OBJECT_NOT_FOUND


class UnknownElementTypeError(InstallDiskError):
    kind = ErrorKind.UNKNOWN_ELEMENT_TYPE


class ElementNotFoundError(InstallDiskError):
    kind = ErrorKind.ELEMENT_NOT_FOUND


class ElementWriteError(InstallDiskError):
    kind = ErrorKind.ELEMENT_WRITE


class ElementKindError(InstallDiskError):
    kind = ErrorKind.ELEMENT_KIND


class CopyFailedError(InstallDiskError):
    kind = ErrorKind.COPY_FAILED


class NoDeviceMappingError(InstallDiskError):
    kind = ErrorKind.NO_DEVICE_MAPPING


class InstallDiskNotFoundError(InstallDiskError):
    kind = ErrorKind.INSTALL_DISK_NOT_FOUND


class SourceMediaError(InstallDiskError):
    kind = ErrorKind.SOURCE_MEDIA


class PrivilegeError(InstallDiskError):
    kind = ErrorKind.PRIVILEGE
