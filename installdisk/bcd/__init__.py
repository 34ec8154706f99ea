"""Boot Configuration Data access through the WMI BCD provider."""

from .device import DeviceDescriptor, file_device, resolve_device_path, split_drive_path
from .elements import ElementFormat, ElementType, lookup
from .entries import (
    add_boot_entry,
    add_boot_manager_menu_entry,
    set_boot_manager_menu,
    set_boot_manager_timeout,
    set_os_loader_description,
    set_os_loader_device,
)
from .service import BcdService
from .store import (
    BcdElement,
    BcdObject,
    BcdStore,
    copy_object,
    get_boot_manager,
    get_element,
    open_object,
    open_store,
)

__all__ = [
    "BcdElement",
    "BcdObject",
    "BcdService",
    "BcdStore",
    "DeviceDescriptor",
    "ElementFormat",
    "ElementType",
    "add_boot_entry",
    "add_boot_manager_menu_entry",
    "copy_object",
    "file_device",
    "get_boot_manager",
    "get_element",
    "lookup",
    "open_object",
    "open_store",
    "resolve_device_path",
    "set_boot_manager_menu",
    "set_boot_manager_timeout",
    "set_os_loader_description",
    "set_os_loader_device",
    "split_drive_path",
]
