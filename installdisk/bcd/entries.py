from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from ..errors import ObjectNotFoundError
from .device import file_device
from .ids import DEFAULT_BOOTLOADER_ID, OS_LOADER_OBJECT_TYPE
from .service import BcdService
from .store import (
    BcdObject,
    BcdStore,
    copy_object,
    get_boot_manager,
    get_object_list_element,
    open_object,
    open_store,
    set_boolean_element,
    set_file_device_element,
    set_integer_element,
    set_object_list_element,
    set_string_element,
)

logger = logging.getLogger(__name__)


def set_boot_manager_timeout(store: BcdStore, seconds: int) -> None:
    set_integer_element(get_boot_manager(store), "Timeout", seconds)
    logger.info("Boot menu timeout %ss in %s", seconds, store.path)


def _require_loader(store: BcdStore, object_id: str) -> BcdObject:
    obj = open_object(store, object_id)
    if obj.type != OS_LOADER_OBJECT_TYPE:
        raise ObjectNotFoundError(
            f"{object_id} in {store.path} is not a boot loader (type 0x{obj.type:08x})"
        )
    return obj


def set_boot_manager_menu(store: BcdStore, entries: Sequence[str], *, display_menu: bool = True) -> None:
    """Replace the boot menu with ``entries``, in that order."""

    for object_id in entries:
        # Raises ObjectNotFoundError before anything is written.
        _require_loader(store, object_id)

    bootmgr = get_boot_manager(store)
    set_boolean_element(bootmgr, "DisplayBootMenu", display_menu)
    set_object_list_element(bootmgr, "DisplayOrder", list(entries))
    logger.info("Boot menu in %s: display=%s entries=%s", store.path, display_menu, list(entries))


def add_boot_manager_menu_entry(store: BcdStore, object_id: str) -> List[str]:
    """Append loader ``object_id`` to the end of the display order; returns the new order."""

    _require_loader(store, object_id)
    bootmgr = get_boot_manager(store)
    order = list(get_object_list_element(bootmgr, "DisplayOrder"))
    order.append(object_id)
    set_object_list_element(bootmgr, "DisplayOrder", order)
    return order


def set_os_loader_device(
    loader: BcdObject,
    image_path: str,
    *,
    resolve: Optional[Callable[[str], str]] = None,
) -> None:
    device = file_device(image_path, resolve=resolve)
    set_file_device_element(loader, "ApplicationDevice", device)
    set_file_device_element(loader, "OSDevice", device)


def set_os_loader_description(loader: BcdObject, description: str) -> None:
    set_string_element(loader, "Description", description)


def add_boot_entry(
    store_paths: Sequence[str],
    description: str,
    image_path: str,
    *,
    service: Optional[BcdService] = None,
    resolve: Optional[Callable[[str], str]] = None,
) -> List[str]:
    """Add a boot menu entry for ``image_path`` to every store, one at a time.

    Stores are independent: a failure stops the loop and leaves the stores
    already processed with their new entry in place.
    """

    new_ids: List[str] = []
    for path in store_paths:
        store = open_store(path, service=service)
        service = store.service

        new_id = copy_object(store, DEFAULT_BOOTLOADER_ID)
        loader = open_object(store, new_id)
        set_os_loader_device(loader, image_path, resolve=resolve)
        set_os_loader_description(loader, description)
        add_boot_manager_menu_entry(store, new_id)

        logger.info("Added boot entry %s (%r -> %s) to %s", new_id, description, image_path, path)
        new_ids.append(new_id)
    return new_ids
