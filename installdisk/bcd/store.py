from __future__ import annotations

import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Sequence, Tuple

from ..errors import (
    CopyFailedError,
    ElementKindError,
    ElementNotFoundError,
    ElementWriteError,
    NoBootManagerError,
    ObjectNotFoundError,
    StoreNotFoundError,
)
from .device import DeviceDescriptor
from .elements import ElementFormat, ElementType, lookup
from .ids import BOOT_MANAGER_OBJECT_TYPE, COPY_CREATE_NEW_ID, DEFAULT_BOOTLOADER_ID
from .service import BcdService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BcdStore:
    path: str
    handle: Any = field(repr=False, compare=False)
    service: BcdService = field(repr=False, compare=False)


@dataclass(frozen=True)
class BcdObject:
    store: BcdStore
    id: str
    type: int
    handle: Any = field(repr=False, compare=False)


@dataclass(frozen=True)
class BcdElement:
    """A typed element value. Accessors reject a kind they were not built for."""

    type: ElementType
    kind: ElementFormat
    value: Any

    def _expect(self, kind: ElementFormat) -> Any:
        if self.kind is not kind:
            raise ElementKindError(f"{self.type.name} holds a {self.kind.name} value, not {kind.name}")
        return self.value

    def as_integer(self) -> int:
        return self._expect(ElementFormat.INTEGER)

    def as_boolean(self) -> bool:
        return self._expect(ElementFormat.BOOLEAN)

    def as_string(self) -> str:
        return self._expect(ElementFormat.STRING)

    def as_device(self) -> DeviceDescriptor:
        return self._expect(ElementFormat.DEVICE)

    def as_object_list(self) -> Tuple[str, ...]:
        return self._expect(ElementFormat.OBJECT_LIST)


def _typed(type_name: str, kind: ElementFormat) -> ElementType:
    et = lookup(type_name)
    if et.element_format is not kind:
        raise ElementKindError(
            f"{type_name} (0x{et.code:08x}) is a {et.element_format.name} element, not {kind.name}"
        )
    return et


def _device_from_raw(raw: Any) -> DeviceDescriptor:
    parent = getattr(raw, "Parent", None)
    return DeviceDescriptor(
        device_type=int(raw.DeviceType),
        path=str(getattr(raw, "Path", "") or ""),
        additional_options=str(getattr(raw, "AdditionalOptions", "") or ""),
        parent=_device_from_raw(parent) if parent is not None else None,
    )


def _element_value(et: ElementType, raw: Any) -> Any:
    fmt = et.element_format
    try:
        if fmt is ElementFormat.INTEGER:
            # uint64 properties travel as strings over WMI.
            return int(raw.Integer)
        if fmt is ElementFormat.BOOLEAN:
            value = raw.Boolean
            if not isinstance(value, bool):
                raise ElementKindError(f"{et.name} returned non-boolean value {value!r}")
            return value
        if fmt is ElementFormat.STRING:
            value = raw.String
            if not isinstance(value, str):
                raise ElementKindError(f"{et.name} returned non-string value {value!r}")
            return value
        if fmt is ElementFormat.OBJECT_LIST:
            return tuple(str(i) for i in (raw.Ids or ()))
        if fmt is ElementFormat.DEVICE:
            return _device_from_raw(raw.Device)
    except (AttributeError, TypeError, ValueError) as e:
        raise ElementKindError(f"{et.name} returned a value that is not a {fmt.name} element") from e
    raise ElementKindError(f"{et.name} has unsupported format {fmt.name}")


def _object(store: BcdStore, handle: Any) -> BcdObject:
    return BcdObject(store=store, id=str(handle.Id), type=int(handle.Type), handle=handle)


def open_store(path: str, *, service: Optional[BcdService] = None) -> BcdStore:
    # An empty path would silently open the system store.
    if not path or not os.path.isfile(path):
        raise StoreNotFoundError(f"No BCD store at {path!r}")

    service = service or BcdService()
    ok, handle = service.open_store(path)
    if not ok or handle is None:
        raise StoreNotFoundError(f"Unable to open BCD store {path}")

    logger.debug("Opened BCD store %s", path)
    return BcdStore(path=path, handle=handle, service=service)


def open_object(store: BcdStore, object_id: str = DEFAULT_BOOTLOADER_ID) -> BcdObject:
    ok, handle = store.service.open_object(store.handle, object_id)
    if not ok or handle is None:
        raise ObjectNotFoundError(f"No object {object_id} in {store.path}")
    return _object(store, handle)


def get_boot_manager(store: BcdStore) -> BcdObject:
    ok, objects = store.service.enumerate_objects(store.handle, BOOT_MANAGER_OBJECT_TYPE)
    if not ok or not objects:
        raise NoBootManagerError(f"No boot manager object in {store.path}")
    return _object(store, objects[0])


def get_element(obj: BcdObject, type_name: str) -> BcdElement:
    et = lookup(type_name)
    ok, raw = obj.store.service.get_element(obj.handle, et.code)
    if not ok or raw is None:
        raise ElementNotFoundError(f"{type_name} is not set on {obj.id} in {obj.store.path}")
    return BcdElement(type=et, kind=et.element_format, value=_element_value(et, raw))


def get_integer_element(obj: BcdObject, type_name: str) -> int:
    _typed(type_name, ElementFormat.INTEGER)
    return get_element(obj, type_name).as_integer()


def get_boolean_element(obj: BcdObject, type_name: str) -> bool:
    _typed(type_name, ElementFormat.BOOLEAN)
    return get_element(obj, type_name).as_boolean()


def get_string_element(obj: BcdObject, type_name: str) -> str:
    _typed(type_name, ElementFormat.STRING)
    return get_element(obj, type_name).as_string()


def get_device_element(obj: BcdObject, type_name: str) -> DeviceDescriptor:
    _typed(type_name, ElementFormat.DEVICE)
    return get_element(obj, type_name).as_device()


def get_object_list_element(obj: BcdObject, type_name: str) -> Tuple[str, ...]:
    _typed(type_name, ElementFormat.OBJECT_LIST)
    return get_element(obj, type_name).as_object_list()


def _write(obj: BcdObject, et: ElementType, method: str, **params: Any) -> None:
    ok = obj.store.service.set_element(obj.handle, method, et.code, **params)
    if not ok:
        raise ElementWriteError(f"Failed to write {et.name} on {obj.id} in {obj.store.path}")
    logger.debug("Set %s on %s in %s", et.name, obj.id, obj.store.path)


def set_integer_element(obj: BcdObject, type_name: str, value: int) -> None:
    et = _typed(type_name, ElementFormat.INTEGER)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ElementKindError(f"{type_name} needs an integer, got {value!r}")
    _write(obj, et, "SetIntegerElement", Integer=str(value))


def set_boolean_element(obj: BcdObject, type_name: str, value: bool) -> None:
    et = _typed(type_name, ElementFormat.BOOLEAN)
    if not isinstance(value, bool):
        raise ElementKindError(f"{type_name} needs a boolean, got {value!r}")
    _write(obj, et, "SetBooleanElement", Boolean=value)


def set_string_element(obj: BcdObject, type_name: str, value: str) -> None:
    et = _typed(type_name, ElementFormat.STRING)
    if not isinstance(value, str):
        raise ElementKindError(f"{type_name} needs a string, got {value!r}")
    _write(obj, et, "SetStringElement", String=value)


def set_file_device_element(obj: BcdObject, type_name: str, device: DeviceDescriptor) -> None:
    et = _typed(type_name, ElementFormat.DEVICE)
    parent = device.parent
    if parent is None:
        raise ValueError(f"{type_name}: a file device needs a parent device")
    _write(
        obj,
        et,
        "SetFileDeviceElement",
        DeviceType=device.device_type,
        AdditionalOptions=device.additional_options,
        Path=device.path,
        ParentDeviceType=parent.device_type,
        ParentAdditionalOptions=parent.additional_options,
        ParentPath=parent.path,
    )


def set_object_list_element(obj: BcdObject, type_name: str, ids: Sequence[str]) -> None:
    et = _typed(type_name, ElementFormat.OBJECT_LIST)
    _write(obj, et, "SetObjectListElement", Ids=[str(i) for i in ids])


@contextmanager
def store_snapshot(store: BcdStore) -> Iterator[str]:
    """Yield the path of a temporary full copy of the store file.

    The copy is removed on every exit path.
    """

    fd, snapshot = tempfile.mkstemp(prefix="bcd-", suffix=".snapshot")
    os.close(fd)
    try:
        shutil.copyfile(store.path, snapshot)
        logger.debug("Snapshot of %s at %s", store.path, snapshot)
        yield snapshot
    finally:
        try:
            os.remove(snapshot)
        except OSError as e:
            # Keep whatever error the copy raised; a stale temp file is secondary.
            logger.warning("Could not remove BCD snapshot %s: %s", snapshot, e)


def _copy_from(store: BcdStore, source_store_path: str, source_id: str) -> str:
    ok, result = store.service.copy_object(store.handle, source_store_path, source_id, COPY_CREATE_NEW_ID)
    if result is None:
        copied = []
    elif isinstance(result, list):
        copied = result
    else:
        copied = [result]

    if not ok or len(copied) != 1:
        raise CopyFailedError(
            f"Copying {source_id} into {store.path} failed (ok={ok}, objects={len(copied)})"
        )

    new_id = str(copied[0].Id)
    if new_id.lower() == source_id.lower():
        raise CopyFailedError(f"Copy of {source_id} into {store.path} did not get a new id")

    logger.info("Copied %s -> %s in %s", source_id, new_id, store.path)
    return new_id


def copy_object(store: BcdStore, source_id: str, *, source_store_path: Optional[str] = None) -> str:
    """Copy ``source_id`` from ``source_store_path`` into ``store`` under a new id.

    The provider only copies between different store files, so when no source
    store is given the object is copied out of a snapshot of ``store`` itself.
    """

    if source_store_path is not None:
        return _copy_from(store, source_store_path, source_id)
    with store_snapshot(store) as snapshot:
        return _copy_from(store, snapshot, source_id)
