import json
import os
import uuid
from types import SimpleNamespace

import pytest

from installdisk.bcd import store as bcd_store
from installdisk.bcd.ids import (
    BOOT_MANAGER_ID,
    BOOT_MANAGER_OBJECT_TYPE,
    DEFAULT_BOOTLOADER_ID,
    OS_LOADER_OBJECT_TYPE,
    RAMDISK_OPTIONS_ID,
)
from installdisk.bcd.service import BcdService

TIMEOUT = 0x25000004
DISPLAY_BOOT_MENU = 0x26000020
DISPLAY_ORDER = 0x24000001
DESCRIPTION = 0x12000004
APPLICATION_DEVICE = 0x11000001
OS_DEVICE = 0x21000001


def _key(code):
    return "0x%08x" % code


def write_store(path, objects):
    os.makedirs(os.path.dirname(str(path)), exist_ok=True)
    with open(str(path), "w") as f:
        json.dump({"objects": objects}, f)


def read_store(path):
    with open(str(path)) as f:
        return json.load(f)["objects"]


def media_store_objects(timeout=30):
    """Objects of a BCD store as shipped on Windows install media."""

    return {
        BOOT_MANAGER_ID: {
            "type": BOOT_MANAGER_OBJECT_TYPE,
            "elements": {
                _key(TIMEOUT): {"kind": "integer", "value": timeout},
                _key(DISPLAY_ORDER): {"kind": "objectlist", "value": [DEFAULT_BOOTLOADER_ID]},
            },
        },
        DEFAULT_BOOTLOADER_ID: {
            "type": OS_LOADER_OBJECT_TYPE,
            "elements": {
                _key(DESCRIPTION): {"kind": "string", "value": "Windows Setup"},
                _key(APPLICATION_DEVICE): {
                    "kind": "device",
                    "value": {
                        "device_type": 4,
                        "path": "\\sources\\boot.wim",
                        "additional_options": RAMDISK_OPTIONS_ID,
                        "parent": {"device_type": 1, "path": "", "additional_options": "", "parent": None},
                    },
                },
            },
        },
    }


def _raw_device(d):
    if d is None:
        return None
    return SimpleNamespace(
        DeviceType=d["device_type"],
        Path=d["path"],
        AdditionalOptions=d["additional_options"],
        Parent=_raw_device(d.get("parent")),
    )


def _raw_element(code, record):
    kind = record["kind"]
    value = record["value"]
    if kind == "integer":
        # uint64 values come back as strings from WMI
        return SimpleNamespace(Type=code, Integer=str(value))
    if kind == "boolean":
        return SimpleNamespace(Type=code, Boolean=value)
    if kind == "string":
        return SimpleNamespace(Type=code, String=value)
    if kind == "objectlist":
        return SimpleNamespace(Type=code, Ids=tuple(value))
    if kind == "device":
        return SimpleNamespace(Type=code, Device=_raw_device(value))
    raise AssertionError(kind)


class FakeBcdObject(object):
    def __init__(self, provider, path, object_id, object_type):
        self._provider = provider
        self._path = path
        self.Id = object_id
        self.Type = object_type

    def _update(self, method, code, record):
        self._provider.calls.append((self._path, method, code))
        if method in self._provider.fail_writes and self._provider.fail_store in (None, self._path):
            return (False,)
        objects = read_store(self._path)
        objects[self.Id]["elements"][_key(code)] = record
        write_store(self._path, objects)
        return (True,)

    def GetElement(self, Type):
        record = read_store(self._path)[self.Id]["elements"].get(_key(Type))
        if record is None:
            return (None, False)
        return (_raw_element(Type, record), True)

    def SetIntegerElement(self, Type, Integer):
        return self._update("SetIntegerElement", Type, {"kind": "integer", "value": int(Integer)})

    def SetBooleanElement(self, Type, Boolean):
        return self._update("SetBooleanElement", Type, {"kind": "boolean", "value": Boolean})

    def SetStringElement(self, Type, String):
        return self._update("SetStringElement", Type, {"kind": "string", "value": String})

    def SetObjectListElement(self, Type, Ids):
        return self._update("SetObjectListElement", Type, {"kind": "objectlist", "value": list(Ids)})

    def SetFileDeviceElement(
        self, Type, DeviceType, AdditionalOptions, Path, ParentDeviceType, ParentAdditionalOptions, ParentPath
    ):
        parent = {
            "device_type": ParentDeviceType,
            "path": ParentPath,
            "additional_options": ParentAdditionalOptions,
            "parent": None,
        }
        device = {
            "device_type": DeviceType,
            "path": Path,
            "additional_options": AdditionalOptions,
            "parent": parent,
        }
        return self._update("SetFileDeviceElement", Type, {"kind": "device", "value": device})


class FakeBcdStore(object):
    def __init__(self, provider, path):
        self._provider = provider
        self.FilePath = path

    def OpenObject(self, Id):
        record = read_store(self.FilePath).get(Id)
        if record is None:
            return (None, False)
        return (FakeBcdObject(self._provider, self.FilePath, Id, record["type"]), True)

    def EnumerateObjects(self, Type):
        objects = [
            FakeBcdObject(self._provider, self.FilePath, object_id, record["type"])
            for object_id, record in read_store(self.FilePath).items()
            if record["type"] == Type
        ]
        # ReturnValue first, on purpose: callers must not depend on the order.
        return (True, objects)

    def CopyObject(self, SourceStoreFile, SourceId, Flags):
        provider = self._provider
        provider.copy_sources.append(SourceStoreFile)
        if os.path.abspath(SourceStoreFile) == os.path.abspath(self.FilePath):
            # The real provider refuses to copy within one store file.
            return (None, False)
        if provider.copy_result is not None:
            return provider.copy_result
        source = read_store(SourceStoreFile).get(SourceId)
        if source is None:
            return (None, False)
        new_id = "{%s}" % uuid.uuid4()
        objects = read_store(self.FilePath)
        objects[new_id] = json.loads(json.dumps(source))
        write_store(self.FilePath, objects)
        return (FakeBcdObject(provider, self.FilePath, new_id, source["type"]), True)


class FakeBcdStoreClass(object):
    def __init__(self, provider):
        self._provider = provider

    def OpenStore(self, File):
        if not os.path.isfile(File):
            return (None, False)
        return (FakeBcdStore(self._provider, File), True)


class FakeBcdProvider(object):
    """Stand-in for the root\\wmi connection; stores are JSON files."""

    def __init__(self):
        self.BcdStore = FakeBcdStoreClass(self)
        self.calls = []
        self.copy_sources = []
        self.fail_writes = set()
        self.fail_store = None
        self.copy_result = None


@pytest.fixture
def bcd_provider(monkeypatch):
    provider = FakeBcdProvider()
    monkeypatch.setattr(bcd_store, "BcdService", lambda: BcdService(provider))
    return provider


@pytest.fixture
def bcd_service(bcd_provider):
    return BcdService(bcd_provider)


@pytest.fixture
def store_path(tmp_path):
    path = tmp_path / "boot" / "bcd"
    write_store(path, media_store_objects())
    return str(path)


class FakePartition(object):
    def __init__(self, *logical_disks):
        self._logical = list(logical_disks)

    def associators(self, wmi_association_class):
        assert wmi_association_class == "Win32_LogicalDiskToPartition"
        return self._logical


class FakeDiskDrive(object):
    def __init__(self, index, model, size, interface, partitions=()):
        self.Index = index
        self.Model = model
        self.Size = str(size)
        self.InterfaceType = interface
        self._partitions = list(partitions)

    def associators(self, wmi_association_class):
        assert wmi_association_class == "Win32_DiskDriveToDiskPartition"
        return self._partitions


class FakeCim(object):
    def __init__(self, drives):
        self._drives = drives

    def Win32_DiskDrive(self, **filters):
        return [d for d in self._drives if all(getattr(d, k) == v for k, v in filters.items())]


def logical_disk(device_id, file_system):
    return SimpleNamespace(DeviceID=device_id, FileSystem=file_system)


def install_disk_drive(index=2, boot="S:", installer="T:"):
    return FakeDiskDrive(
        index,
        "SanDisk Ultra USB Device",
        64 * 2**30,
        "USB",
        partitions=[FakePartition(logical_disk(boot, "FAT32")), FakePartition(logical_disk(installer, "NTFS"))],
    )
