import pytest

from installdisk.bcd import device
from installdisk.bcd.device import (
    DeviceDescriptor,
    file_device,
    normalize_drive_letter,
    resolve_device_path,
    split_drive_path,
)
from installdisk.bcd.ids import PARTITION_DEVICE_TYPE, RAMDISK_DEVICE_TYPE, RAMDISK_OPTIONS_ID
from installdisk.errors import NoDeviceMappingError


def test_split_drive_path():
    assert split_drive_path("E:\\sources\\boot.wim") == ("E:", "\\sources\\boot.wim")
    assert split_drive_path("e:\\win11\\sources\\boot.wim") == ("E:", "\\win11\\sources\\boot.wim")


def test_split_drive_path_requires_letter():
    with pytest.raises(ValueError):
        split_drive_path("\\sources\\boot.wim")
    with pytest.raises(ValueError):
        split_drive_path("\\\\server\\share\\boot.wim")


@pytest.mark.parametrize("value", ["E", "E:", "e:"])
def test_normalize_drive_letter(value):
    assert normalize_drive_letter(value) == "E:"


@pytest.mark.parametrize("value", ["", "E:\\", "EF:", "1:"])
def test_normalize_drive_letter_rejects(value):
    with pytest.raises(ValueError):
        normalize_drive_letter(value)


def test_resolve_device_path(monkeypatch):
    seen = []

    def fake_query(name):
        seen.append(name)
        return "\\Device\\HarddiskVolume12"

    monkeypatch.setattr(device, "_query_dos_device", fake_query)

    assert resolve_device_path("t") == "\\Device\\HarddiskVolume12"
    assert resolve_device_path("T:") == resolve_device_path("T")
    assert seen == ["T:", "T:", "T:"]


def test_resolve_device_path_without_mapping(monkeypatch):
    monkeypatch.setattr(device, "_query_dos_device", lambda name: None)

    with pytest.raises(NoDeviceMappingError):
        resolve_device_path("Q:")


def test_file_device_is_ramdisk_on_partition():
    d = file_device("T:\\win11\\sources\\boot.wim", resolve=lambda letter: "\\Device\\HarddiskVolume7")

    assert d == DeviceDescriptor(
        device_type=RAMDISK_DEVICE_TYPE,
        path="\\win11\\sources\\boot.wim",
        additional_options=RAMDISK_OPTIONS_ID,
        parent=DeviceDescriptor(device_type=PARTITION_DEVICE_TYPE, path="\\Device\\HarddiskVolume7"),
    )


def test_file_device_uses_module_resolver(monkeypatch):
    monkeypatch.setattr(device, "_query_dos_device", lambda name: "\\Device\\HarddiskVolume3")

    assert file_device("T:\\sources\\boot.wim").parent.path == "\\Device\\HarddiskVolume3"
