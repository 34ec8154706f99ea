import pytest

from conftest import FakeCim, FakeDiskDrive, FakePartition, install_disk_drive, logical_disk
from installdisk import disk as disk_mod
from installdisk.disk import InstallDisk, get_install_disk, get_usb_disks, slugify
from installdisk.errors import InstallDiskNotFoundError


@pytest.fixture
def volumes(tmp_path, monkeypatch):
    monkeypatch.setattr(disk_mod, "volume_root", lambda letter: tmp_path / letter[0].upper())
    (tmp_path / "S").mkdir()
    (tmp_path / "T").mkdir()
    return tmp_path


def test_get_install_disk():
    cim = FakeCim([install_disk_drive(index=2, boot="E:", installer="F:")])

    disk = get_install_disk(2, cim=cim)

    assert disk == InstallDisk(disk_number=2, boot_volume="E:", installer_volume="F:")


def test_get_install_disk_missing():
    with pytest.raises(InstallDiskNotFoundError):
        get_install_disk(5, cim=FakeCim([install_disk_drive(index=2)]))


def test_get_install_disk_wrong_layout():
    drive = FakeDiskDrive(3, "Stick", 8 * 2**30, "USB", partitions=[FakePartition(logical_disk("G:", "NTFS"))])

    with pytest.raises(InstallDiskNotFoundError):
        get_install_disk(3, cim=FakeCim([drive]))


def test_get_usb_disks():
    cim = FakeCim(
        [
            FakeDiskDrive(4, " Kingston DataTraveler ", 32 * 2**30, "USB"),
            FakeDiskDrive(0, "Samsung SSD", 512 * 2**30, "SCSI"),
            FakeDiskDrive(2, "SanDisk Ultra", 64 * 2**30, "USB"),
        ]
    )

    disks = get_usb_disks(cim=cim)

    assert [d.number for d in disks] == [2, 4]
    assert disks[1].model == "Kingston DataTraveler"
    assert disks[0].size == 64 * 2**30


def test_bcd_store_paths(volumes):
    d = InstallDisk(disk_number=2, boot_volume="S:", installer_volume="T:")
    assert d.bcd_store_paths == []

    uefi = volumes / "S" / "efi" / "microsoft" / "boot" / "bcd"
    uefi.parent.mkdir(parents=True)
    uefi.write_text("{}")
    assert d.bcd_store_paths == [str(uefi)]

    legacy = volumes / "S" / "boot" / "bcd"
    legacy.parent.mkdir(parents=True)
    legacy.write_text("{}")
    assert d.bcd_store_paths == [str(legacy), str(uefi)]


def test_image_path():
    d = InstallDisk(disk_number=2, boot_volume="S:", installer_volume="t:")
    assert d.image_path("sources", "boot.wim") == "T:\\sources\\boot.wim"
    assert d.image_path("win-11", "sources", "boot.wim") == "T:\\win-11\\sources\\boot.wim"


def test_unique_subdirectory(volumes):
    d = InstallDisk(disk_number=2, boot_volume="S:", installer_volume="T:")
    assert d.unique_subdirectory("Windows 11 Pro") == "windows-11-pro"

    (volumes / "T" / "windows-11-pro").mkdir()
    (volumes / "T" / "windows-11-pro-2").mkdir()
    assert d.unique_subdirectory("Windows 11 Pro") == "windows-11-pro-3"


def test_slugify():
    assert slugify("  Server 2022 (Eval) ") == "server-2022-eval"
    with pytest.raises(ValueError):
        slugify("***")


def test_state_round_trip():
    d = InstallDisk(disk_number=2, boot_volume="S:", installer_volume="T:")
    assert InstallDisk.from_state({"disk": d.to_dict()}) == d
    with pytest.raises(RuntimeError):
        InstallDisk.from_state({"disk": None})
