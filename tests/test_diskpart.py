import os

import pytest

from installdisk.lib import bootsect, diskpart
from installdisk.lib.command import CmdResult
from installdisk.lib.diskpart import PartitionPlan, partition_disk, render_partition_script


def test_render_partition_script():
    script = render_partition_script(PartitionPlan(disk_number=3, boot_size_mib=512))
    lines = script.splitlines()

    assert lines[:4] == ["select disk 3", "clean", "convert mbr", "create partition primary size=512"]
    assert "format fs=fat32 label=BOOT quick" in lines
    assert "format fs=ntfs label=INSTALL quick" in lines
    # The boot partition is the one marked active.
    assert lines.index("active") == lines.index("format fs=fat32 label=BOOT quick") + 1
    assert lines.count("assign") == 2
    assert lines[-1] == "exit"


def test_partition_disk_runs_script_file(monkeypatch):
    seen = {}

    def fake_run_cmd(argv, **kwargs):
        seen["argv"] = argv
        with open(argv[2], encoding="ascii") as f:
            seen["script"] = f.read()
        return CmdResult(argv=list(argv), returncode=0, stdout="", stderr="")

    monkeypatch.setattr(diskpart, "run_cmd", fake_run_cmd)

    partition_disk(PartitionPlan(disk_number=3))

    assert seen["argv"][:2] == ["diskpart", "/s"]
    assert seen["script"].startswith("select disk 3\n")
    assert not os.path.exists(seen["argv"][2])


def test_partition_disk_removes_script_on_failure(monkeypatch):
    seen = []

    def failing_run_cmd(argv, **kwargs):
        seen.append(argv[2])
        raise RuntimeError("diskpart failed")

    monkeypatch.setattr(diskpart, "run_cmd", failing_run_cmd)

    with pytest.raises(RuntimeError):
        partition_disk(PartitionPlan(disk_number=3))
    assert not os.path.exists(seen[0])


def test_partition_disk_dry_run(monkeypatch):
    calls = []
    monkeypatch.setattr(diskpart, "run_cmd", lambda argv, **kw: calls.append((argv, kw)))

    partition_disk(PartitionPlan(disk_number=3), dry_run=True)

    assert calls == [(["diskpart", "/s", "<script>"], {"dry_run": True})]


def test_install_boot_sector(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(bootsect, "run_cmd", lambda argv, **kw: calls.append(argv))

    bootsect.install_boot_sector(source_root=tmp_path, volume="S:")

    assert calls == [[str(tmp_path / "boot" / "bootsect.exe"), "/nt60", "S:", "/force", "/mbr"]]
