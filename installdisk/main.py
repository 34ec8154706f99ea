from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from .config import load_disk_config
from .disk import get_install_disk, get_usb_disks
from .errors import InstallDiskError
from .lib.command import CommandError
from .lib.env import PATHS
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .workflows import add_installer, add_wds_installer, initialize_install_disk

logger = logging.getLogger(__name__)


def _run_kwargs(args: argparse.Namespace) -> dict:
    return {
        "state_path": args.state,
        "resume": bool(args.resume),
        "start_at": args.start_at,
        "stop_after": args.stop_after,
        "force": bool(args.force),
        "dry_run": bool(args.dry_run),
    }


def cmd_init(args: argparse.Namespace) -> int:
    disk = initialize_install_disk(
        args.disk,
        args.source,
        description=args.description,
        disk_config=load_disk_config(args.config),
        **_run_kwargs(args),
    )
    print(f"Install disk {disk.disk_number}: boot={disk.boot_volume} installer={disk.installer_volume}")
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    add_installer(
        args.disk,
        args.source,
        args.name,
        description=args.description,
        disk_config=load_disk_config(args.config),
        **_run_kwargs(args),
    )
    print(f"Added {args.name!r} to disk {args.disk}")
    return 0


def cmd_add_wds(args: argparse.Namespace) -> int:
    add_wds_installer(
        args.disk,
        args.boot_image,
        args.name,
        server=args.server,
        description=args.description,
        disk_config=load_disk_config(args.config),
        **_run_kwargs(args),
    )
    print(f"Added WDS installer {args.name!r} to disk {args.disk}")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    disk = get_install_disk(args.disk)
    print(f"disk:      {disk.disk_number}")
    print(f"boot:      {disk.boot_volume}")
    print(f"installer: {disk.installer_volume}")
    for path in disk.bcd_store_paths:
        print(f"bcd:       {path}")
    return 0


def cmd_list_usb(args: argparse.Namespace) -> int:
    for d in get_usb_disks():
        print(f"{d.number:>3}  {d.size / 2**30:8.1f} GiB  {d.model}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="installdisk")
    p.add_argument("--config", default=None, help="YAML config (defaults apply when omitted)")
    p.add_argument("--state", default=PATHS.state_default, help="Path to run state (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")
    p.add_argument("--dry-run", action="store_true", help="Log commands without touching any disk")
    p.add_argument("--resume", action="store_true", help="Continue the previous run of the same operation")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 40_copy_boot_files)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--force", action="store_true", help="Re-run steps even if marked completed")

    sub = p.add_subparsers(dest="subcmd", required=True)

    sp = sub.add_parser("init", help="Wipe a disk and make it an install disk")
    sp.add_argument("--disk", type=int, required=True, help="Disk number (see list-usb)")
    sp.add_argument("--source", required=True, help="Root of the mounted install media")
    sp.add_argument("--description", default=None, help="Boot menu text")
    sp.set_defaults(func=cmd_init)

    sp = sub.add_parser("add", help="Add another installer to an install disk")
    sp.add_argument("--disk", type=int, required=True)
    sp.add_argument("--source", required=True)
    sp.add_argument("--name", required=True, help="Installer name; also its directory on the disk")
    sp.add_argument("--description", default=None)
    sp.set_defaults(func=cmd_add)

    sp = sub.add_parser("add-wds", help="Add a WDS client boot image to an install disk")
    sp.add_argument("--disk", type=int, required=True)
    sp.add_argument("--boot-image", required=True, help="WDS boot.wim")
    sp.add_argument("--name", required=True)
    sp.add_argument("--server", default=None, help="WDS server (discovered when omitted)")
    sp.add_argument("--description", default=None)
    sp.set_defaults(func=cmd_add_wds)

    sp = sub.add_parser("show", help="Show the volumes and BCD stores of an install disk")
    sp.add_argument("--disk", type=int, required=True)
    sp.set_defaults(func=cmd_show)

    sp = sub.add_parser("list-usb", help="List USB disks")
    sp.set_defaults(func=cmd_list_usb)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    configure_logging(log_path=args.log)
    try:
        return int(args.func(args))
    except (InstallDiskError, CommandError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
