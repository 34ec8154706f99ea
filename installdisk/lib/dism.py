from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .command import run_cmd

logger = logging.getLogger(__name__)


def mount_image(image: Path, index: int, mount_dir: Path, *, dry_run: bool = False) -> None:
    if not dry_run:
        mount_dir.mkdir(parents=True, exist_ok=True)
    run_cmd(
        [
            "dism",
            "/Mount-Image",
            f"/ImageFile:{image}",
            f"/Index:{index}",
            f"/MountDir:{mount_dir}",
        ],
        dry_run=dry_run,
    )


def unmount_image(mount_dir: Path, *, commit: bool, dry_run: bool = False) -> None:
    run_cmd(
        ["dism", "/Unmount-Image", f"/MountDir:{mount_dir}", "/Commit" if commit else "/Discard"],
        dry_run=dry_run,
    )


@contextmanager
def mounted_image(image: Path, index: int, mount_dir: Path, *, dry_run: bool = False) -> Iterator[Path]:
    """Mount ``image`` for in-place edits.

    Changes are committed when the block completes and discarded when it
    raises, so a failed edit never leaves the image half-written or mounted.
    """

    mount_image(image, index, mount_dir, dry_run=dry_run)
    logger.info("Mounted %s (index %s) at %s", image, index, mount_dir)
    try:
        yield mount_dir
    except BaseException:
        unmount_image(mount_dir, commit=False, dry_run=dry_run)
        raise
    unmount_image(mount_dir, commit=True, dry_run=dry_run)
    logger.info("Committed and unmounted %s", image)
