from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

# Top-level entries of Windows install media that belong on the boot volume.
BOOT_ENTRIES = ("boot", "efi", "bootmgr", "bootmgr.efi")


def _top_level_name(rel: Path) -> str:
    return rel.parts[0].lower()


def copy_tree(
    src: str,
    dst: str,
    *,
    include: Optional[Iterable[str]] = None,
    exclude: Optional[Iterable[str]] = None,
    dry_run: bool = False,
) -> int:
    """Copy ``src`` into ``dst``, filtering on top-level entry names.

    Names are compared case-insensitively, like the volumes they come from.
    Returns the number of files copied.
    """

    s = Path(src)
    d = Path(dst)
    if not s.exists():
        raise FileNotFoundError(src)

    inc = {n.lower() for n in include} if include is not None else None
    exc = {n.lower() for n in (exclude or ())}

    if dry_run:
        logger.info("Would copy tree %s -> %s (include=%s exclude=%s)", str(s), str(d), inc, sorted(exc))
        return 0

    copied = 0
    d.mkdir(parents=True, exist_ok=True)
    for item in sorted(s.rglob("*")):
        rel = item.relative_to(s)
        top = _top_level_name(rel)
        if inc is not None and top not in inc:
            continue
        if top in exc:
            continue
        out = d / rel
        if item.is_dir():
            out.mkdir(parents=True, exist_ok=True)
        else:
            out.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, out)
            copied += 1

    logger.info("Copied %d files %s -> %s", copied, str(s), str(d))
    return copied


def copy_file(src: str, dst: str, *, dry_run: bool = False) -> None:
    s = Path(src)
    if not s.is_file():
        raise FileNotFoundError(src)
    if dry_run:
        logger.info("Would copy %s -> %s", src, dst)
        return
    Path(dst).parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(s, dst)
