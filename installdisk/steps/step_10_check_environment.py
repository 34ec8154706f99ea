from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..errors import SourceMediaError
from ..lib.bootsect import bootsect_path
from ..lib.privileges import require_admin

logger = logging.getLogger(__name__)

# Source media files every install disk needs, relative to the media root.
PAYLOAD_FILES = [("sources", "boot.wim")]
BOOT_FILES = [("bootmgr",), ("boot", "boot.sdi")]
SOURCE_BCD_STORES = [("boot", "bcd"), ("efi", "microsoft", "boot", "bcd")]


def check_source_media(source: Path, *, boot_files: bool) -> None:
    if not source.is_dir():
        raise SourceMediaError(f"Source media not found: {source}")

    required = list(PAYLOAD_FILES)
    if boot_files:
        required += BOOT_FILES

    missing = [str(source.joinpath(*parts)) for parts in required if not source.joinpath(*parts).is_file()]
    if boot_files and not bootsect_path(source).is_file():
        missing.append(str(bootsect_path(source)))
    if missing:
        raise SourceMediaError(f"Source media {source} is missing: {', '.join(missing)}")

    if boot_files and not any(source.joinpath(*parts).is_file() for parts in SOURCE_BCD_STORES):
        raise SourceMediaError(f"Source media {source} has no BCD store")


class CheckEnvironmentStep:
    step_id = "10_check_environment"

    def __init__(self, *, boot_files: bool = False) -> None:
        self.boot_files = boot_files

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state.get("config") or {}
        dry_run = bool(cfg.get("dry_run", False))

        require_admin(dry_run=dry_run)

        source = cfg.get("source")
        if source:
            check_source_media(Path(source), boot_files=self.boot_files)
            logger.info("Source media %s looks complete", source)

        wds_image = cfg.get("wds_image")
        if wds_image and not Path(wds_image).is_file():
            raise SourceMediaError(f"WDS boot image not found: {wds_image}")

        return state
