from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _data_root() -> Path:
    return Path(os.environ.get("PROGRAMDATA") or Path.home()) / "installdisk"


@dataclass(frozen=True)
class Paths:
    state_default: str = field(default_factory=lambda: str(_data_root() / "state.json"))
    log_default: str = field(default_factory=lambda: str(_data_root() / "installdisk.log"))
    work_default: str = field(default_factory=lambda: str(_data_root() / "work"))


PATHS = Paths()

# Volumes reported in dry-run mode, where nothing is partitioned.
DRY_RUN_BOOT_VOLUME = "S:"
DRY_RUN_INSTALLER_VOLUME = "T:"
