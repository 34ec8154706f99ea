from __future__ import annotations

import logging
from typing import Any, Dict

from ..disk import InstallDisk
from ..lib.assets import copy_file

logger = logging.getLogger(__name__)


class StageWdsImageStep:
    step_id = "52_stage_wds_image"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state.get("config") or {}
        exe = state.setdefault("execution", {})
        disk = InstallDisk.from_state(state)

        subdir = exe.get("subdir") or disk.unique_subdirectory(cfg.get("name") or cfg["description"])
        exe["subdir"] = subdir
        exe["image_path"] = disk.image_path(subdir, "sources", "boot.wim")

        dst = disk.installer_root / subdir / "sources" / "boot.wim"
        copy_file(cfg["wds_image"], str(dst), dry_run=bool(cfg.get("dry_run", False)))
        logger.info("WDS boot image staged at %s", dst)
        return state
