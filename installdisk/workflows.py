from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from .config import DiskConfig
from .disk import InstallDisk
from .errors import InstallDiskError
from .lib.command import CommandError
from .lib.env import PATHS
from .pipeline import Step, run_pipeline
from .state_store import new_state, record_error, resume_state, save_state
from .steps import (
    AddBootEntriesStep,
    CheckEnvironmentStep,
    ConfigureBootManagerStep,
    CopyBootFilesStep,
    CopyInstallerStep,
    CustomizeImageStep,
    DiscoverVolumesStep,
    InstallBootSectorStep,
    PartitionDiskStep,
    StageWdsImageStep,
)

logger = logging.getLogger(__name__)


def initialize_steps(disk_config: DiskConfig) -> List[Step]:
    return [
        CheckEnvironmentStep(boot_files=True),
        PartitionDiskStep(disk_config),
        DiscoverVolumesStep(),
        InstallBootSectorStep(disk_config),
        CopyBootFilesStep(),
        CopyInstallerStep(),
        ConfigureBootManagerStep(disk_config),
        AddBootEntriesStep(),
    ]


def add_installer_steps(disk_config: DiskConfig) -> List[Step]:
    return [
        CheckEnvironmentStep(),
        DiscoverVolumesStep(),
        CopyInstallerStep(into_subdirectory=True),
        CustomizeImageStep(disk_config, mode="search"),
        AddBootEntriesStep(),
    ]


def add_wds_installer_steps(disk_config: DiskConfig) -> List[Step]:
    return [
        CheckEnvironmentStep(),
        DiscoverVolumesStep(),
        StageWdsImageStep(),
        CustomizeImageStep(disk_config, mode="wds"),
        AddBootEntriesStep(),
    ]


WORKFLOWS: Dict[str, Callable[[DiskConfig], List[Step]]] = {
    "init": initialize_steps,
    "add": add_installer_steps,
    "add-wds": add_wds_installer_steps,
}


def run(
    operation: str,
    params: Dict[str, Any],
    *,
    disk_config: Optional[DiskConfig] = None,
    state_path: str = PATHS.state_default,
    resume: bool = False,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
) -> Dict[str, Any]:
    """Run one disk workflow, persisting the run record on every exit path."""

    disk_config = disk_config or DiskConfig()
    steps = WORKFLOWS[operation](disk_config)

    state = resume_state(state_path, operation, params) if resume else new_state(operation, params)

    try:
        result = run_pipeline(
            state=state,
            steps=steps,
            start_at=start_at,
            stop_after=stop_after,
            force=force,
        )
        state = result.state
        state["execution"]["summary"] = {
            "ran_steps": result.ran_steps,
            "skipped_steps": result.skipped_steps,
        }
        return state
    except (InstallDiskError, CommandError) as e:
        logger.error("%s failed at %s: %s", operation, state["execution"].get("current_step"), e)
        kind = e.kind.value if isinstance(e, InstallDiskError) else "command"
        record_error(state, kind=kind, error=str(e))
        raise
    except Exception as e:
        logger.exception("%s failed", operation)
        record_error(state, kind=None, error=str(e))
        raise
    finally:
        save_state(state_path, state)


def initialize_install_disk(
    disk_number: int,
    source: str,
    *,
    description: Optional[str] = None,
    dry_run: bool = False,
    **kwargs: Any,
) -> InstallDisk:
    """Wipe ``disk_number`` and turn it into an install disk for ``source``."""

    disk_config = kwargs.pop("disk_config", None) or DiskConfig()
    state = run(
        "init",
        {
            "disk_number": disk_number,
            "source": source,
            "description": description or disk_config.description,
            "dry_run": dry_run,
        },
        disk_config=disk_config,
        **kwargs,
    )
    return InstallDisk.from_state(state)


def add_installer(
    disk_number: int,
    source: str,
    name: str,
    *,
    description: Optional[str] = None,
    dry_run: bool = False,
    **kwargs: Any,
) -> InstallDisk:
    """Append the installer at ``source`` to an existing install disk."""

    state = run(
        "add",
        {
            "disk_number": disk_number,
            "source": source,
            "name": name,
            "description": description or name,
            "dry_run": dry_run,
        },
        **kwargs,
    )
    return InstallDisk.from_state(state)


def add_wds_installer(
    disk_number: int,
    boot_image: str,
    name: str,
    *,
    server: Optional[str] = None,
    description: Optional[str] = None,
    dry_run: bool = False,
    **kwargs: Any,
) -> InstallDisk:
    """Append a Windows Deployment Services client boot image."""

    state = run(
        "add-wds",
        {
            "disk_number": disk_number,
            "wds_image": boot_image,
            "wds_server": server,
            "name": name,
            "description": description or name,
            "dry_run": dry_run,
        },
        **kwargs,
    )
    return InstallDisk.from_state(state)
