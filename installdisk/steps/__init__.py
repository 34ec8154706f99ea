from .step_10_check_environment import CheckEnvironmentStep
from .step_20_partition_disk import PartitionDiskStep
from .step_25_discover_volumes import DiscoverVolumesStep
from .step_30_install_boot_sector import InstallBootSectorStep
from .step_40_copy_boot_files import CopyBootFilesStep
from .step_50_copy_installer import CopyInstallerStep
from .step_52_stage_wds_image import StageWdsImageStep
from .step_55_customize_image import CustomizeImageStep
from .step_60_configure_boot_manager import ConfigureBootManagerStep
from .step_70_add_boot_entries import AddBootEntriesStep

__all__ = [
    "CheckEnvironmentStep",
    "PartitionDiskStep",
    "DiscoverVolumesStep",
    "InstallBootSectorStep",
    "CopyBootFilesStep",
    "CopyInstallerStep",
    "StageWdsImageStep",
    "CustomizeImageStep",
    "ConfigureBootManagerStep",
    "AddBootEntriesStep",
]
