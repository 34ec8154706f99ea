from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .lib.env import PATHS


@dataclass(frozen=True)
class DiskConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    @property
    def timeout(self) -> int:
        value = self._section("boot_menu").get("timeout")
        return 10 if value is None else int(value)

    @property
    def display_boot_menu(self) -> bool:
        value = self._section("boot_menu").get("display")
        return True if value is None else bool(value)

    @property
    def description(self) -> str:
        return str(self._section("boot_menu").get("description") or "Windows Setup")

    @property
    def boot_volume_size_mib(self) -> int:
        return int(self._section("partitions").get("boot_size_mib") or 1024)

    @property
    def boot_label(self) -> str:
        return str(self._section("partitions").get("boot_label") or "BOOT")

    @property
    def installer_label(self) -> str:
        return str(self._section("partitions").get("installer_label") or "INSTALL")

    @property
    def bootsect_mode(self) -> str:
        return str(self.raw.get("bootsect_mode") or "nt60")

    @property
    def image_index(self) -> int:
        # Index 2 of install media boot.wim is "Microsoft Windows Setup".
        return int(self._section("image").get("index") or 2)

    @property
    def work_dir(self) -> str:
        return str(self._section("paths").get("work_dir") or PATHS.work_default)


def load_disk_config(path: Optional[str]) -> DiskConfig:
    if path is None:
        return DiskConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("installdisk config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the installdisk config") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping/object")

    return DiskConfig(raw=raw)
