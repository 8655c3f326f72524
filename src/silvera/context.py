from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

CONFIG_NAME = "silvera.conf"
HIDDEN_DIR = ".slv"
TEMPLATE_NAME = "template.html"

@dataclass(frozen=True)
class BuildContext:
    workspace: Path
    source_dir: Path
    addon_dir: Path
    config_name: str = CONFIG_NAME
    hidden_dir: str = HIDDEN_DIR

    @classmethod
    def for_workspace(cls, workspace: Path) -> "BuildContext":
        root = Path(workspace).expanduser().resolve()
        return cls(workspace=root, source_dir=root / "src", addon_dir=root / "addons")

    @property
    def config_file(self) -> Path:
        return self.workspace / self.config_name

    def local_config_file(self, directory: Path) -> Path:
        """Where the override for ``directory`` lives: ``<directory>/.slv/silvera.conf``."""
        return directory / self.hidden_dir / self.config_name

    def workspace_path(self, value: Path) -> Path:
        """Resolve a configured path; relative paths are taken from the workspace root."""
        p = Path(value).expanduser()
        return p if p.is_absolute() else self.workspace / p
