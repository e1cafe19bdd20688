"""Data models for the install command."""

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_URL = "http://localhost:8000"


@dataclass
class InstallOptions:
    """Answers supplied up front. None means ask the operator."""

    base_dir: Path = field(default_factory=Path.cwd)
    name: str | None = None
    url: str | None = None
    migrate: bool | None = None
    cleanup: bool | None = None
    interactive: bool = True

    @property
    def env_path(self) -> Path:
        return self.base_dir / ".env"

    @property
    def default_name(self) -> str:
        return self.name or self.base_dir.resolve().name


@dataclass
class InstallReport:
    """What the install run actually changed."""

    dependencies_installed: bool = False
    env_created: bool = False
    env_flag_added: bool = False
    key_generated: bool = False
    migrated: bool = False
    cleaned_up: bool = False
    details_updated: bool = False
    name: str | None = None
    url: str | None = None

    @property
    def changed(self) -> bool:
        return any((
            self.dependencies_installed,
            self.env_created,
            self.env_flag_added,
            self.key_generated,
            self.migrated,
            self.cleaned_up,
            self.details_updated,
        ))
