# Sidebarctl Configuration Schema
# Pydantic models for YAML configuration validation

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from sidebarctl.sections import is_known_toggle
from sidebarctl.store.kinds import FormatSuffix

ICLOUD_DRIVE_PATH = "~/Library/Mobile Documents/com~apple~CloudDocs"


def _expand(path: str) -> str:
    return str(Path(path).expanduser())


class ReloadConfig(BaseModel):
    """How changes are made visible to Finder."""

    force: bool = Field(default=False, description="Also restart Finder when reloading")
    after_apply: bool = Field(default=True, description="Reload automatically after --apply")


class FavoritesProfile(BaseModel):
    """Favorites written by --apply, in display order."""

    paths: list[str] = Field(
        default_factory=lambda: ["~", "/Applications", "~/Downloads"],
        validate_default=True,
        description="Paths always added",
    )
    optional_paths: list[str] = Field(
        default_factory=lambda: [ICLOUD_DRIVE_PATH],
        validate_default=True,
        description="Paths added only when they exist",
    )

    @field_validator("paths", "optional_paths")
    @classmethod
    def expand_paths(cls, v: list[str]) -> list[str]:
        """Expand ~ in paths."""
        return [_expand(p) for p in v]

    def resolved_paths(self) -> list[str]:
        """Configured paths followed by the optional paths that exist."""
        return list(self.paths) + [p for p in self.optional_paths if Path(p).exists()]


class OutputConfig(BaseModel):
    """Output configuration."""

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")


class SidebarConfig(BaseModel):
    """Root configuration model for sidebarctl."""

    shared_file_list_dir: Optional[str] = Field(
        default=None, description="Shared file list directory (default: ~/Library/Application Support/...)"
    )
    format: FormatSuffix = Field(default=FormatSuffix.AUTO, description="Store file format marker")
    reload: ReloadConfig = Field(default_factory=ReloadConfig, description="Reload settings")
    favorites: FavoritesProfile = Field(default_factory=FavoritesProfile, description="Favorites profile")
    sections: list[str] = Field(
        default_factory=lambda: ["all-hidden"], description="Section toggles applied by --apply"
    )
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")

    @field_validator("shared_file_list_dir")
    @classmethod
    def expand_optional_dir(cls, v: Optional[str]) -> Optional[str]:
        """Expand ~ in the directory override."""
        if v is None:
            return None
        return _expand(v)

    @field_validator("sections")
    @classmethod
    def check_sections(cls, v: list[str]) -> list[str]:
        """Accept toggle names with or without leading dashes."""
        names = [name.lstrip("-") for name in v]
        unknown = [name for name in names if not is_known_toggle(name)]
        if unknown:
            raise ValueError(f"Unknown section toggle(s): {', '.join(unknown)}")
        return names
