"""Configuration data models for GArchy."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


def _expand(v: str | Path | None) -> Path | None:
    if v is None:
        return None
    if isinstance(v, str):
        return Path(v).expanduser()
    return v


class PathsConfig(BaseModel):
    """Paths configuration."""

    root_dir: Path = Field(default_factory=lambda: Path.home() / "GArchy")
    packages_dir: Path | None = None
    dotfiles_dir: Path = Field(default_factory=lambda: Path.home() / "dotfiles")
    home_dir: Path = Field(default_factory=Path.home)

    @field_validator("root_dir", "dotfiles_dir", "home_dir", mode="before")
    @classmethod
    def expand_dir(cls, v: str | Path) -> Path:
        """Expand user path for required directories."""
        return _expand(v)  # type: ignore[return-value]

    @field_validator("packages_dir", mode="before")
    @classmethod
    def expand_optional_path(cls, v: str | Path | None) -> Path | None:
        """Expand user path for optional paths."""
        return _expand(v)

    def model_post_init(self, __context: object) -> None:
        """Derive the package list directory from the root if not specified."""
        if self.packages_dir is None:
            self.packages_dir = self.root_dir / "packages"


class SourcesConfig(BaseModel):
    """Package source configuration."""

    pacman_command: list[str] = Field(default_factory=lambda: ["sudo", "pacman"])
    aur_helper: str = "yay"
    helper_repo_url: str = "https://aur.archlinux.org/yay-bin.git"
    helper_prerequisites: list[str] = Field(default_factory=lambda: ["base-devel", "git"])
    community_enabled: bool = True
    # Query the package database after each batch instead of trusting the text scan alone
    verify_with_query: bool = False


class MirrorsConfig(BaseModel):
    """Mirrorlist refresh (reflector) configuration."""

    enabled: bool = True
    country: str = "Canada"
    latest: int = 20
    protocol: str = "https"
    sort: str = "rate"
    mirrorlist_path: str = "/etc/pacman.d/mirrorlist"


class DotfilesConfig(BaseModel):
    """Dotfiles deployment configuration."""

    enabled: bool = True
    repo_url: str = "https://github.com/madmax3553/dotfiles"
    stow_command: str = "stow"
    # Optional JSON file replacing the bundled bundle requirement table
    rules_file: Path | None = None

    @field_validator("rules_file", mode="before")
    @classmethod
    def expand_rules_file(cls, v: str | Path | None) -> Path | None:
        """Expand user path for the rules file."""
        return _expand(v)


class ServicesConfig(BaseModel):
    """System service activation configuration."""

    enabled: bool = True
    user_groups: list[str] = Field(default_factory=lambda: ["video", "audio", "input"])
    rules_file: Path | None = None

    @field_validator("rules_file", mode="before")
    @classmethod
    def expand_rules_file(cls, v: str | Path | None) -> Path | None:
        """Expand user path for the rules file."""
        return _expand(v)


class AdvancedConfig(BaseModel):
    """Advanced configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING"] = "INFO"
    log_format: Literal["console", "json"] = "console"
    assume_yes: bool = False
    skip_preflight: bool = False


class AppConfig(BaseModel):
    """Application configuration."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    mirrors: MirrorsConfig = Field(default_factory=MirrorsConfig)
    dotfiles: DotfilesConfig = Field(default_factory=DotfilesConfig)
    services: ServicesConfig = Field(default_factory=ServicesConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)
