"""Configuration management for GArchy."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from garchy.exceptions import ConfigError
from garchy.models.config import AppConfig

_TRUTHY = ("true", "1", "yes", "y")


class ConfigManager:
    """Manages application configuration with YAML file and environment variable support."""

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize configuration manager.

        Args:
            config_path: Path to config file. If None, uses GARCHY_CONFIG_PATH
                        environment variable or defaults to ~/.config/garchy/config.yaml
        """
        if config_path is None:
            env_path = os.getenv("GARCHY_CONFIG_PATH")
            if env_path:
                config_path = Path(env_path).expanduser()
            else:
                config_home = Path(os.getenv("XDG_CONFIG_HOME", str(Path.home() / ".config")))
                config_path = config_home / "garchy" / "config.yaml"

        self.config_path = config_path
        self._config: AppConfig | None = None

    def load(self) -> AppConfig:
        """Load configuration from file and apply environment variable overrides.

        Returns:
            Loaded configuration

        Raises:
            ConfigError: If the YAML file is malformed or fails validation
        """
        config_data: dict[str, Any] = {}

        # 1. Load from YAML file if it exists
        if self.config_path.exists():
            try:
                with open(self.config_path, encoding="utf-8") as f:
                    config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(path=self.config_path, error=e) from e

        # 2. Create config object (applies defaults)
        try:
            config = AppConfig(**config_data)
        except ValidationError as e:
            raise ConfigError(path=self.config_path, error=e) from e

        # 3. Apply environment variable overrides
        return self._apply_env_overrides(config)

    def _apply_env_overrides(self, config: AppConfig) -> AppConfig:
        """Apply environment variable overrides.

        Recognized variables:
            - GARCHY_ROOT=~/GArchy (package lists live in $GARCHY_ROOT/packages)
            - GARCHY_DOTFILES_DIR=~/dotfiles
            - GARCHY_ASSUME_YES=1
            - GARCHY_LOG_LEVEL=DEBUG

        Args:
            config: Base configuration

        Returns:
            Configuration with environment overrides applied
        """
        if root := os.getenv("GARCHY_ROOT"):
            config.paths.root_dir = Path(root).expanduser()
            # Recalculate dependent paths
            config.paths.packages_dir = config.paths.root_dir / "packages"

        if dotfiles_dir := os.getenv("GARCHY_DOTFILES_DIR"):
            config.paths.dotfiles_dir = Path(dotfiles_dir).expanduser()

        if assume_yes := os.getenv("GARCHY_ASSUME_YES"):
            config.advanced.assume_yes = assume_yes.lower() in _TRUTHY

        if log_level := os.getenv("GARCHY_LOG_LEVEL"):
            if log_level.upper() in ("DEBUG", "INFO", "WARNING"):
                config.advanced.log_level = log_level.upper()  # type: ignore[assignment]

        return config

    def get_config(self) -> AppConfig:
        """Get configuration (singleton pattern).

        Returns:
            Current configuration
        """
        if self._config is None:
            self._config = self.load()
        return self._config

    def set_config(self, config: AppConfig) -> None:
        """Replace the active configuration (used after CLI overrides)."""
        self._config = config


# Global configuration manager instance
_config_manager = ConfigManager()


def get_config() -> AppConfig:
    """Get global application configuration.

    Returns:
        Application configuration
    """
    return _config_manager.get_config()


def set_config(config: AppConfig) -> None:
    _config_manager.set_config(config)


def use_config_file(config_path: Path) -> AppConfig:
    """Point the global manager at another file and load it.

    Args:
        config_path: Path to a YAML configuration file

    Returns:
        Loaded configuration
    """
    global _config_manager
    _config_manager = ConfigManager(config_path)
    return _config_manager.get_config()

