"""Tests for configuration loading."""

from pathlib import Path

import pytest
import yaml

from garchy.config import ConfigManager
from garchy.exceptions import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GARCHY_ROOT", "GARCHY_DOTFILES_DIR", "GARCHY_ASSUME_YES", "GARCHY_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_file(tmp_path: Path) -> None:
    config = ConfigManager(tmp_path / "missing.yaml").load()

    assert config.paths.packages_dir == config.paths.root_dir / "packages"
    assert config.sources.aur_helper == "yay"
    assert config.sources.helper_prerequisites == ["base-devel", "git"]
    assert config.advanced.assume_yes is False


def test_yaml_values_and_path_expansion(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(
            {
                "paths": {"root_dir": "~/src/GArchy", "dotfiles_dir": str(tmp_path / "dots")},
                "mirrors": {"country": "Germany"},
                "dotfiles": {"enabled": False},
            },
            f,
        )

    config = ConfigManager(config_path).load()
    assert config.paths.root_dir == Path.home() / "src" / "GArchy"
    assert config.paths.packages_dir == Path.home() / "src" / "GArchy" / "packages"
    assert config.paths.dotfiles_dir == tmp_path / "dots"
    assert config.mirrors.country == "Germany"
    assert config.dotfiles.enabled is False


def test_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GARCHY_ROOT", str(tmp_path / "root"))
    monkeypatch.setenv("GARCHY_ASSUME_YES", "yes")
    monkeypatch.setenv("GARCHY_LOG_LEVEL", "debug")

    config = ConfigManager(tmp_path / "missing.yaml").load()
    assert config.paths.packages_dir == tmp_path / "root" / "packages"
    assert config.advanced.assume_yes is True
    assert config.advanced.log_level == "DEBUG"


def test_invalid_file_raises_config_error(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("advanced:\n  log_level: LOUD\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        ConfigManager(config_path).load()
