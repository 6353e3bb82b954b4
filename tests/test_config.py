"""Tests for configuration management."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from lsh.core.config import (
    GeneralSettings,
    RenderSettings,
    Settings,
    ShellSettings,
    clear_settings_cache,
    get_settings,
)

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


@pytest.fixture(autouse=True)
def clean_settings() -> Generator[None, None, None]:
    """Clear settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


class TestDefaultSettings:
    """Tests for default configuration values."""

    def test_general_defaults(self) -> None:
        settings = GeneralSettings()
        assert settings.log_level == "WARNING"
        assert settings.json_logs is False

    def test_shell_defaults(self) -> None:
        assert ShellSettings().prompt == "lsh> "

    def test_render_defaults(self) -> None:
        settings = RenderSettings()
        assert settings.color is True
        assert settings.max_column_width == 48
        assert settings.empty_text == "(empty table)"


class TestSettingsFromToml:
    """Tests for loading settings from TOML files."""

    def test_load_from_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.toml"
        config_file.write_text("""
[general]
log_level = "DEBUG"

[shell]
prompt = "$ "

[render]
max_column_width = 20
""")
        settings = Settings.from_toml(config_file)
        assert settings.general.log_level == "DEBUG"
        assert settings.shell.prompt == "$ "
        assert settings.render.max_column_width == 20
        assert settings.render.color is True

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_toml(tmp_path / "missing.toml")

    def test_invalid_width_rejected(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.toml"
        config_file.write_text("[render]\nmax_column_width = 1\n")
        with pytest.raises(ValueError):
            Settings.from_toml(config_file)


class TestEnvironmentOverrides:
    """Tests for LSH_* environment variables."""

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LSH_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LSH_RENDER_COLOR", "false")
        monkeypatch.setenv("LSH_SHELL_PROMPT", "% ")
        settings = Settings()
        assert settings.general.log_level == "DEBUG"
        assert settings.render.color is False
        assert settings.shell.prompt == "% "


class TestGetSettings:
    """Tests for get_settings."""

    def test_explicit_path(self, tmp_path: Path) -> None:
        config_file = tmp_path / "lsh.toml"
        config_file.write_text('[shell]\nprompt = "> "\n')
        assert get_settings(str(config_file)).shell.prompt == "> "

    def test_cached(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert get_settings() is get_settings()

    def test_to_dict(self) -> None:
        data = Settings().to_dict()
        assert set(data) == {"general", "shell", "render"}
        assert data["render"]["empty_text"] == "(empty table)"
