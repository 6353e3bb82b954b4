"""Configuration management for lsh.

Loads configuration from TOML files with environment variable overrides.
Uses pydantic-settings for validation and type safety.
"""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeneralSettings(BaseSettings):
    """General application settings."""

    model_config = SettingsConfigDict(env_prefix="LSH_")

    log_level: str = Field(default="WARNING", description="Log level")
    json_logs: bool = Field(default=False, description="Enable JSON structured logging")


class ShellSettings(BaseSettings):
    """Interactive shell settings."""

    model_config = SettingsConfigDict(env_prefix="LSH_SHELL_")

    prompt: str = Field(default="lsh> ", description="Prompt shown before each line")


class RenderSettings(BaseSettings):
    """Table rendering settings."""

    model_config = SettingsConfigDict(env_prefix="LSH_RENDER_")

    color: bool = Field(default=True, description="Highlight table headers")
    max_column_width: int = Field(
        default=48,
        description="Truncate cells wider than this",
        ge=4,
    )
    empty_text: str = Field(default="(empty table)", description="Shown for tables without rows")


class Settings(BaseSettings):
    """Main application settings.

    Configuration is loaded in the following order (later overrides earlier):
    1. Default values in this class
    2. Values from config.toml (if exists)
    3. Environment variables (LSH_* prefix)
    """

    model_config = SettingsConfigDict(env_prefix="LSH_")

    general: GeneralSettings = Field(default_factory=GeneralSettings)
    shell: ShellSettings = Field(default_factory=ShellSettings)
    render: RenderSettings = Field(default_factory=RenderSettings)

    @classmethod
    def from_toml(cls, path: Path | str) -> Settings:
        """Load settings from a TOML file.

        Args:
            path: Path to the TOML file.

        Returns:
            Settings instance with values from the file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
        """
        path = Path(path)
        with path.open("rb") as f:
            data = tomllib.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create settings from a dictionary."""
        return cls(
            general=GeneralSettings(**data.get("general", {})),
            shell=ShellSettings(**data.get("shell", {})),
            render=RenderSettings(**data.get("render", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to a dictionary."""
        return {
            "general": self.general.model_dump(),
            "shell": self.shell.model_dump(),
            "render": self.render.model_dump(),
        }


CONFIG_SEARCH_PATHS: tuple[Path, ...] = (
    Path("config.toml"),
    Path("lsh.toml"),
    Path.home() / ".config" / "lsh" / "config.toml",
    Path("/etc/lsh/config.toml"),
)


def find_config_file() -> Path | None:
    """Find the config file in standard locations."""
    for path in CONFIG_SEARCH_PATHS:
        if path.exists():
            return path
    return None


@lru_cache
def get_settings(config_path: str | None = None) -> Settings:
    """Get the application settings.

    Settings are loaded from:
    1. Default values
    2. Config file (if found or specified)
    3. Environment variables

    The result is cached after first call.

    Args:
        config_path: Optional explicit path to config file.

    Returns:
        The resolved Settings instance.
    """
    settings = Settings()

    path = Path(config_path) if config_path else find_config_file()
    if path and path.exists():
        settings = Settings.from_toml(path)

    # Environment variables are loaded by pydantic-settings and override
    # the values from the TOML file
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
