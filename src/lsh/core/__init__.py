"""Configuration and the filter registry."""

from lsh.core.config import (
    GeneralSettings,
    RenderSettings,
    Settings,
    ShellSettings,
    clear_settings_cache,
    get_settings,
)
from lsh.core.registry import (
    FilterAlreadyRegisteredError,
    FilterHandler,
    FilterInfo,
    FilterNotFoundError,
    FilterRegistry,
    InvalidHandlerError,
    RegistryError,
    RegistryFrozenError,
)

__all__ = [
    "FilterAlreadyRegisteredError",
    "FilterHandler",
    "FilterInfo",
    "FilterNotFoundError",
    "FilterRegistry",
    "GeneralSettings",
    "InvalidHandlerError",
    "RegistryError",
    "RegistryFrozenError",
    "RenderSettings",
    "Settings",
    "ShellSettings",
    "clear_settings_cache",
    "get_settings",
]
