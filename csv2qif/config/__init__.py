"""Configuration package."""

from csv2qif.config.settings import (
    AppSettings,
    ConfigLoadError,
    Settings,
    get_settings,
    load_config,
)

__all__ = [
    "AppSettings",
    "ConfigLoadError",
    "Settings",
    "get_settings",
    "load_config",
]
