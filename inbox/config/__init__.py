"""Configuration management."""

from .paths import AppPaths
from .settings import (
    ConnectionSettings,
    LoggingSettings,
    PaginationSettings,
    ScrollSettings,
    Settings,
    SettingsManager,
    get_settings,
)

__all__ = [
    "AppPaths",
    "ConnectionSettings",
    "LoggingSettings",
    "PaginationSettings",
    "ScrollSettings",
    "Settings",
    "SettingsManager",
    "get_settings",
]
