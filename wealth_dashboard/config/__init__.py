"""Configuration package."""

from wealth_dashboard.config.settings import (
    AppSettings,
    DatabaseSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
