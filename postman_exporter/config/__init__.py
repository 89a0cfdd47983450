"""Configuration module for postman-exporter.

This module provides centralized, type-safe configuration management
using pydantic-settings with environment variable loading.

Usage:
    from postman_exporter.config import get_settings

    settings = get_settings()

    # Access Postman API settings
    api_base = settings.postman.api_base

    # Access sensitive values (use .get_secret_value() for actual value)
    api_key = settings.postman.api_key.get_secret_value()
"""

from postman_exporter.config.settings import (
    DEFAULT_API_BASE,
    ExportSettings,
    LoggingSettings,
    PostmanSettings,
    Settings,
    get_settings,
    reset_settings,
)

__all__ = [
    "DEFAULT_API_BASE",
    "ExportSettings",
    "LoggingSettings",
    "PostmanSettings",
    "Settings",
    "get_settings",
    "reset_settings",
]
