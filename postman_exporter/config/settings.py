"""Centralized configuration management using pydantic-settings.

This module provides type-safe configuration with environment variable loading,
validation, and sensible defaults for all postman-exporter settings.
"""

from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE = "https://api.getpostman.com"


class PostmanSettings(BaseSettings):
    """Postman API configuration."""

    model_config = SettingsConfigDict(env_prefix="POSTMAN_", extra="ignore")

    api_key: SecretStr | None = Field(
        default=None,
        description="Postman API key sent as X-Api-Key",
    )
    api_base: str = Field(
        default=DEFAULT_API_BASE,
        description="Postman API base URL",
    )
    timeout_s: float | None = Field(
        default=None,
        description="Request timeout in seconds (unset means no timeout)",
    )

    @field_validator("api_base")
    @classmethod
    def normalize_api_base(cls, v: str) -> str:
        return v.rstrip("/")

    def get_api_key(self) -> str | None:
        """Return the plain API key, or None when unset or blank."""
        if self.api_key is None:
            return None
        return self.api_key.get_secret_value().strip() or None


class ExportSettings(BaseSettings):
    """Export pipeline configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    output_dir: str = Field(
        default="./openapi-exports",
        validation_alias="OUTPUT_DIR",
        description="Directory receiving one OpenAPI file per collection",
    )
    work_dir: str | None = Field(
        default=None,
        validation_alias="WORK_DIR",
        description="Directory for transient conversion files (default: cwd)",
    )
    converter: Literal["builtin", "p2o"] = Field(
        default="builtin",
        validation_alias="CONVERTER",
        description="Collection to OpenAPI converter implementation",
    )
    output_format: Literal["json", "yaml"] = Field(
        default="json",
        validation_alias="OUTPUT_FORMAT",
        description="Format the converter writes its intermediate document in",
    )

    @field_validator("converter", "output_format", mode="before")
    @classmethod
    def lowercase_choice(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    debug: bool = Field(
        default=False,
        validation_alias="DEBUG",
        description="Log request/response detail and stack traces",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level for postman_exporter namespace",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str) -> str:
        if isinstance(v, str):
            return v.upper()
        return v


class Settings(BaseSettings):
    """Root settings class with all nested configurations.

    Usage:
        from postman_exporter.config import get_settings

        settings = get_settings()
        api_base = settings.postman.api_base
        output_dir = settings.export.output_dir
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    postman: PostmanSettings = Field(default_factory=PostmanSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Singleton pattern for settings
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance.

    Returns:
        The singleton Settings instance with all configuration loaded.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
