"""
Configuration Management for Wealth Dashboard

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Relational database configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    url: str = Field(
        default="sqlite:///wealth_dashboard.db",
        description="SQLAlchemy database URL"
    )
    echo: bool = Field(
        default=False,
        description="Log every SQL statement"
    )
    connect_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Connection attempts before giving up"
    )

    @field_validator('url')
    @classmethod
    def normalize_postgres_scheme(cls, v: str) -> str:
        """Hosted providers hand out postgres:// URLs; SQLAlchemy wants postgresql://."""
        if v.startswith("postgres://"):
            return "postgresql://" + v[len("postgres://"):]
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class StorageSettings(BaseSettings):
    """Client-side durable storage (filter state and other UI preferences)."""

    model_config = SettingsConfigDict(
        env_prefix="STATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    dir: str = Field(
        default=str(Path.home() / ".wealth_dashboard"),
        description="Directory holding the local storage file"
    )
    filename: str = Field(
        default="local_storage.json",
        description="Name of the local storage file"
    )

    @property
    def path(self) -> Path:
        return Path(self.dir).expanduser() / self.filename


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    # Identity (the external provider hands us an opaque id)
    dashboard_user_id: str = Field(
        default="local-user",
        min_length=1,
        description="Identifier of the signed-in user"
    )

    # Display
    currency: str = Field(
        default="EUR",
        min_length=3,
        max_length=3,
        description="Currency used for display"
    )

    # Investments sandbox
    forecast_rate: float = Field(
        default=0.07,
        ge=0.0,
        le=1.0,
        description="Annual growth rate used by the forecast sandbox"
    )
    forecast_years: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Number of years shown by the forecast sandbox"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def database(self) -> DatabaseSettings:
        return DatabaseSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("database", "storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
