"""Configuration management for SoloTerm.

Settings are loaded with pydantic-settings from environment variables and an
optional .env file.

Example:
    >>> from soloterm.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.storage.database_path)

Environment Variables:
    SOLOTERM_DATABASE_PATH: Path to the SQLite database file
    SOLOTERM_ENABLE_WAL: Use write-ahead logging (true/false)
    SOLOTERM_BUSY_TIMEOUT_SECONDS: Seconds to wait for the write lock
    SOLOTERM_DEBUG: Force DEBUG logging (true/false)
    SOLOTERM_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    SOLOTERM_LOG_JSON: Emit JSON logs (true/false)
    SOLOTERM_LOG_FILE: Optional log file path
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from soloterm.core.exceptions import ConfigurationError


def _default_database_path() -> Path:
    return Path.home() / "soloterm" / "soloterm.db"


class StorageSettings(BaseSettings):
    """Configuration for the local SQLite store.

    Attributes:
        database_path: Path to the SQLite database file.
        enable_wal: Put the database in write-ahead-logging mode.
        busy_timeout_seconds: How long a connection waits for the write lock.
    """

    model_config = SettingsConfigDict(
        env_prefix="SOLOTERM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default_factory=_default_database_path,
        validate_default=True,
        description="Path to SQLite database",
    )
    enable_wal: bool = Field(
        default=True,
        description="Enable WAL journal mode",
    )
    busy_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=120,
        description="Seconds to wait for a locked database",
    )

    @field_validator("database_path", mode="after")
    @classmethod
    def ensure_parent_exists(cls, value: Path) -> Path:
        """Create the database's parent directory if necessary.

        Args:
            value: The database path.

        Returns:
            The validated path.
        """
        value = value.expanduser()
        value.parent.mkdir(parents=True, exist_ok=True)
        return value


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Log at DEBUG whatever log_level says.
        log_level: Application logging level.
        log_json: Emit logs as JSON.
        log_file: File that receives the logs instead of stderr.
        storage: Database settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="SOLOTERM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="SoloTerm",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Force DEBUG logging",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON logs",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file",
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
