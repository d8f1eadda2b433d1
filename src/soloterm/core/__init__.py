"""Core module providing configuration, logging and base exceptions.

Exports:
    Exceptions:
        SoloTermError: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Field constraint violations.
        FieldError: Messages for one field.
        NotFoundError: A referenced record does not exist.
        PersistenceError: The underlying store failed.

    Configuration:
        Settings: Main application settings class.
        StorageSettings: Database settings.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries inside a block.
"""

from __future__ import annotations

from soloterm.core.config import (
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from soloterm.core.exceptions import (
    ConfigurationError,
    FieldError,
    NotFoundError,
    PersistenceError,
    SoloTermError,
    ValidationError,
    field_errors_from,
)
from soloterm.core.logging import (
    bind_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "SoloTermError",
    "ConfigurationError",
    "ValidationError",
    "FieldError",
    "field_errors_from",
    "NotFoundError",
    "PersistenceError",
    # Configuration
    "Settings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
]
