"""Core module providing configuration, logging, constants, and exceptions.

Exports:
    Exceptions:
        BinderError: Base exception for all engine errors.
        ConfigurationError, ReferenceDataError, MigrationError,
        ProgressionError, DiceRollError, LevelUpError, PersistenceError.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging, get_logger, bind_context, clear_context,
        record_context.
"""

from __future__ import annotations

from binder_engine.core.config import (
    ReferenceSettings,
    RulesSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from binder_engine.core.exceptions import (
    BinderError,
    ConfigurationError,
    DiceRollError,
    LevelUpError,
    MigrationError,
    PersistenceError,
    ProgressionError,
    ReferenceDataError,
)
from binder_engine.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    record_context,
)


__all__ = [
    # Exceptions
    "BinderError",
    "ConfigurationError",
    "ReferenceDataError",
    "MigrationError",
    "ProgressionError",
    "DiceRollError",
    "LevelUpError",
    "PersistenceError",
    # Configuration
    "Settings",
    "RulesSettings",
    "StorageSettings",
    "ReferenceSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "record_context",
]
