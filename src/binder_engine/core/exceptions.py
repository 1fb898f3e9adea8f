"""Custom exception hierarchy for the character binder rules engine.

Expected validation failures are never raised; they come back as
``ValidationResult`` objects. The exceptions here cover structural problems
(malformed hit dice, unusable records, unreadable catalogs) and
infrastructure failures. All inherit from BinderError so callers at the
rendering boundary can catch a single type.

Example:
    >>> from binder_engine.core.exceptions import ProgressionError
    >>> raise ProgressionError("Invalid hit die format", hit_die="d8")
"""

from __future__ import annotations

from typing import Any


class BinderError(Exception):
    """Base exception for all binder engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Reference Data
# =============================================================================


class ConfigurationError(BinderError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ReferenceDataError(BinderError):
    """Raised when a race, class, or spell catalog cannot be loaded."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize reference data error with source context.

        Args:
            message: Human-readable error description.
            source: Catalog file or lookup key involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if source:
            combined_details["source"] = source
        super().__init__(message, details=combined_details)


# =============================================================================
# Migration
# =============================================================================


class MigrationError(BinderError):
    """Raised when a persisted record cannot be brought to the current schema.

    Missing substructures are defaulted during migration; this is reserved
    for input that is not a record at all (e.g. a list or a string).
    """

    def __init__(
        self,
        message: str,
        *,
        record_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize migration error with record context.

        Args:
            message: Human-readable error description.
            record_name: Name of the character being migrated, if known.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if record_name:
            combined_details["record_name"] = record_name
        super().__init__(message, details=combined_details)


# =============================================================================
# Progression
# =============================================================================


class ProgressionError(BinderError):
    """Raised when level-up math cannot be computed safely.

    Progression never substitutes a default for malformed input, since a
    silent default would corrupt the character's hit points.
    """

    def __init__(
        self,
        message: str,
        *,
        hit_die: str | None = None,
        class_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize progression error with class context.

        Args:
            message: Human-readable error description.
            hit_die: The hit-die expression involved.
            class_id: The class being levelled.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if hit_die is not None:
            combined_details["hit_die"] = hit_die
        if class_id:
            combined_details["class_id"] = class_id
        super().__init__(message, details=combined_details)


class DiceRollError(ProgressionError):
    """Raised when dice notation cannot be parsed or rolled."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression is not None:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class LevelUpError(ProgressionError):
    """Raised when a level-up is accepted without its required selections."""

    def __init__(
        self,
        message: str,
        *,
        required: int | None = None,
        selected: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize level-up error with spell selection counts.

        Args:
            message: Human-readable error description.
            required: Number of spell picks the level grants.
            selected: Number of spell picks supplied.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if required is not None:
            combined_details["required"] = required
        if selected is not None:
            combined_details["selected"] = selected
        super().__init__(message, details=combined_details)


# =============================================================================
# Persistence
# =============================================================================


class PersistenceError(BinderError):
    """Raised when the character store cannot read or write a record."""

    def __init__(
        self,
        message: str,
        *,
        record_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize persistence error with record context.

        Args:
            message: Human-readable error description.
            record_id: Identifier of the record involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if record_id:
            combined_details["record_id"] = record_id
        super().__init__(message, details=combined_details)


__all__ = [
    "BinderError",
    "ConfigurationError",
    "ReferenceDataError",
    "MigrationError",
    "ProgressionError",
    "DiceRollError",
    "LevelUpError",
    "PersistenceError",
]
