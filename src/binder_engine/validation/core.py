"""Validation core: rules, schemas, and the ``validate`` entry point.

Expected failures are data, not exceptions. ``validate`` always returns a
ValidationResult, and a rule whose predicate raises is reported as a
generic error rather than crashing the caller.

Example:
    >>> from binder_engine.validation.core import create_schema, validate
    >>> from binder_engine.validation.rules import Rules
    >>> result = validate(20, create_schema([Rules.is_valid_ability_score], required=True))
    >>> result.is_valid
    False
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from binder_engine.core.logging import get_logger


logger = get_logger(__name__)

REQUIRED_MESSAGE = "This field is required"


@dataclass(frozen=True)
class ValidationRule:
    """A named predicate with a fixed failure message.

    Attributes:
        name: Rule identifier, used in the fallback message if it raises.
        predicate: Pure function returning True when the value passes.
        message: Message reported when the predicate returns False.
    """

    name: str
    predicate: Callable[[Any], bool]
    message: str

    def check(self, value: Any) -> bool:
        """Evaluate the predicate directly (exceptions propagate)."""
        return bool(self.predicate(value))


@dataclass(frozen=True)
class ValidationSchema:
    """An ordered list of rules plus a required flag."""

    rules: tuple[ValidationRule, ...] = ()
    required: bool = False


@dataclass
class ValidationResult:
    """Outcome of validating a value or a creation step.

    Attributes:
        is_valid: True when no errors were found.
        errors: Messages that block progress.
        warnings: Informational messages that do not block progress.
    """

    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def ok(cls, warnings: Iterable[str] = ()) -> ValidationResult:
        return cls(is_valid=True, errors=[], warnings=list(warnings))

    @classmethod
    def failure(cls, *errors: str, warnings: Iterable[str] = ()) -> ValidationResult:
        return cls(is_valid=False, errors=list(errors), warnings=list(warnings))

    def merge(self, other: ValidationResult) -> ValidationResult:
        """Combine two results; invalid if either is invalid."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=[*self.errors, *other.errors],
            warnings=[*self.warnings, *other.warnings],
        )

    @property
    def first_error(self) -> str:
        """First error message, or '' when valid."""
        return self.errors[0] if self.errors else ""


def create_rule(name: str, predicate: Callable[[Any], bool], message: str) -> ValidationRule:
    """Build a ValidationRule."""
    return ValidationRule(name=name, predicate=predicate, message=message)


def create_schema(rules: Iterable[ValidationRule], required: bool = False) -> ValidationSchema:
    """Build a ValidationSchema from rules in evaluation order."""
    return ValidationSchema(rules=tuple(rules), required=required)


def is_empty(value: Any) -> bool:
    """True for None, blank strings, and empty collections.

    Zero and False are values, not absence.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


def validate(value: Any, schema: ValidationSchema) -> ValidationResult:
    """Validate a value against a schema.

    Args:
        value: The value to check.
        schema: Rules to apply and whether the value is required.

    Returns:
        A ValidationResult carrying every failing rule's message.
    """
    if is_empty(value):
        if schema.required:
            return ValidationResult.failure(REQUIRED_MESSAGE)
        return ValidationResult.ok()

    errors: list[str] = []
    for rule in schema.rules:
        try:
            passed = rule.check(value)
        except Exception as exc:  # noqa: BLE001 - a faulty rule must not crash the caller
            logger.debug("Validation rule raised", rule=rule.name, error=str(exc))
            errors.append(f"Validation error: {rule.name}")
            continue
        if not passed:
            errors.append(rule.message)

    return ValidationResult(is_valid=not errors, errors=errors, warnings=[])


__all__ = [
    "REQUIRED_MESSAGE",
    "ValidationRule",
    "ValidationSchema",
    "ValidationResult",
    "create_rule",
    "create_schema",
    "is_empty",
    "validate",
]
