"""Validation layer: rule primitives, creation steps, and cascade checks."""

from binder_engine.validation.cascade import (
    CascadeChange,
    CascadeChangeKind,
    CascadeOutcome,
    cascade_validate,
)
from binder_engine.validation.character import validate_character, validate_imported_character
from binder_engine.validation.core import (
    REQUIRED_MESSAGE,
    ValidationResult,
    ValidationRule,
    ValidationSchema,
    create_rule,
    create_schema,
    is_empty,
    validate,
)
from binder_engine.validation.rules import Rules, TypeGuards
from binder_engine.validation.steps import (
    StepDefinition,
    ValidationPipeline,
    create_validation_steps,
    is_creation_complete,
    is_step_disabled,
    validate_step,
)


__all__ = [
    # Core
    "REQUIRED_MESSAGE",
    "ValidationRule",
    "ValidationSchema",
    "ValidationResult",
    "create_rule",
    "create_schema",
    "is_empty",
    "validate",
    # Rules
    "Rules",
    "TypeGuards",
    # Steps
    "StepDefinition",
    "ValidationPipeline",
    "create_validation_steps",
    "validate_step",
    "is_step_disabled",
    "is_creation_complete",
    # Cascade
    "CascadeChangeKind",
    "CascadeChange",
    "CascadeOutcome",
    "cascade_validate",
    # Whole record
    "validate_character",
    "validate_imported_character",
]
