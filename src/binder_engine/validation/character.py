"""Whole-record validation used when importing characters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from binder_engine.core.config import get_settings
from binder_engine.core.constants import MIN_CHARACTER_LEVEL
from binder_engine.models.character import Character
from binder_engine.models.reference import ReferenceTables
from binder_engine.validation.core import ValidationResult, create_schema, validate
from binder_engine.validation.eligibility import has_valid_ability_scores, has_valid_hit_points
from binder_engine.validation.rules import Rules, TypeGuards
from binder_engine.validation.steps import MALFORMED_RECORD_MESSAGE, coerce_character


def validate_character(record: Any, tables: ReferenceTables) -> ValidationResult:
    """Structural check of a raw record against the reference tables.

    Checks the abilities structure, then the race id, then the class list,
    stopping at the first failing section.

    Args:
        record: Wire dict (or typed record) to check.
        tables: Reference data for race and class ids.

    Returns:
        ValidationResult with at most one error.
    """
    if isinstance(record, Character):
        record = record.to_record()
    if not isinstance(record, Mapping):
        return ValidationResult.failure("Character must be an object")

    abilities = validate(record, create_schema([TypeGuards.has_valid_abilities_structure]))
    if not abilities.is_valid:
        return ValidationResult.failure("Invalid abilities structure")

    race = record.get("race")
    if isinstance(race, str):
        result = validate(race, create_schema([Rules.valid_race(tables.races)]))
        if not result.is_valid:
            return ValidationResult.failure("Invalid race selection")

    classes = record.get("class")
    if isinstance(classes, str):
        classes = [classes] if classes else []
    if isinstance(classes, list):
        result = validate(classes, create_schema([Rules.valid_class_array(tables.classes)]))
        if not result.is_valid:
            return ValidationResult.failure("Invalid class selection")

    return ValidationResult.ok()


def validate_imported_character(record: Character | Mapping[str, Any]) -> ValidationResult:
    """Integrity check of an imported record, reporting every problem."""
    try:
        character = coerce_character(record)
    except ValidationError:
        return ValidationResult.failure(MALFORMED_RECORD_MESSAGE)

    max_level = get_settings().rules.max_character_level
    errors: list[str] = []

    if not has_valid_ability_scores(character):
        errors.append("Invalid ability scores (must be between 3-18)")
    if not has_valid_hit_points(character):
        errors.append("Invalid hit points (must be greater than 0)")
    if not character.name.strip():
        errors.append("Character name is required")
    if not MIN_CHARACTER_LEVEL <= character.level <= max_level:
        errors.append(f"Character level must be between {MIN_CHARACTER_LEVEL} and {max_level}")

    return ValidationResult(is_valid=not errors, errors=errors, warnings=[])


__all__ = [
    "validate_character",
    "validate_imported_character",
]
