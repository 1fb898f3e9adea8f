"""Character creation step pipeline.

Six fixed steps, each independently queryable. A step never reads the
result of an earlier step; it re-derives every prerequisite from the
record, so the same record always produces the same verdict regardless of
the order in which steps are asked.

Example:
    >>> pipeline = ValidationPipeline(tables)
    >>> pipeline.validate_step(CreationStep.RACE, record).errors
    ['Please select a race for your character']
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from binder_engine.core.logging import get_logger
from binder_engine.models.character import Character
from binder_engine.models.enums import CreationStep
from binder_engine.models.reference import ReferenceTables, is_custom_race
from binder_engine.validation.core import ValidationResult, create_schema, validate
from binder_engine.validation.eligibility import (
    classes_missing_starting_spells,
    disallowed_classes,
    eligible_races,
    has_valid_ability_scores,
    has_valid_hit_points,
    is_race_eligible,
    starting_spell_message,
    unnamed_custom_classes,
)
from binder_engine.validation.rules import Rules


logger = get_logger(__name__)

MALFORMED_RECORD_MESSAGE = "Character record is malformed"


@dataclass(frozen=True)
class StepDefinition:
    """One creation step.

    Attributes:
        step: Position in the creation flow.
        name: Display name.
        validate: Pure check of a typed record.
    """

    step: CreationStep
    name: str
    validate: Callable[[Character], ValidationResult]


def coerce_character(record: Character | Mapping[str, Any]) -> Character:
    """Accept either a typed record or its wire dict.

    Raises:
        pydantic.ValidationError: If the dict does not fit the record model.
    """
    if isinstance(record, Character):
        return record
    return Character.model_validate(record)


# =============================================================================
# Step Checks
# =============================================================================


def _validate_abilities(character: Character, tables: ReferenceTables) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    if not has_valid_ability_scores(character):
        errors.append("Please roll or set all ability scores before proceeding.")
        return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

    if tables.races:
        eligible = {race.id for race in eligible_races(character, tables)}
        if not eligible:
            warnings.append(
                "Warning: Current ability scores don't meet requirements for any "
                "available races."
            )
        else:
            blocked = [race.name for race in tables.races.values() if race.id not in eligible]
            if blocked:
                warnings.append(f"Note: {', '.join(blocked)} won't be available with current scores.")

    return ValidationResult.ok(warnings)


def _validate_race(character: Character, tables: ReferenceTables) -> ValidationResult:
    if not character.race.strip():
        return ValidationResult.failure("Please select a race for your character")

    result = validate(character.race, create_schema([Rules.valid_race(tables.races)], required=True))
    if not result.is_valid:
        return result

    if is_custom_race(character.race):
        return ValidationResult.ok()

    race = tables.race(character.race)
    if race is None:
        return ValidationResult.failure("Selected race is not available")

    if not is_race_eligible(character, race):
        return ValidationResult.failure(
            f"Character doesn't meet ability requirements for {race.name}"
        )
    return ValidationResult.ok()


def _validate_class(character: Character, tables: ReferenceTables) -> ValidationResult:
    if not character.class_:
        return ValidationResult.failure("Please select a class for your character")
    if not character.race.strip():
        return ValidationResult.failure("Please select a race before choosing classes")

    errors = list(
        validate(character.class_, create_schema([Rules.valid_class_array(tables.classes)])).errors
    )

    if unnamed_custom_classes(character):
        errors.append("Please enter a name for your custom class")

    if not is_custom_race(character.race):
        race = tables.race(character.race)
        if race is None:
            return ValidationResult.failure("Selected race is not available", *errors)
        if disallowed_classes(character, race, tables):
            errors.append(f"Selected class is not allowed for {race.name}")

    for definition in classes_missing_starting_spells(character, tables):
        errors.append(starting_spell_message(definition))

    return ValidationResult(is_valid=not errors, errors=errors, warnings=[])


def _validate_hit_points(character: Character, tables: ReferenceTables) -> ValidationResult:
    if not has_valid_hit_points(character):
        return ValidationResult.failure("Please roll or set your hit points before proceeding.")
    return ValidationResult.ok()


def _validate_equipment(character: Character, tables: ReferenceTables) -> ValidationResult:
    # Equipment is optional.
    return ValidationResult.ok()


def _validate_review(character: Character, tables: ReferenceTables) -> ValidationResult:
    return validate(character.name, create_schema([Rules.character_name], required=True))


_STEP_CHECKS: dict[CreationStep, Callable[[Character, ReferenceTables], ValidationResult]] = {
    CreationStep.ABILITIES: _validate_abilities,
    CreationStep.RACE: _validate_race,
    CreationStep.CLASS: _validate_class,
    CreationStep.HIT_POINTS: _validate_hit_points,
    CreationStep.EQUIPMENT: _validate_equipment,
    CreationStep.REVIEW: _validate_review,
}


def create_validation_steps(tables: ReferenceTables) -> list[StepDefinition]:
    """Build the six step definitions bound to a set of reference tables."""

    def bind(check: Callable[[Character, ReferenceTables], ValidationResult]):
        return lambda character: check(character, tables)

    return [
        StepDefinition(step=step, name=step.label, validate=bind(check))
        for step, check in _STEP_CHECKS.items()
    ]


# =============================================================================
# Pipeline
# =============================================================================


class ValidationPipeline:
    """Step validator bound to one set of reference tables.

    Holds no per-record state; every query re-validates from scratch.
    """

    def __init__(self, tables: ReferenceTables) -> None:
        self.tables = tables
        self.steps = create_validation_steps(tables)
        self._by_index = {definition.step.value: definition for definition in self.steps}

    def validate_step(self, step: int, record: Character | Mapping[str, Any]) -> ValidationResult:
        """Validate one step. Unknown step indices are treated as valid."""
        definition = self._by_index.get(int(step))
        if definition is None:
            return ValidationResult.ok()
        try:
            character = coerce_character(record)
        except ValidationError as exc:
            logger.debug("Record failed model validation", step=int(step), errors=exc.error_count())
            return ValidationResult.failure(MALFORMED_RECORD_MESSAGE)
        return definition.validate(character)

    def is_step_disabled(self, step: int, record: Character | Mapping[str, Any]) -> bool:
        """True when the step's own check fails. Unknown indices are never disabled."""
        if int(step) not in self._by_index:
            return False
        return not self.validate_step(step, record).is_valid

    def validate_all(self, record: Character | Mapping[str, Any]) -> dict[CreationStep, ValidationResult]:
        return {definition.step: self.validate_step(definition.step, record) for definition in self.steps}

    def is_creation_complete(self, record: Character | Mapping[str, Any]) -> bool:
        """Creation is complete once the review step validates."""
        return self.validate_step(CreationStep.REVIEW, record).is_valid

    def step_message(self, step: int, record: Character | Mapping[str, Any]) -> str:
        """First blocking message of a step, or '' when it passes."""
        return self.validate_step(step, record).first_error


def validate_step(
    step_index: int,
    record: Character | Mapping[str, Any],
    tables: ReferenceTables,
) -> ValidationResult:
    """Validate one creation step against the given tables."""
    return ValidationPipeline(tables).validate_step(step_index, record)


def is_step_disabled(
    step_index: int,
    record: Character | Mapping[str, Any],
    tables: ReferenceTables,
) -> bool:
    return ValidationPipeline(tables).is_step_disabled(step_index, record)


def is_creation_complete(record: Character | Mapping[str, Any], tables: ReferenceTables) -> bool:
    return ValidationPipeline(tables).is_creation_complete(record)


__all__ = [
    "MALFORMED_RECORD_MESSAGE",
    "StepDefinition",
    "ValidationPipeline",
    "coerce_character",
    "create_validation_steps",
    "validate_step",
    "is_step_disabled",
    "is_creation_complete",
]
