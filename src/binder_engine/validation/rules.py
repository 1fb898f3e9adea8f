"""Reusable validation rules.

``Rules`` collects the atomic predicates (type, bounds, string shape) and
the two domain rules that need reference tables. Those take the tables as
arguments so every rule stays pure and testable in isolation.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from binder_engine.core.constants import (
    ABILITY_NAMES,
    ABILITY_SCORE_MAX,
    ABILITY_SCORE_MIN,
    CHARACTER_NAME_MAX_LENGTH,
    CHARACTER_NAME_MIN_LENGTH,
    CHARACTER_NAME_PATTERN,
    CUSTOM_CLASS_PREFIX,
    CUSTOM_RACE_ID,
)
from binder_engine.validation.core import ValidationRule, create_rule


_NAME_RE = re.compile(CHARACTER_NAME_PATTERN)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integral(value: Any) -> bool:
    if _is_int(value):
        return True
    return isinstance(value, float) and value.is_integer()


def _valid_ability_score(value: Any) -> bool:
    return (
        _is_number(value)
        and _is_integral(value)
        and ABILITY_SCORE_MIN <= value <= ABILITY_SCORE_MAX
    )


def _valid_character_name(value: str) -> bool:
    trimmed = value.strip()
    return (
        CHARACTER_NAME_MIN_LENGTH <= len(trimmed) <= CHARACTER_NAME_MAX_LENGTH
        and _NAME_RE.match(trimmed) is not None
    )


class Rules:
    """Library of composable validation rules."""

    # Type checks
    is_string = create_rule("isString", lambda value: isinstance(value, str), "Must be a string")
    is_number = create_rule("isNumber", _is_number, "Must be a number")
    is_integer = create_rule("isInteger", _is_integral, "Must be an integer")

    # Ability scores
    is_valid_ability_score = create_rule(
        "isValidAbilityScore",
        _valid_ability_score,
        f"Must be an integer between {ABILITY_SCORE_MIN} and {ABILITY_SCORE_MAX}",
    )

    # Character name
    character_name = create_rule(
        "characterName",
        _valid_character_name,
        "Name must be 2-50 characters and contain only letters, spaces, "
        "hyphens, apostrophes, and periods",
    )

    # Collections
    non_empty_array = create_rule(
        "nonEmptyArray",
        lambda value: isinstance(value, (list, tuple)) and len(value) > 0,
        "Must select at least one item",
    )

    @staticmethod
    def min_value(minimum: float) -> ValidationRule:
        return create_rule("min", lambda value: value >= minimum, f"Must be at least {minimum}")

    @staticmethod
    def max_value(maximum: float) -> ValidationRule:
        return create_rule("max", lambda value: value <= maximum, f"Must be no more than {maximum}")

    @staticmethod
    def value_range(minimum: float, maximum: float) -> ValidationRule:
        return create_rule(
            "range",
            lambda value: minimum <= value <= maximum,
            f"Must be between {minimum} and {maximum}",
        )

    @staticmethod
    def min_length(minimum: int) -> ValidationRule:
        return create_rule(
            "minLength",
            lambda value: len(value) >= minimum,
            f"Must be at least {minimum} characters",
        )

    @staticmethod
    def max_length(maximum: int) -> ValidationRule:
        return create_rule(
            "maxLength",
            lambda value: len(value) <= maximum,
            f"Must be no more than {maximum} characters",
        )

    @staticmethod
    def pattern(regex: str | re.Pattern[str], message: str) -> ValidationRule:
        compiled = re.compile(regex) if isinstance(regex, str) else regex
        return create_rule("pattern", lambda value: compiled.search(value) is not None, message)

    @staticmethod
    def valid_race(available_races: Iterable[str] | Mapping[str, Any]) -> ValidationRule:
        """Race is empty, the custom sentinel, or a known race id."""
        race_ids = frozenset(available_races)
        return create_rule(
            "validRace",
            lambda value: value == "" or value == CUSTOM_RACE_ID or value in race_ids,
            "Selected race is not available",
        )

    @staticmethod
    def valid_class_array(available_classes: Iterable[str] | Mapping[str, Any]) -> ValidationRule:
        """Every class is custom-prefixed or a known class id."""
        class_ids = frozenset(available_classes)

        def predicate(classes: Any) -> bool:
            return isinstance(classes, (list, tuple)) and all(
                isinstance(class_id, str)
                and (class_id.startswith(CUSTOM_CLASS_PREFIX) or class_id in class_ids)
                for class_id in classes
            )

        return create_rule(
            "validClassArray",
            predicate,
            "One or more selected classes are not available",
        )


def _is_ability_score_structure(obj: Any) -> bool:
    if not isinstance(obj, Mapping):
        return False
    return _valid_ability_score(obj.get("value")) and _is_int(obj.get("modifier"))


def _has_valid_abilities(record: Any) -> bool:
    if not isinstance(record, Mapping):
        return False
    abilities = record.get("abilities")
    if not isinstance(abilities, Mapping):
        return False
    return all(_is_ability_score_structure(abilities.get(name)) for name in ABILITY_NAMES)


class TypeGuards:
    """Structural checks over raw (dict) records."""

    is_ability_score = create_rule(
        "isAbilityScore",
        _is_ability_score_structure,
        "Invalid ability score structure",
    )

    has_valid_abilities_structure = create_rule(
        "hasValidAbilitiesStructure",
        _has_valid_abilities,
        "Invalid character abilities structure",
    )


__all__ = [
    "Rules",
    "TypeGuards",
]
