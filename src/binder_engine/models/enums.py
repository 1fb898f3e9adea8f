"""Enumeration types for the binder rules engine."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Ability(StrEnum):
    """The six named ability scores."""

    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    CONSTITUTION = "constitution"
    INTELLIGENCE = "intelligence"
    WISDOM = "wisdom"
    CHARISMA = "charisma"


class CreationStep(IntEnum):
    """Ordered character creation steps."""

    ABILITIES = 0
    RACE = 1
    CLASS = 2
    HIT_POINTS = 3
    EQUIPMENT = 4
    REVIEW = 5

    @property
    def label(self) -> str:
        """Display name of the step (e.g. 'Hit Points')."""
        return self.name.replace("_", " ").title()


__all__ = [
    "Ability",
    "CreationStep",
]
