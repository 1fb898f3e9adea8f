"""Level-up artifacts produced by the progression calculator.

These are pure outputs of a single calculation. They are never persisted on
their own; the caller merges them into the character record on acceptance.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from binder_engine.models.character import Character, Spell
from binder_engine.models.reference import SpellDefinition


class _ArtifactModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class HPGainResult(_ArtifactModel):
    """Hit points gained on level-up.

    Attributes:
        roll: Raw hit-die roll, None in the fixed tier or for manual entry.
        constitution_bonus: Constitution modifier applied, None when not applied.
        total: Hit points gained, never below 1.
        max: Highest possible gain (die maximum + modifier), None when fixed.
        breakdown: Human-readable explanation for display.
        is_fixed: True when the flat fixed-tier gain was used.
    """

    roll: int | None = None
    constitution_bonus: int | None = None
    total: int = Field(ge=1)
    max: int | None = None
    breakdown: str = ""
    is_fixed: bool = False


class SpellLevelGroup(_ArtifactModel):
    """New picks at one spell level, with the spells available for them."""

    spell_level: int = Field(ge=1)
    count: int = Field(ge=1)
    spells: tuple[SpellDefinition, ...] = ()


class SpellGainInfo(_ArtifactModel):
    """Spells gained when moving to ``level``.

    ``new_spells_per_level[i]`` is the number of new picks at spell level
    ``i + 1``.
    """

    level: int
    new_spells_per_level: tuple[int, ...] = ()
    total_gained: int = 0
    grouped_by_level: tuple[SpellLevelGroup, ...] = ()

    def gained_at(self, spell_level: int) -> int:
        index = spell_level - 1
        if 0 <= index < len(self.new_spells_per_level):
            return self.new_spells_per_level[index]
        return 0


class LevelUpResult(_ArtifactModel):
    """An accepted level-up: the new record plus what was applied."""

    character: Character
    previous_level: int
    hp_gain: HPGainResult
    spells_added: tuple[Spell, ...] = ()


__all__ = [
    "HPGainResult",
    "SpellLevelGroup",
    "SpellGainInfo",
    "LevelUpResult",
]
