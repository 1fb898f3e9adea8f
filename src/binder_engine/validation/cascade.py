"""Cascade validation after an upstream selection changes.

When a race or class is changed on an existing record, downstream choices
may no longer hold. ``cascade_validate`` re-derives everything from the
record and the reference tables on every call. It auto-clears only data
that can no longer resolve at all:

- class ids that are neither custom nor in the class table,
- spells none of whose class levels belong to a selected class,
- preparation metadata pointing above the highest slot level the
  character now has.

Soft failures (a class the race does not allow, unmet ability
requirements, missing starting spells) are reported through the step
results and the offending selections are left in place.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from binder_engine.core.exceptions import MigrationError
from binder_engine.core.logging import get_logger
from binder_engine.migration.transform import ensure_current
from binder_engine.models.character import Character, Spell
from binder_engine.models.enums import CreationStep
from binder_engine.models.reference import ReferenceTables
from binder_engine.validation.core import ValidationResult
from binder_engine.validation.eligibility import (
    has_custom_class,
    highest_slot_level,
    is_spell_resolvable,
    unresolved_classes,
)
from binder_engine.validation.steps import MALFORMED_RECORD_MESSAGE, ValidationPipeline


logger = get_logger(__name__)


class CascadeChangeKind(StrEnum):
    """What an auto-clear removed."""

    CLASS_REMOVED = "class_removed"
    SPELL_REMOVED = "spell_removed"
    PREPARATION_CLEARED = "preparation_cleared"


@dataclass(frozen=True)
class CascadeChange:
    """One auto-clear applied to the record.

    Attributes:
        kind: Category of the change.
        target: Class id or spell name affected.
        reason: Human-readable explanation.
    """

    kind: CascadeChangeKind
    target: str
    reason: str


@dataclass
class CascadeOutcome:
    """Result of a cascade pass.

    Attributes:
        record: The record after auto-clears, or None when the input could
            not be read as a character record.
        results: Validation result for each of the six creation steps.
        changes: Auto-clears applied, in the order they were made.
    """

    record: Character | None
    results: dict[CreationStep, ValidationResult]
    changes: list[CascadeChange] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changes)

    @property
    def is_malformed(self) -> bool:
        return self.record is None

    @property
    def is_valid(self) -> bool:
        return all(result.is_valid for result in self.results.values())

    def errors(self) -> list[str]:
        """Every step error, in step order."""
        return [error for step in sorted(self.results) for error in self.results[step].errors]


def _clear_unresolved_classes(
    character: Character, tables: ReferenceTables, changes: list[CascadeChange]
) -> Character:
    dropped = unresolved_classes(character, tables)
    if not dropped:
        return character
    for class_id in dropped:
        changes.append(
            CascadeChange(
                kind=CascadeChangeKind.CLASS_REMOVED,
                target=class_id,
                reason="Class is not in the class table",
            )
        )
    kept = [class_id for class_id in character.class_ if class_id not in dropped]
    return character.model_copy(update={"class_": kept})


def _clear_unresolvable_spells(
    character: Character, tables: ReferenceTables, changes: list[CascadeChange]
) -> Character:
    kept: list[Spell] = []
    for spell in character.spells:
        if is_spell_resolvable(spell, character, tables):
            kept.append(spell)
        else:
            changes.append(
                CascadeChange(
                    kind=CascadeChangeKind.SPELL_REMOVED,
                    target=spell.name,
                    reason="Spell is not available to any selected class",
                )
            )
    if len(kept) == len(character.spells):
        return character
    return character.model_copy(update={"spells": kept})


def _clear_stale_preparation(
    character: Character, tables: ReferenceTables, changes: list[CascadeChange]
) -> Character:
    # Custom classes carry no slot table to check against.
    if has_custom_class(character):
        return character

    highest = highest_slot_level(character, tables)
    spells: list[Spell] = []
    cleared = False
    for spell in character.spells:
        if spell.preparation is not None and spell.preparation.slot_level > highest:
            changes.append(
                CascadeChange(
                    kind=CascadeChangeKind.PREPARATION_CLEARED,
                    target=spell.name,
                    reason=f"No level {spell.preparation.slot_level} spell slots remain",
                )
            )
            spells.append(spell.model_copy(update={"preparation": None}))
            cleared = True
        else:
            spells.append(spell)
    if not cleared:
        return character
    return character.model_copy(update={"spells": spells})


def cascade_validate(
    record: Character | Mapping[str, Any],
    tables: ReferenceTables,
) -> CascadeOutcome:
    """Re-validate a record after an upstream change and clear dead selections.

    Pure: the input record is never modified, and the outcome depends only
    on the record and the tables.

    Args:
        record: Typed record or wire dict. Records not yet in the current
            schema are migrated first.
        tables: Reference data to resolve ids against.

    Returns:
        CascadeOutcome with the updated record, six step results, and the
        list of auto-clears applied. A record that cannot be migrated into
        the current schema yields no record and a malformed-record failure
        on every step.
    """
    try:
        character = ensure_current(record)
    except MigrationError as exc:
        logger.debug("Cascade skipped malformed record", error=exc.message)
        failure = {step: ValidationResult.failure(MALFORMED_RECORD_MESSAGE) for step in CreationStep}
        return CascadeOutcome(record=None, results=failure)

    changes: list[CascadeChange] = []

    character = _clear_unresolved_classes(character, tables, changes)
    character = _clear_unresolvable_spells(character, tables, changes)
    character = _clear_stale_preparation(character, tables, changes)

    if changes:
        logger.info(
            "Cascade cleared unresolvable selections",
            name=character.name,
            changes=[f"{change.kind}:{change.target}" for change in changes],
        )

    results = ValidationPipeline(tables).validate_all(character)
    return CascadeOutcome(record=character, results=results, changes=changes)


__all__ = [
    "CascadeChangeKind",
    "CascadeChange",
    "CascadeOutcome",
    "cascade_validate",
]
