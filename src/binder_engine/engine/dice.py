"""Hit-die parsing and rolling.

Rolling goes through the d20 library. Hit dice are restricted to the plain
``<count>d<size>`` form; anything else is rejected before it reaches d20 so
that a malformed class definition fails loudly instead of rolling something
unexpected.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from typing import Any, Protocol

import d20

from binder_engine.core.exceptions import DiceRollError
from binder_engine.core.logging import get_logger


logger = get_logger(__name__)

_HIT_DIE_RE = re.compile(r"^(\d+)d(\d+)$")


@dataclass(frozen=True)
class HitDie:
    """A parsed hit die such as 1d8.

    Attributes:
        count: Number of dice rolled.
        size: Faces per die.
    """

    count: int
    size: int

    @property
    def expression(self) -> str:
        return f"{self.count}d{self.size}"

    @property
    def maximum(self) -> int:
        """Highest possible roll."""
        return self.count * self.size


@dataclass(frozen=True)
class DieRoll:
    """Outcome of rolling a hit die.

    Attributes:
        expression: The expression rolled.
        total: Sum of the dice.
        dice: Individual die results.
    """

    expression: str
    total: int
    dice: tuple[int, ...]

    @property
    def breakdown(self) -> str:
        """Display form, e.g. '2d6 (3, 5)'."""
        return f"{self.expression} ({', '.join(str(value) for value in self.dice)})"


class HitDieRoller(Protocol):
    """Anything that can roll a hit die; progression accepts any such roller."""

    def roll_hit_die(self, hit_die: HitDie) -> DieRoll: ...


def parse_hit_die(expression: str | None) -> HitDie:
    """Parse a '<count>d<size>' hit die.

    Args:
        expression: Hit die text, e.g. '1d8'.

    Returns:
        HitDie with positive count and size.

    Raises:
        DiceRollError: If the text is not a plain hit die.
    """
    text = (expression or "").strip().lower()
    match = _HIT_DIE_RE.match(text)
    if match is None:
        raise DiceRollError(f"Invalid hit die format: {expression}", expression=expression)

    count, size = int(match.group(1)), int(match.group(2))
    if count < 1 or size < 1:
        raise DiceRollError(f"Invalid hit die format: {expression}", expression=expression)
    return HitDie(count=count, size=size)


class DiceRoller:
    """Hit-die roller backed by d20.

    Example:
        >>> roller = DiceRoller(seed=42)
        >>> roll = roller.roll_hit_die(parse_hit_die("1d8"))
        >>> 1 <= roll.total <= 8
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    def roll_hit_die(self, hit_die: HitDie) -> DieRoll:
        """Roll a parsed hit die.

        Raises:
            DiceRollError: If d20 rejects the expression.
        """
        expression = hit_die.expression
        try:
            result: d20.RollResult = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(f"Invalid dice expression: {exc}", expression=expression) from exc

        dice = tuple(self._extract_dice_values(result.expr))
        logger.debug("Hit die rolled", expression=expression, total=result.total)
        return DieRoll(expression=expression, total=result.total, dice=dice)

    def _extract_dice_values(self, expr: Any) -> list[int]:
        """Collect kept die results from a d20 expression tree."""
        values: list[int] = []

        def traverse(node: Any) -> None:
            if isinstance(node, d20.Dice):
                for die in node.values:
                    if die.kept:
                        values.append(die.number)
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return values


__all__ = [
    "HitDie",
    "DieRoll",
    "HitDieRoller",
    "DiceRoller",
    "parse_hit_die",
]
