"""Keep/drop/count/explode primitives shared by the modifier chain."""

from __future__ import annotations

import operator
import random
from collections.abc import Callable, Sequence
from typing import Final, TypeAlias

from dicepy.dice.rolling import roll_die

Roll: TypeAlias = int | float

COMPARATORS: Final[dict[str, Callable[[Roll, Roll], bool]]] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
    "=": operator.eq,
    "!=": operator.ne,
}


def compare(value: Roll, op: str, target: Roll) -> bool:
    """Apply a comparator by its notation symbol; unknown symbols never match."""
    comparator = COMPARATORS.get(op)
    return comparator(value, target) if comparator is not None else False


def keep_highest(rolls: Sequence[Roll], count: int) -> list[Roll]:
    return sorted(rolls, reverse=True)[:count]


def keep_lowest(rolls: Sequence[Roll], count: int) -> list[Roll]:
    return sorted(rolls)[:count]


def drop_highest(rolls: Sequence[Roll], count: int) -> list[Roll]:
    return sorted(rolls, reverse=True)[count:]


def drop_lowest(rolls: Sequence[Roll], count: int) -> list[Roll]:
    return sorted(rolls)[count:]


def count_successes(rolls: Sequence[Roll], target: Roll, op: str) -> int:
    return sum(1 for roll in rolls if compare(roll, op, target))


def explode_dice(
    rng: random.Random,
    rolls: Sequence[Roll],
    sides: int,
    *,
    max_rolls: int = 99,
    target: int | None = None,
    op: str = "=",
) -> tuple[list[Roll], bool]:
    """Append explosion dice and report whether the roll ceiling cut a chain short.

    Each starting die explodes into a chain: a new die is appended while the
    most recently added die still meets the condition. The list never grows
    past `max_rolls` dice.
    """
    threshold = target if target is not None else sides
    result = list(rolls)
    capped = False

    for current in rolls:
        while compare(current, op, threshold):
            if len(result) >= max_rolls:
                capped = True
                break
            current = roll_die(rng, sides)
            result.append(current)
        if capped:
            break

    return result, capped


__all__ = [
    "COMPARATORS",
    "Roll",
    "compare",
    "count_successes",
    "drop_highest",
    "drop_lowest",
    "explode_dice",
    "keep_highest",
    "keep_lowest",
]
