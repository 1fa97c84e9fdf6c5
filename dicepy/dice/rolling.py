"""Random draws for the dice kinds the grammar can express."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Final

# Face tables for fudge variants; `basic` and `2` are the plain {-1, 0, +1} die.
FUDGE_FACES: Final[dict[str, tuple[int, ...]]] = {
    "basic": (-1, 0, 1),
    "1": (-1, 0, 0, 0, 0),
    "2": (-1, 0, 1),
    "3": (-1, 0, 0, 0, 0, 1),
}


def roll_die(rng: random.Random, sides: int) -> int:
    return rng.randint(1, sides)


def roll_dice(rng: random.Random, count: int, sides: int) -> list[int]:
    return [roll_die(rng, sides) for _ in range(count)]


def roll_custom_dice(rng: random.Random, count: int, sides: Sequence[int]) -> list[int]:
    """Draw `count` values uniformly from an explicit side list."""
    return [rng.choice(sides) for _ in range(count)]


def roll_fudge_dice(rng: random.Random, count: int, variant: str = "basic") -> list[int]:
    faces = FUDGE_FACES.get(variant)
    if faces is None:
        raise ValueError(f"Unknown fudge dice variant: {variant}")
    return [rng.choice(faces) for _ in range(count)]


__all__ = ["FUDGE_FACES", "roll_custom_dice", "roll_die", "roll_dice", "roll_fudge_dice"]
