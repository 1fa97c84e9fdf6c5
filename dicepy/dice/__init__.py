"""Dice rolling, the modifier chain and the core dice-notation plugin."""

from dicepy.dice.functions import MATH_FUNCTIONS, MathFunction, call_function, power
from dicepy.dice.modifiers import (
    DEFAULT_SUCCESS_OPERATORS,
    EXHAUSTIVE_WITHOUT_SUCCESS_WARNING,
    apply_modifiers,
    positive_int,
    success_condition,
)
from dicepy.dice.plugin import DiceNotationPlugin
from dicepy.dice.primitives import (
    COMPARATORS,
    Roll,
    compare,
    count_successes,
    drop_highest,
    drop_lowest,
    explode_dice,
    keep_highest,
    keep_lowest,
)
from dicepy.dice.rolling import FUDGE_FACES, roll_custom_dice, roll_dice, roll_die, roll_fudge_dice

__all__ = [
    "COMPARATORS",
    "DEFAULT_SUCCESS_OPERATORS",
    "EXHAUSTIVE_WITHOUT_SUCCESS_WARNING",
    "FUDGE_FACES",
    "MATH_FUNCTIONS",
    "DiceNotationPlugin",
    "MathFunction",
    "Roll",
    "apply_modifiers",
    "call_function",
    "compare",
    "count_successes",
    "drop_highest",
    "drop_lowest",
    "explode_dice",
    "keep_highest",
    "keep_lowest",
    "positive_int",
    "power",
    "roll_custom_dice",
    "roll_dice",
    "roll_die",
    "roll_fudge_dice",
    "success_condition",
]
