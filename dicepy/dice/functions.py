"""Math functions callable from dice expressions."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Final, TypeAlias

from dicepy.errors import DiceSyntaxError, DiceValidationError

Number: TypeAlias = int | float


@dataclass(frozen=True, slots=True)
class MathFunction:
    name: str
    impl: Callable[..., Number]
    variadic: bool = False

    def __call__(self, args: Sequence[Number]) -> Number:
        if self.variadic:
            if not args:
                raise DiceValidationError(f"Function '{self.name}' requires at least one argument")
        elif len(args) != 1:
            raise DiceValidationError(f"Function '{self.name}' takes exactly one argument, got {len(args)}")
        return self.impl(*args)


def _round_half_up(value: Number) -> int:
    return math.floor(value + 0.5)


MATH_FUNCTIONS: Final[dict[str, MathFunction]] = {
    "floor": MathFunction("floor", math.floor),
    "ceil": MathFunction("ceil", math.ceil),
    "round": MathFunction("round", _round_half_up),
    "abs": MathFunction("abs", abs),
    "min": MathFunction("min", min, variadic=True),
    "max": MathFunction("max", max, variadic=True),
}


def power(base: Number, exponent: Number) -> Number:
    """Raise `base` to `exponent`, bounded to the float range.

    Integer operands with a non-negative exponent keep an exact integer result.
    """
    try:
        result = math.pow(base, exponent)
    except OverflowError:
        raise DiceValidationError(f"Result of {base} ** {exponent} is too large") from None
    except ValueError:
        raise DiceValidationError(f"Result of {base} ** {exponent} is not a real number") from None
    if math.isinf(result):
        raise DiceValidationError(f"Result of {base} ** {exponent} is too large")
    if isinstance(base, int) and isinstance(exponent, int) and exponent >= 0:
        return base**exponent
    return result


def call_function(name: str, args: Sequence[Number]) -> Number:
    function = MATH_FUNCTIONS.get(name)
    if function is None:
        raise DiceSyntaxError(f"Unknown function: {name}")
    return function(args)


__all__ = ["MATH_FUNCTIONS", "MathFunction", "call_function", "power"]
