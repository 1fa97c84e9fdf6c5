"""Apply an ordered modifier chain to a pool of rolled dice."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from typing import Any, Final

from dicepy.ast.model import ExplodeKind, Modifier, ModifierType
from dicepy.dice.primitives import (
    Roll,
    compare,
    count_successes,
    drop_highest,
    drop_lowest,
    explode_dice,
    keep_highest,
    keep_lowest,
)
from dicepy.dice.rolling import roll_die
from dicepy.errors import DiceValidationError
from dicepy.pipeline.context import EvaluationContext
from dicepy.pipeline.options import RollerOptions
from dicepy.pipeline.result import EvaluationResult

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_OPERATORS: Final[dict[ModifierType, str]] = {
    ModifierType.EQUAL: "=",
    ModifierType.GREATER: ">",
    ModifierType.LESS: "<",
    ModifierType.CRITICAL_SUCCESS: ">=",
    ModifierType.CRITICAL_FAILURE: "<=",
    ModifierType.SUCCESS: ">=",
    ModifierType.FAILURE: "<=",
}

_RECURSIVE_EXPLODE_OPERATORS: Final[dict[ModifierType, str]] = {
    ModifierType.GREATER: ">",
    ModifierType.LESS: "<",
    ModifierType.EQUAL: "=",
}

_KEEP_DROP = {
    ModifierType.KEEP_HIGHEST: (keep_highest, "keep highest count"),
    ModifierType.KEEP_LOWEST: (keep_lowest, "keep lowest count"),
    ModifierType.DROP_HIGHEST: (drop_highest, "drop highest count"),
    ModifierType.DROP_LOWEST: (drop_lowest, "drop lowest count"),
}

EXHAUSTIVE_WITHOUT_SUCCESS_WARNING: Final = (
    "Exhaustive (e) operator requires a preceding success/eq/gt/lt/cs/cf modifier"
)


def positive_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise DiceValidationError(f"{name} must be a positive integer")
    return value


def success_condition(modifier: Modifier, sides: int) -> tuple[str, int]:
    """Resolve the comparator and target a success-style modifier counts against."""
    op = modifier.operator or DEFAULT_SUCCESS_OPERATORS[modifier.type]
    if modifier.target is not None:
        return op, modifier.target
    if modifier.type in (ModifierType.CRITICAL_FAILURE, ModifierType.FAILURE):
        return op, 1
    return op, sides


def apply_modifiers(
    rolls: Sequence[Roll],
    modifiers: Sequence[Modifier],
    sides: int,
    context: EvaluationContext,
    options: RollerOptions | None = None,
) -> EvaluationResult:
    """Run `modifiers` in order over `rolls`.

    An exhaustive (`e`) modifier is taken out of the chain and applied last,
    over the original rolls, using the success-style modifier that precedes it.
    Soft limits (reroll attempts, explosion ceiling, exhaustive cycles) turn
    into warnings on the returned result.
    """
    resolved = options or RollerOptions()
    result: list[Roll] = list(rolls)
    warnings: list[str] = []
    details: dict[str, Any] = {"modifiers": []}

    chain = list(modifiers)
    exhaustive_at = next((i for i, modifier in enumerate(chain) if modifier.type is ModifierType.EXHAUSTIVE), None)
    exhaustive = chain.pop(exhaustive_at) if exhaustive_at is not None else None
    # Success counts keep the pool intact when an exhaustive pass will run.
    keep_pool = exhaustive is not None and any(modifier.type.counts_successes for modifier in chain)
    last_success: Modifier | None = None

    index = 0
    while index < len(chain):
        modifier = chain[index]
        details["modifiers"].append(modifier.type.value)

        match modifier.type:
            case (
                ModifierType.KEEP_HIGHEST
                | ModifierType.KEEP_LOWEST
                | ModifierType.DROP_HIGHEST
                | ModifierType.DROP_LOWEST
            ):
                select, name = _KEEP_DROP[modifier.type]
                result = select(result, positive_int(modifier.value, name))

            case ModifierType.KEEP_ABOVE:
                threshold = positive_int(modifier.value, "keep above threshold")
                result = [roll for roll in result if roll > threshold]

            case ModifierType.KEEP_BELOW:
                threshold = positive_int(modifier.value, "keep below threshold")
                result = [roll for roll in result if roll < threshold]

            case ModifierType.REROLL:
                target = positive_int(modifier.target, "reroll target")
                result = _reroll(result, target, modifier.operator or "=", sides, context, resolved, warnings)

            case ModifierType.REROLL_ONCE:
                target = positive_int(modifier.target, "reroll once target")
                op = modifier.operator or "="
                result = [
                    roll_die(context.rng, sides) if compare(roll, op, target) else roll for roll in result
                ]

            case ModifierType.EXPLODE:
                op, target, ceiling = _explode_condition(modifier, chain, index, sides, context)
                before = len(result)
                result, capped = explode_dice(context.rng, result, sides, max_rolls=ceiling, target=target, op=op)
                if capped:
                    warnings.append(f"Maximum roll count ({ceiling}) reached during explosion")
                details["explosions"] = details.get("explosions", 0) + len(result) - before

            case (
                ModifierType.GREATER
                | ModifierType.LESS
                | ModifierType.EQUAL
                | ModifierType.CRITICAL_SUCCESS
                | ModifierType.CRITICAL_FAILURE
                | ModifierType.SUCCESS
                | ModifierType.FAILURE
            ):
                last_success = modifier
                op, target = success_condition(modifier, sides)
                count = count_successes(result, target, op)
                details[_success_detail_key(modifier.type)] = count
                if not keep_pool:
                    result = [count]

            case ModifierType.SORT_ASCENDING:
                result.sort()

            case ModifierType.SORT_DESCENDING:
                result.sort(reverse=True)

            case ModifierType.MIN:
                floor = positive_int(modifier.value, "minimum value")
                result = [max(roll, floor) for roll in result]

            case ModifierType.MAX:
                ceiling_value = positive_int(modifier.value, "maximum value")
                result = [min(roll, ceiling_value) for roll in result]

            case ModifierType.MATCH:
                details["matches"] = _matches(result)

            case ModifierType.ROLL_ONCE:
                details["roll_once"] = True

        index += 1

    if exhaustive is not None:
        details["modifiers"].append(exhaustive.type.value)
        result = _apply_exhaustive(rolls, last_success, sides, context, resolved, warnings, details)

    return EvaluationResult(total=sum(result), rolls=list(result), warnings=warnings, details=details)


def _reroll(
    rolls: list[Roll],
    target: int,
    op: str,
    sides: int,
    context: EvaluationContext,
    options: RollerOptions,
    warnings: list[str],
) -> list[Roll]:
    rerolled: list[Roll] = []
    for roll in rolls:
        current = roll
        attempts = 0
        while attempts < options.max_reroll_attempts and compare(current, op, target):
            current = roll_die(context.rng, sides)
            attempts += 1
        if attempts >= options.max_reroll_attempts and compare(current, op, target):
            warnings.append(f"Reroll limit reached for target {target}")
        rerolled.append(current)
    return rerolled


def _explode_condition(
    modifier: Modifier,
    chain: list[Modifier],
    index: int,
    sides: int,
    context: EvaluationContext,
) -> tuple[str, int, int]:
    """Return (operator, target, roll ceiling); a recursive explode may consume the next modifier."""
    ceiling = context.max_rolls
    if modifier.value is not ExplodeKind.RECURSIVE:
        return modifier.operator or "=", modifier.target or sides, ceiling

    if modifier.limit is not None:
        ceiling = modifier.limit

    following = chain[index + 1] if index + 1 < len(chain) else None
    if following is not None and following.type in _RECURSIVE_EXPLODE_OPERATORS and following.target is not None:
        del chain[index + 1]
        return _RECURSIVE_EXPLODE_OPERATORS[following.type], following.target, ceiling
    if modifier.target is not None:
        return modifier.operator or ">=", modifier.target, ceiling
    return ">=", sides, ceiling


def _success_detail_key(modifier_type: ModifierType) -> str:
    match modifier_type:
        case ModifierType.FAILURE:
            return "failures"
        case ModifierType.CRITICAL_SUCCESS | ModifierType.CRITICAL_FAILURE:
            return "criticals"
        case _:
            return "successes"


def _matches(rolls: Sequence[Roll]) -> list[list[Roll]]:
    counts = Counter(rolls)
    if not counts:
        return []
    top = max(counts.values())
    if top < 2:
        return []
    return [[value, count] for value, count in counts.items() if count == top]


def _apply_exhaustive(
    original: Sequence[Roll],
    last_success: Modifier | None,
    sides: int,
    context: EvaluationContext,
    options: RollerOptions,
    warnings: list[str],
    details: dict[str, Any],
) -> list[Roll]:
    if last_success is None:
        warnings.append(EXHAUSTIVE_WITHOUT_SUCCESS_WARNING)
        details["exhaustive"] = {"cycles": 0, "total_successes": 0}
        return [0]

    op, target = success_condition(last_success, sides)
    total_successes = 0
    cycles = 0
    current: list[Roll] = list(original)
    while cycles < options.max_exhaustive_cycles:
        successes = [roll for roll in current if compare(roll, op, target)]
        total_successes += len(successes)
        if not successes:
            break
        current = [roll_die(context.rng, sides) for _ in successes]
        cycles += 1

    if cycles >= options.max_exhaustive_cycles:
        warnings.append(f"Exhaustive reroll limit reached ({options.max_exhaustive_cycles} cycles)")
    logger.debug("Exhaustive pass: cycles=%d successes=%d", cycles, total_successes)

    details["exhaustive"] = {"cycles": cycles, "total_successes": total_successes}
    return [total_successes]


__all__ = [
    "DEFAULT_SUCCESS_OPERATORS",
    "EXHAUSTIVE_WITHOUT_SUCCESS_WARNING",
    "apply_modifiers",
    "positive_int",
    "success_condition",
]
