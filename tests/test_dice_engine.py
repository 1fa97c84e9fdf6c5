import random

import pytest

from dicepy.ast import Modifier, ModifierType, decode_modifier
from dicepy.dice import (
    EXHAUSTIVE_WITHOUT_SUCCESS_WARNING,
    FUDGE_FACES,
    apply_modifiers,
    call_function,
    explode_dice,
    roll_custom_dice,
    roll_dice,
    roll_fudge_dice,
)
from dicepy.errors import DiceSyntaxError, DiceValidationError
from dicepy.pipeline import EvaluationContext, RollerOptions

POOL = [1, 3, 5, 6]


def _chain(*raws: str) -> list[Modifier]:
    return [decode_modifier(raw) for raw in raws]


def _context(**kwargs: object) -> EvaluationContext:
    return EvaluationContext.create(seed=7, **kwargs)


@pytest.mark.parametrize(
    ("raw", "rolls"),
    [
        ("kh2", [6, 5]),
        ("kl2", [1, 3]),
        ("dh1", [5, 3, 1]),
        ("dl1", [3, 5, 6]),
        ("k>3", [5, 6]),
        ("k<4", [1, 3]),
        ("mi3", [3, 3, 5, 6]),
        ("ma4", [1, 3, 4, 4]),
        ("sa", [1, 3, 5, 6]),
        ("sd", [6, 5, 3, 1]),
    ],
)
def test_pool_shaping_modifiers(raw: str, rolls: list[int]) -> None:
    result = apply_modifiers(POOL, _chain(raw), 6, _context())

    assert result.rolls == rolls
    assert result.total == sum(rolls)
    assert result.warnings == []


@pytest.mark.parametrize(
    ("raw", "key", "count"),
    [
        (">4", "successes", 2),
        ("<3", "successes", 1),
        ("=5", "successes", 1),
        ("s>=3", "successes", 3),
        ("cs", "criticals", 1),
        ("cf", "criticals", 1),
        ("f", "failures", 1),
        ("f<=3", "failures", 2),
    ],
)
def test_success_counting_collapses_pool(raw: str, key: str, count: int) -> None:
    result = apply_modifiers(POOL, _chain(raw), 6, _context())

    assert result.details[key] == count
    assert result.rolls == [count]
    assert result.total == count


def test_match_reports_most_frequent_values() -> None:
    assert apply_modifiers([2, 2, 5, 5, 1], _chain("m"), 6, _context()).details["matches"] == [[2, 2], [5, 2]]
    assert apply_modifiers([1, 2, 3], _chain("m"), 6, _context()).details["matches"] == []


def test_modifier_names_follow_chain_order() -> None:
    result = apply_modifiers(POOL, _chain("kh3", "sa", "o"), 6, _context())

    assert result.details["modifiers"] == ["kh", "sa", "o"]
    assert result.details["roll_once"] is True
    assert result.rolls == [3, 5, 6]


def test_reroll_stops_at_attempt_limit() -> None:
    # A one-sided die always rolls 1, so `r1` can never escape.
    result = apply_modifiers([1, 1], _chain("r1"), 1, _context())

    assert result.rolls == [1, 1]
    assert result.warnings == ["Reroll limit reached for target 1"] * 2


def test_reroll_limit_comes_from_options() -> None:
    context = _context()
    result = apply_modifiers([1], _chain("r1"), 1, context, RollerOptions(max_reroll_attempts=1))

    assert result.warnings == ["Reroll limit reached for target 1"]

    with pytest.raises(ValueError, match="max_reroll_attempts must be at least 1"):
        RollerOptions(max_reroll_attempts=0)


def test_reroll_once_never_warns() -> None:
    result = apply_modifiers([1, 1], _chain("ro1"), 1, _context())

    assert result.rolls == [1, 1]
    assert result.warnings == []


@pytest.mark.parametrize("seed", range(10))
def test_reroll_warns_only_when_last_roll_still_matches(seed: int) -> None:
    options = RollerOptions(max_reroll_attempts=1)
    result = apply_modifiers([1], _chain("r1"), 2, EvaluationContext.create(seed=seed), options)

    if result.rolls == [1]:
        assert result.warnings == ["Reroll limit reached for target 1"]
    else:
        assert result.rolls == [2]
        assert result.warnings == []


def test_reroll_replaces_matching_dice() -> None:
    result = apply_modifiers([1, 2, 6], _chain("r<=2"), 6, _context())

    assert len(result.rolls) == 3
    assert result.rolls[2] == 6
    assert all(roll > 2 for roll in result.rolls)


def test_explosion_is_capped_by_max_rolls() -> None:
    result = apply_modifiers([1], _chain("!"), 1, _context(max_rolls=5))

    assert result.rolls == [1, 1, 1, 1, 1]
    assert result.details["explosions"] == 4
    assert result.warnings == ["Maximum roll count (5) reached during explosion"]


def test_explosion_without_trigger_adds_nothing() -> None:
    result = apply_modifiers([2, 3], _chain("!"), 6, _context())

    assert result.rolls == [2, 3]
    assert result.details["explosions"] == 0


def test_recursive_explode_consumes_following_comparison() -> None:
    result = apply_modifiers([2, 3], _chain("!r", ">5"), 6, _context())

    # `>5` became the explosion condition, so nothing was counted.
    assert result.rolls == [2, 3]
    assert "successes" not in result.details
    assert result.details["modifiers"] == ["explode"]


def test_recursive_explode_limit_overrides_max_rolls() -> None:
    result = apply_modifiers([1], _chain("!r3"), 1, _context())

    assert result.rolls == [1, 1, 1]
    assert result.warnings == ["Maximum roll count (3) reached during explosion"]


def test_exhaustive_stops_at_cycle_limit() -> None:
    result = apply_modifiers([1], _chain("=1", "e"), 1, _context())

    assert result.total == 99
    assert result.details["exhaustive"] == {"cycles": 99, "total_successes": 99}
    assert result.warnings == ["Exhaustive reroll limit reached (99 cycles)"]


def test_exhaustive_cycle_limit_comes_from_options() -> None:
    result = apply_modifiers([1], _chain("=1", "e"), 1, _context(), RollerOptions(max_exhaustive_cycles=3))

    assert result.total == 3
    assert result.warnings == ["Exhaustive reroll limit reached (3 cycles)"]


def test_exhaustive_with_impossible_condition_is_zero() -> None:
    result = apply_modifiers([1, 2, 3, 4, 5], _chain(">6", "e"), 6, _context())

    assert result.total == 0
    assert result.details["exhaustive"] == {"cycles": 0, "total_successes": 0}
    assert result.warnings == []


def test_exhaustive_without_success_modifier_warns() -> None:
    result = apply_modifiers(POOL, _chain("e"), 6, _context())

    assert result.total == 0
    assert result.warnings == [EXHAUSTIVE_WITHOUT_SUCCESS_WARNING]


@pytest.mark.parametrize(
    ("modifier", "message"),
    [
        (Modifier(ModifierType.KEEP_HIGHEST, "kh0", 0), "keep highest count must be a positive integer"),
        (Modifier(ModifierType.DROP_LOWEST, "dl0", 0), "drop lowest count must be a positive integer"),
        (Modifier(ModifierType.MIN, "mi0", 0), "minimum value must be a positive integer"),
        (Modifier(ModifierType.REROLL, "r0", 0, target=0, operator="="), "reroll target must be a positive integer"),
    ],
)
def test_non_positive_modifier_values_are_rejected(modifier: Modifier, message: str) -> None:
    with pytest.raises(DiceValidationError, match=message):
        apply_modifiers(POOL, [modifier], 6, _context())


def test_explode_dice_reports_capping() -> None:
    rolls, capped = explode_dice(random.Random(1), [2, 3], 6, max_rolls=10)

    assert rolls == [2, 3]
    assert capped is False


def test_roll_ranges() -> None:
    rng = random.Random(3)

    assert all(1 <= roll <= 6 for roll in roll_dice(rng, 200, 6))
    assert set(roll_custom_dice(rng, 200, (2, 4, 8))) <= {2, 4, 8}
    assert set(roll_fudge_dice(rng, 200)) <= {-1, 0, 1}
    assert set(roll_fudge_dice(rng, 200, "1")) <= {-1, 0}
    assert FUDGE_FACES["3"].count(0) == 4


def test_unknown_fudge_variant_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown fudge dice variant: 9"):
        roll_fudge_dice(random.Random(), 1, "9")


@pytest.mark.parametrize(
    ("name", "args", "expected"),
    [
        ("floor", [3.7], 3),
        ("ceil", [3.2], 4),
        ("round", [2.5], 3),
        ("round", [-2.5], -2),
        ("round", [2.4], 2),
        ("abs", [-4], 4),
        ("min", [3, 1, 2], 1),
        ("max", [3, 1, 2], 3),
        ("max", [5], 5),
    ],
)
def test_math_functions(name: str, args: list[float], expected: float) -> None:
    assert call_function(name, args) == expected


def test_math_function_arity() -> None:
    with pytest.raises(DiceValidationError, match="Function 'abs' takes exactly one argument, got 2"):
        call_function("abs", [1, 2])
    with pytest.raises(DiceValidationError, match="Function 'max' requires at least one argument"):
        call_function("max", [])


def test_unknown_math_function() -> None:
    with pytest.raises(DiceSyntaxError, match="Unknown function: foo"):
        call_function("foo", [1])
