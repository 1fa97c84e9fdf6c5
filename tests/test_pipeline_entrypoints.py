import pytest

from dicepy.ast import FunctionNode, InlineRollNode, RollQueryNode
from dicepy.dice import DiceNotationPlugin
from dicepy.errors import DiceMissingDataError, DiceSyntaxError, DiceValidationError
from dicepy.pipeline import EvaluationContext, Registry, RollerOptions, create_registry, process_expression
from dicepy.plugins import (
    FormattingPlugin,
    InlineRollsPlugin,
    MacrosPlugin,
    RollQueriesPlugin,
    RollReferencesPlugin,
    TablesPlugin,
)


def _context(**kwargs: object) -> EvaluationContext:
    return EvaluationContext.create(seed=2024, **kwargs)


def test_create_registry_plugin_order() -> None:
    registry = create_registry()

    assert [type(plugin) for plugin in registry.plugins] == [
        DiceNotationPlugin,
        MacrosPlugin,
        TablesPlugin,
        RollQueriesPlugin,
        RollReferencesPlugin,
        InlineRollsPlugin,
        FormattingPlugin,
    ]


def test_create_registry_passes_options_to_dice_plugin() -> None:
    options = RollerOptions(max_exhaustive_cycles=4)
    registry = create_registry(options)

    assert registry.options is options
    result = process_expression("1d1=1e", _context(), registry=registry)
    assert result.total == 4


@pytest.mark.parametrize("seed", range(20))
def test_plain_dice_stay_in_range(seed: int) -> None:
    result = process_expression("3d6", EvaluationContext.create(seed=seed))

    assert 3 <= result.total <= 18
    assert len(result.rolls) == 3
    assert all(1 <= roll <= 6 for roll in result.rolls)
    assert result.total == sum(result.rolls)


def test_keep_highest_keeps_three_dice() -> None:
    result = process_expression("4d6kh3", _context())

    assert len(result.rolls) == 3
    assert result.details["modifiers"] == ["kh"]


def test_same_seed_same_outcome() -> None:
    first = process_expression("4d6!kh3 + 1d20", _context())
    second = process_expression("4d6!kh3 + 1d20", _context())

    assert first.total == second.total
    assert first.rolls == second.rolls


@pytest.mark.parametrize(
    ("source", "total"),
    [
        ("2 * 3 + 4 / 2", 8),
        ("2**3 + 1", 9),
        ("2**2**3", 256),
        ("2*3**2", 36),
        ("10 % 4", 2),
        ("-(2 + 3)", -5),
        ("floor(7 / 2) + ceil(1.2)", 5),
        ("round(2.5) + abs(-1)", 4),
        ("max(1, 4, 2) - min(3, 2)", 2),
        ("1.5 * 2", 3.0),
    ],
)
def test_arithmetic(source: str, total: float) -> None:
    assert process_expression(source, _context()).total == total


@pytest.mark.parametrize(
    ("source", "message"),
    [
        ("9**9**9", "is too large"),
        ("(-8)**0.5", "is not a real number"),
    ],
)
def test_power_stays_real_and_bounded(source: str, message: str) -> None:
    with pytest.raises(DiceValidationError, match=message):
        process_expression(source, _context())


def test_integer_power_stays_exact() -> None:
    result = process_expression("3**40", _context())

    assert result.total == 3**40
    assert isinstance(result.total, int)


def test_parenthesized_dice() -> None:
    result = process_expression("(2d6+3)*2", _context())

    assert 10 <= result.total <= 30
    assert len(result.rolls) == 2


@pytest.mark.parametrize(
    ("source", "message"),
    [
        ("5/0", "Division by zero"),
        ("5%0", "Modulo by zero"),
        ("0d6", "Dice count must be positive"),
        ("2d0", "Dice sides must be positive"),
        ("d[]", "Custom dice must have at least one side"),
    ],
)
def test_validation_errors(source: str, message: str) -> None:
    with pytest.raises(DiceValidationError, match=message):
        process_expression(source, _context())

def test_non_ascii_digit_is_a_syntax_error() -> None:
    with pytest.raises(DiceSyntaxError, match="Unable to parse input"):
        create_registry().parse("²d6")


def test_recursive_explode_limit_from_notation() -> None:
    result = process_expression("1d1!r5", _context())

    assert result.rolls == [1, 1, 1, 1, 1]
    assert "Maximum roll count (5) reached during explosion" in result.warnings



def test_unparseable_input() -> None:
    with pytest.raises(DiceSyntaxError, match=r"Unable to parse input: 1 \+"):
        process_expression("1 +", _context())


def test_unknown_function_node() -> None:
    registry = create_registry()

    with pytest.raises(DiceSyntaxError, match="Unknown function: foo"):
        registry.evaluate(FunctionNode("foo", ()), registry.new_context())


def test_custom_and_fudge_dice() -> None:
    custom = process_expression("3d[1,3,5]", _context())
    assert set(custom.rolls) <= {1, 3, 5}
    assert custom.details["sides"] == [1, 3, 5]

    fudge = process_expression("4dF", _context())
    assert -4 <= fudge.total <= 4
    assert len(fudge.rolls) == 4
    assert fudge.details["variant"] == "basic"

    variant = process_expression("10dF.1", _context())
    assert set(variant.rolls) <= {-1, 0}

    lowercase = process_expression("4df", _context())
    assert len(lowercase.rolls) == 4
    assert lowercase.details["variant"] == "basic"


def test_grouped_roll_pools_sub_rolls() -> None:
    result = process_expression("{1d6, 1d8, 3}kh1", _context())

    assert len(result.rolls) == 1
    assert 1 <= result.total <= 8
    assert result.details["group_size"] == 3
    assert result.details["roll_once"] is False


def test_labels_are_reported() -> None:
    result = process_expression("2d6[fire] + 1d4[cold damage]", _context())

    assert result.details["left"]["label"] == "fire"
    assert result.details["right"]["label"] == "cold damage"


def test_inline_roll_then_reference() -> None:
    context = _context()
    result = process_expression("[[2+3]] + $[[0]]", context)

    assert result.total == 10
    assert context.rolls == {0: 5}
    assert [node.index for node in result.details["rolls"] if isinstance(node, InlineRollNode)] == [0]


def test_reference_to_unknown_roll() -> None:
    with pytest.raises(DiceMissingDataError, match="Referenced roll '99' not found"):
        process_expression("$[[99]]", _context())


def test_macro_expansion() -> None:
    result = process_expression("#attack", _context(macro_map={"attack": "1d20 + 1d6"}))

    assert 2 <= result.total <= 26
    assert result.details["macros"] == ["attack"]
    assert result.warnings == ["Macro 'attack' expanded (nesting level: 1)"]


def test_chained_macros() -> None:
    result = process_expression("1d20 + #b", _context(macro_map={"a": "1d6", "b": "#a"}))

    assert 2 <= result.total <= 26
    assert len(result.rolls) == 2
    assert result.details["macros"] == ["b"]


def test_self_referencing_macro_hits_nesting_limit() -> None:
    with pytest.raises(DiceValidationError, match="Macro recursion limit exceeded"):
        process_expression("#loop", _context(macro_map={"loop": "#loop + 1"}))


def test_exhaustive_cap_warning() -> None:
    result = process_expression("1d1=1e", _context())

    assert result.total == 99
    assert "Exhaustive reroll limit reached (99 cycles)" in result.warnings


def test_exhaustive_impossible_condition() -> None:
    assert process_expression("5d6>6e", _context()).total == 0


def test_missing_table() -> None:
    with pytest.raises(DiceMissingDataError, match="Table 'loot' not found or empty"):
        process_expression("2t[loot]", _context())


def test_extractions_are_merged_into_details() -> None:
    context = _context(
        macro_map={"m": "1"},
        table_map={"loot": ["gem"]},
        user_input={"Bonus": "3"},
    )

    result = process_expression("[[1d6]] + ?{Bonus|2} + #m + t[loot]", context)

    assert result.details["macros"] == ["m"]
    assert result.details["tables"] == [{"name": "loot", "count": 1}]
    assert result.details["queries"] == [RollQueryNode("Bonus", default="2")]
    assert [type(item) for item in result.details["rolls"]] == [InlineRollNode]
    assert result.details["formatting"] == []
    assert 5 <= result.total <= 10


def test_standalone_formatting() -> None:
    result = process_expression("%NEWLINE%", _context())

    assert result.total == 0
    assert result.details["value"] == "\n"
    assert [node.markup for node in result.details["formatting"]] == ["NEWLINE"]


def test_explicit_registry_is_used() -> None:
    registry = Registry([DiceNotationPlugin()])

    with pytest.raises(DiceSyntaxError, match="Unable to evaluate node type: roll-reference"):
        process_expression("$[[0]]", _context(), registry=registry)
