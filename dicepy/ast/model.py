"""AST data model for dice expressions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import ClassVar, TypeAlias


class NodeType(StrEnum):
    """Discriminator shared by every AST node class."""

    NUMBER = "number"
    UNARY = "unary"
    ARITHMETIC = "arithmetic"
    FUNCTION = "function"
    DICE = "dice"
    CUSTOM_DICE = "custom-dice"
    FUDGE_DICE = "fudge-dice"
    GROUPED_ROLL = "grouped-roll"
    TABLE = "table"
    MACRO = "macro"
    ROLL_QUERY = "roll-query"
    ROLL_REFERENCE = "roll-reference"
    INLINE_ROLL = "inline-roll"
    FORMATTING = "formatting"


class ModifierType(StrEnum):
    KEEP_HIGHEST = "kh"
    KEEP_LOWEST = "kl"
    DROP_HIGHEST = "dh"
    DROP_LOWEST = "dl"
    KEEP_ABOVE = "k>"
    KEEP_BELOW = "k<"
    REROLL = "r"
    REROLL_ONCE = "ro"
    EXPLODE = "explode"
    MIN = "mi"
    MAX = "ma"
    GREATER = "gt"
    LESS = "lt"
    EQUAL = "eq"
    CRITICAL_SUCCESS = "cs"
    CRITICAL_FAILURE = "cf"
    SUCCESS = "s"
    FAILURE = "f"
    SORT_ASCENDING = "sa"
    SORT_DESCENDING = "sd"
    MATCH = "m"
    ROLL_ONCE = "o"
    EXHAUSTIVE = "e"

    @property
    def counts_successes(self) -> bool:
        return self in SUCCESS_MODIFIERS


SUCCESS_MODIFIERS: frozenset[ModifierType] = frozenset(
    {
        ModifierType.GREATER,
        ModifierType.LESS,
        ModifierType.EQUAL,
        ModifierType.CRITICAL_SUCCESS,
        ModifierType.CRITICAL_FAILURE,
        ModifierType.SUCCESS,
        ModifierType.FAILURE,
    }
)


class ExplodeKind(StrEnum):
    BASIC = "basic"
    COMPOUND = "compound"
    PENETRATING = "penetrating"
    RECURSIVE = "recursive"
    GREATER = "greater"
    LESS = "less"
    NOT_EQUAL = "not_equal"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class Modifier:
    """One decoded modifier fragment.

    `value` holds the numeric argument (`3` in `kh3`) or, for explosions,
    the `ExplodeKind`. `target`/`operator` describe comparisons.
    """

    type: ModifierType
    raw: str
    value: int | ExplodeKind | None = None
    target: int | None = None
    operator: str | None = None
    limit: int | None = None


@dataclass(frozen=True, slots=True)
class NumberNode:
    type: ClassVar[NodeType] = NodeType.NUMBER

    value: int | float


@dataclass(frozen=True, slots=True)
class UnaryNode:
    type: ClassVar[NodeType] = NodeType.UNARY

    op: str
    operand: DiceAst


@dataclass(frozen=True, slots=True)
class ArithmeticNode:
    type: ClassVar[NodeType] = NodeType.ARITHMETIC

    op: str
    left: DiceAst
    right: DiceAst


@dataclass(frozen=True, slots=True)
class FunctionNode:
    type: ClassVar[NodeType] = NodeType.FUNCTION

    name: str
    args: tuple[DiceAst, ...]


@dataclass(frozen=True, slots=True)
class DiceNode:
    type: ClassVar[NodeType] = NodeType.DICE

    count: int
    sides: int
    modifiers: tuple[Modifier, ...] = ()
    label: str | None = None


@dataclass(frozen=True, slots=True)
class CustomDiceNode:
    type: ClassVar[NodeType] = NodeType.CUSTOM_DICE

    count: int
    sides: tuple[int, ...]
    modifiers: tuple[Modifier, ...] = ()


@dataclass(frozen=True, slots=True)
class FudgeDiceNode:
    type: ClassVar[NodeType] = NodeType.FUDGE_DICE

    count: int
    variant: str = "basic"
    modifiers: tuple[Modifier, ...] = ()


@dataclass(frozen=True, slots=True)
class GroupedRollNode:
    type: ClassVar[NodeType] = NodeType.GROUPED_ROLL

    expressions: tuple[DiceAst, ...]
    modifiers: tuple[Modifier, ...] = ()


@dataclass(frozen=True, slots=True)
class TableNode:
    type: ClassVar[NodeType] = NodeType.TABLE

    name: str
    count: int = 1


@dataclass(frozen=True, slots=True)
class MacroNode:
    type: ClassVar[NodeType] = NodeType.MACRO

    name: str


@dataclass(frozen=True, slots=True)
class QueryOption:
    label: str
    value: str


@dataclass(frozen=True, slots=True)
class RollQueryNode:
    """`?{prompt|default}` or `?{prompt|label,value|label,value}`."""

    type: ClassVar[NodeType] = NodeType.ROLL_QUERY

    prompt: str
    default: str | None = None
    options: tuple[QueryOption, ...] = ()


@dataclass(frozen=True, slots=True)
class RollReferenceNode:
    """`$[[N]]` (numeric ref) or `$[roll:name]` (named ref)."""

    type: ClassVar[NodeType] = NodeType.ROLL_REFERENCE

    ref: int | str


@dataclass(slots=True, eq=False)
class InlineRollNode:
    """`[[expr]]`; `index` is filled in once by the indexing pass."""

    type: ClassVar[NodeType] = NodeType.INLINE_ROLL

    expression: str
    index: int | None = None


@dataclass(frozen=True, slots=True)
class FormattingNode:
    type: ClassVar[NodeType] = NodeType.FORMATTING

    markup: str


DiceAst: TypeAlias = (
    NumberNode
    | UnaryNode
    | ArithmeticNode
    | FunctionNode
    | DiceNode
    | CustomDiceNode
    | FudgeDiceNode
    | GroupedRollNode
    | TableNode
    | MacroNode
    | RollQueryNode
    | RollReferenceNode
    | InlineRollNode
    | FormattingNode
)
ModifiedNode: TypeAlias = DiceNode | CustomDiceNode | FudgeDiceNode | GroupedRollNode


__all__ = [
    "SUCCESS_MODIFIERS",
    "ArithmeticNode",
    "CustomDiceNode",
    "DiceAst",
    "DiceNode",
    "ExplodeKind",
    "FormattingNode",
    "FudgeDiceNode",
    "FunctionNode",
    "GroupedRollNode",
    "InlineRollNode",
    "MacroNode",
    "Modifier",
    "ModifiedNode",
    "ModifierType",
    "NodeType",
    "NumberNode",
    "QueryOption",
    "RollQueryNode",
    "RollReferenceNode",
    "TableNode",
    "UnaryNode",
]
