"""Typed AST over the dice CST."""

from dicepy.ast.embedded import (
    decode_formatting,
    decode_inline_roll,
    decode_macro,
    decode_roll_query,
    decode_roll_reference,
    decode_table_roll,
)
from dicepy.ast.lower import lower_expression, lower_syntax_tree, lower_tree, parse_to_ast
from dicepy.ast.model import (
    SUCCESS_MODIFIERS,
    ArithmeticNode,
    CustomDiceNode,
    DiceAst,
    DiceNode,
    ExplodeKind,
    FormattingNode,
    FudgeDiceNode,
    FunctionNode,
    GroupedRollNode,
    InlineRollNode,
    MacroNode,
    ModifiedNode,
    Modifier,
    ModifierType,
    NodeType,
    NumberNode,
    QueryOption,
    RollQueryNode,
    RollReferenceNode,
    TableNode,
    UnaryNode,
)
from dicepy.ast.modifiers import decode_modifier, decode_modifiers
from dicepy.ast.walk import (
    assign_inline_roll_indices,
    child_nodes,
    find_nodes,
    iter_nodes,
    traverse,
)

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
    "ModifiedNode",
    "Modifier",
    "ModifierType",
    "NodeType",
    "NumberNode",
    "QueryOption",
    "RollQueryNode",
    "RollReferenceNode",
    "TableNode",
    "UnaryNode",
    "assign_inline_roll_indices",
    "child_nodes",
    "decode_formatting",
    "decode_inline_roll",
    "decode_macro",
    "decode_modifier",
    "decode_modifiers",
    "decode_roll_query",
    "decode_roll_reference",
    "decode_table_roll",
    "find_nodes",
    "iter_nodes",
    "lower_expression",
    "lower_syntax_tree",
    "lower_tree",
    "parse_to_ast",
]
