"""Lower a dice CST into the typed AST."""

from __future__ import annotations

from typing import Final

from dicepy.ast.embedded import (
    decode_inline_roll,
    decode_macro,
    decode_roll_query,
    decode_roll_reference,
    decode_table_roll,
)
from dicepy.ast.model import (
    ArithmeticNode,
    CustomDiceNode,
    DiceAst,
    DiceNode,
    FudgeDiceNode,
    FunctionNode,
    GroupedRollNode,
    Modifier,
    NumberNode,
    TableNode,
    UnaryNode,
)
from dicepy.ast.modifiers import decode_modifiers
from dicepy.cst import GreenNode, SyntaxNode, SyntaxToken, from_green
from dicepy.diagnostics import first_error
from dicepy.errors import DiceSyntaxError
from dicepy.parser import parse
from dicepy.syntax import DiceSyntaxKind

_BINARY_OPERATORS: Final[dict[DiceSyntaxKind, str]] = {
    DiceSyntaxKind.PLUS: "+",
    DiceSyntaxKind.MINUS: "-",
    DiceSyntaxKind.STAR: "*",
    DiceSyntaxKind.SLASH: "/",
    DiceSyntaxKind.PERCENT: "%",
    DiceSyntaxKind.STAR_STAR: "**",
}

FUDGE_VARIANTS: Final[frozenset[str]] = frozenset({"basic", "1", "2", "3"})


def parse_to_ast(text: str) -> DiceAst:
    """Parse and lower an expression, raising `DiceSyntaxError` on any parse error."""
    parsed = parse(text)
    error = first_error(parsed.diagnostics)
    if error is not None:
        raise DiceSyntaxError(error.render(), diagnostics=parsed.diagnostics)
    return lower_syntax_tree(from_green(parsed.root, text))


def lower_tree(root: GreenNode, text: str) -> DiceAst:
    return lower_syntax_tree(from_green(root, text))


def lower_syntax_tree(root: SyntaxNode) -> DiceAst:
    expression_root = root.first_node(DiceSyntaxKind.EXPRESSION_ROOT)
    if expression_root is None:
        raise DiceSyntaxError("Empty expression")

    for child in expression_root.child_nodes():
        if child.kind != DiceSyntaxKind.ERROR:
            return lower_expression(child)
    raise DiceSyntaxError("Empty expression")


def lower_expression(node: SyntaxNode) -> DiceAst:
    match node.kind:
        case DiceSyntaxKind.NUMBER:
            return _lower_number(node)
        case DiceSyntaxKind.BINARY_EXPR:
            return _lower_binary(node)
        case DiceSyntaxKind.UNARY_EXPR:
            return UnaryNode(op="-", operand=_lower_single_child(node))
        case DiceSyntaxKind.PAREN_EXPR:
            return _lower_single_child(node)
        case DiceSyntaxKind.FUNCTION_CALL:
            return _lower_function_call(node)
        case DiceSyntaxKind.DICE:
            return _lower_dice(node)
        case DiceSyntaxKind.CUSTOM_DICE:
            return _lower_custom_dice(node)
        case DiceSyntaxKind.FUDGE_DICE:
            return _lower_fudge_dice(node)
        case DiceSyntaxKind.GROUPED_ROLL:
            return GroupedRollNode(
                expressions=_lower_expression_list(node),
                modifiers=_lower_modifiers(node),
            )
        case DiceSyntaxKind.TABLE_ROLL:
            return _lower_table_roll(node)
        case DiceSyntaxKind.MACRO_REF:
            return decode_macro(_only_token(node).text)
        case DiceSyntaxKind.INLINE_ROLL_EXPR:
            return decode_inline_roll(_only_token(node).text)
        case DiceSyntaxKind.ROLL_QUERY_EXPR:
            return decode_roll_query(_only_token(node).text)
        case DiceSyntaxKind.ROLL_REFERENCE_EXPR:
            return decode_roll_reference(_only_token(node).text)
        case _:
            raise DiceSyntaxError(f"Unexpected syntax node: {node.kind.name}")


def _lower_number(node: SyntaxNode) -> NumberNode:
    token = _only_token(node)
    if token.kind == DiceSyntaxKind.DECIMAL:
        return NumberNode(value=float(token.text))
    return NumberNode(value=int(token.text))


def _lower_binary(node: SyntaxNode) -> ArithmeticNode:
    operands = node.child_nodes()
    if len(operands) != 2:
        raise DiceSyntaxError(f"Incomplete expression: {node.text.strip()}")

    op = next(
        (_BINARY_OPERATORS[token.kind] for token in node.child_tokens() if token.kind in _BINARY_OPERATORS),
        None,
    )
    if op is None:
        raise DiceSyntaxError(f"Missing operator in: {node.text.strip()}")
    return ArithmeticNode(op=op, left=lower_expression(operands[0]), right=lower_expression(operands[1]))


def _lower_function_call(node: SyntaxNode) -> FunctionNode:
    name = node.first_token(DiceSyntaxKind.FUNCTION_NAME)
    if name is None:
        raise DiceSyntaxError(f"Missing function name in: {node.text.strip()}")
    return FunctionNode(name=name.text, args=_lower_expression_list(node))


def _lower_dice(node: SyntaxNode) -> DiceNode:
    count, after_marker = _split_count(node, DiceSyntaxKind.DICE_MARKER)
    sides = next((int(token.text) for token in after_marker if token.kind == DiceSyntaxKind.INT), None)
    if sides is None:
        raise DiceSyntaxError(f"Missing dice sides in: {node.text.strip()}")

    label_node = node.first_node(DiceSyntaxKind.LABEL)
    label = _lower_label(label_node) if label_node is not None else None
    return DiceNode(count=count, sides=sides, modifiers=_lower_modifiers(node), label=label)


def _lower_custom_dice(node: SyntaxNode) -> CustomDiceNode:
    count, _ = _split_count(node, DiceSyntaxKind.DICE_MARKER)
    side_list = node.first_node(DiceSyntaxKind.SIDE_LIST)
    sides: tuple[int, ...] = ()
    if side_list is not None:
        sides = tuple(int(token.text) for token in side_list.child_tokens() if token.kind == DiceSyntaxKind.INT)
    return CustomDiceNode(count=count, sides=sides, modifiers=_lower_modifiers(node))


def _lower_fudge_dice(node: SyntaxNode) -> FudgeDiceNode:
    count, _ = _split_count(node, DiceSyntaxKind.FUDGE_MARKER)
    marker = node.first_token(DiceSyntaxKind.FUDGE_MARKER)
    variant = "basic"
    if marker is not None and "." in marker.text:
        variant = marker.text.split(".", 1)[1]
    if variant not in FUDGE_VARIANTS:
        raise DiceSyntaxError(f"Unknown fudge dice variant: dF.{variant}")
    return FudgeDiceNode(count=count, variant=variant, modifiers=_lower_modifiers(node))


def _lower_table_roll(node: SyntaxNode) -> TableNode:
    table = node.first_token(DiceSyntaxKind.TABLE_NAME)
    if table is None:
        raise DiceSyntaxError(f"Missing table name in: {node.text.strip()}")
    count = node.first_token(DiceSyntaxKind.INT)
    name = decode_table_roll(table.text).name
    return TableNode(name=name, count=int(count.text) if count is not None else 1)


def _lower_label(node: SyntaxNode) -> str:
    label_text = node.first_token(DiceSyntaxKind.LABEL_TEXT)
    if label_text is not None:
        return label_text.text.strip()

    # Fallback: whatever sits between the brackets in the source text.
    open_bracket = node.first_token(DiceSyntaxKind.LBRACKET)
    close_bracket = node.first_token(DiceSyntaxKind.RBRACKET)
    text = node.text
    start = open_bracket.token_end - node.start if open_bracket is not None else 0
    end = close_bracket.token_start - node.start if close_bracket is not None else len(text)
    return text[start:end].strip()


def _lower_modifiers(node: SyntaxNode) -> tuple[Modifier, ...]:
    modifier_list = node.first_node(DiceSyntaxKind.MODIFIER_LIST)
    if modifier_list is None:
        return ()
    return decode_modifiers((token.token_start, token.text) for token in modifier_list.child_tokens())


def _lower_expression_list(node: SyntaxNode) -> tuple[DiceAst, ...]:
    expressions = node.first_node(DiceSyntaxKind.ARG_LIST)
    if expressions is None:
        return ()
    return tuple(lower_expression(child) for child in expressions.child_nodes())


def _lower_single_child(node: SyntaxNode) -> DiceAst:
    children = node.child_nodes()
    if not children:
        raise DiceSyntaxError(f"Incomplete expression: {node.text.strip()}")
    return lower_expression(children[0])


def _split_count(node: SyntaxNode, marker_kind: DiceSyntaxKind) -> tuple[int, list[SyntaxToken]]:
    """Return the dice count (default 1) and the tokens after the marker."""
    count = 1
    after: list[SyntaxToken] = []
    seen_marker = False
    for token in node.child_tokens():
        if seen_marker:
            after.append(token)
        elif token.kind == marker_kind:
            seen_marker = True
        elif token.kind == DiceSyntaxKind.INT:
            count = int(token.text)
    return count, after


def _only_token(node: SyntaxNode) -> SyntaxToken:
    tokens = node.child_tokens()
    if not tokens:
        raise DiceSyntaxError(f"Empty syntax node: {node.kind.name}")
    return tokens[0]


__all__ = ["lower_expression", "lower_syntax_tree", "lower_tree", "parse_to_ast"]
