"""Traversal helpers over the dice AST."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from dicepy.ast.model import (
    ArithmeticNode,
    DiceAst,
    FunctionNode,
    GroupedRollNode,
    InlineRollNode,
    NodeType,
    UnaryNode,
)


def child_nodes(node: DiceAst) -> tuple[DiceAst, ...]:
    match node:
        case UnaryNode(operand=operand):
            return (operand,)
        case ArithmeticNode(left=left, right=right):
            return (left, right)
        case FunctionNode(args=args):
            return args
        case GroupedRollNode(expressions=expressions):
            return expressions
        case _:
            return ()


def iter_nodes(node: DiceAst) -> Iterator[DiceAst]:
    """Yield `node` and its descendants in document (pre-)order."""
    yield node
    for child in child_nodes(node):
        yield from iter_nodes(child)


def traverse(node: DiceAst, visit: Callable[[DiceAst], None]) -> None:
    for current in iter_nodes(node):
        visit(current)


def find_nodes(node: DiceAst, node_type: NodeType) -> list[DiceAst]:
    return [current for current in iter_nodes(node) if current.type == node_type]


def assign_inline_roll_indices(node: DiceAst) -> int:
    """Number every inline roll in document order; returns how many were found."""
    counter = 0
    for current in iter_nodes(node):
        if isinstance(current, InlineRollNode):
            current.index = counter
            counter += 1
    return counter


__all__ = [
    "assign_inline_roll_indices",
    "child_nodes",
    "find_nodes",
    "iter_nodes",
    "traverse",
]
