"""User-input substitution for `?{prompt|...}` queries."""

from __future__ import annotations

import re
from typing import Final

from dicepy.ast.embedded import decode_roll_query
from dicepy.ast.model import DiceAst, NodeType, RollQueryNode
from dicepy.ast.walk import find_nodes
from dicepy.errors import DiceMissingDataError, DiceValidationError
from dicepy.pipeline.context import EvaluationContext, UserValue
from dicepy.pipeline.plugin import PluginBase
from dicepy.pipeline.result import EvaluationResult

_LEADING_NUMBER: Final[re.Pattern[str]] = re.compile(r"\s*([-+]?(?:\d+\.?\d*|\.\d+))")


def coerce_number(value: UserValue) -> int | float:
    """Read a leading number from `value`; anything unreadable becomes 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int | float):
        return value
    match = _LEADING_NUMBER.match(value)
    if match is None:
        return 0
    text = match[1]
    return float(text) if "." in text else int(text)


class RollQueriesPlugin(PluginBase):
    name = "roll-queries"

    def parse(self, text: str) -> DiceAst:  # type: ignore[override]
        return decode_roll_query(text)

    def evaluate(self, node: DiceAst, context: EvaluationContext) -> EvaluationResult | None:  # type: ignore[override]
        if not isinstance(node, RollQueryNode):
            return None

        if context.nesting_level >= context.max_nesting:
            raise DiceValidationError(f"Roll query recursion limit exceeded ({context.max_nesting} levels)")

        if node.prompt in context.user_input:
            user_value = context.user_input[node.prompt]
        elif node.default is not None:
            user_value = node.default
        else:
            raise DiceMissingDataError(f"User input not provided for query: {node.prompt}")

        if node.options:
            valid = [option.value for option in node.options]
            if str(user_value) not in valid:
                raise DiceValidationError(
                    f"Invalid option '{user_value}' for query '{node.prompt}'. Valid options: {', '.join(valid)}"
                )

        result = coerce_number(user_value)
        return EvaluationResult(
            total=result,
            details={
                "query": node.prompt,
                "user_value": user_value,
                "result": result,
                "nesting_level": context.nesting_level + 1,
            },
        )

    def extract_queries(self, ast: DiceAst) -> list[RollQueryNode]:  # type: ignore[override]
        return [node for node in find_nodes(ast, NodeType.ROLL_QUERY) if isinstance(node, RollQueryNode)]


__all__ = ["RollQueriesPlugin", "coerce_number"]
