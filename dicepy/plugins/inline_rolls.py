"""Eagerly evaluated, indexed inline rolls (`[[expr]]`)."""

from __future__ import annotations

import logging

from dicepy.ast.embedded import decode_inline_roll
from dicepy.ast.model import DiceAst, InlineRollNode, NodeType
from dicepy.ast.walk import find_nodes
from dicepy.errors import DiceMissingDataError
from dicepy.pipeline.context import EvaluationContext
from dicepy.pipeline.plugin import RegistryBoundPlugin
from dicepy.pipeline.result import EvaluationResult

logger = logging.getLogger(__name__)


class InlineRollsPlugin(RegistryBoundPlugin):
    """Evaluates the inner expression against the same context and stores its total.

    The total lands in `context.rolls[index]`, so a `$[[index]]` reference
    evaluated later in the same expression reads it back.
    """

    name = "inline-rolls"

    def parse(self, text: str) -> DiceAst:  # type: ignore[override]
        return decode_inline_roll(text)

    def evaluate(self, node: DiceAst, context: EvaluationContext) -> EvaluationResult | None:  # type: ignore[override]
        if not isinstance(node, InlineRollNode):
            return None
        if node.index is None:
            raise DiceMissingDataError("Inline roll node missing index")

        inner = self.registry.evaluate(self.registry.parse(node.expression), context)
        context.rolls[node.index] = inner.total
        logger.debug("Inline roll %d (%s) = %r", node.index, node.expression, inner.total)

        return EvaluationResult(
            total=inner.total,
            rolls=list(inner.rolls),
            details={**inner.details, "index": node.index, "expression": node.expression},
        )

    def extract_rolls(self, ast: DiceAst) -> list[InlineRollNode]:  # type: ignore[override]
        return [node for node in find_nodes(ast, NodeType.INLINE_ROLL) if isinstance(node, InlineRollNode)]


__all__ = ["InlineRollsPlugin"]
