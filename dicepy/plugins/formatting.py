"""Literal markup substitution (`%NEWLINE%`)."""

from __future__ import annotations

from typing import Final

from dicepy.ast.embedded import decode_formatting
from dicepy.ast.model import DiceAst, FormattingNode, NodeType
from dicepy.ast.walk import find_nodes
from dicepy.errors import DiceSyntaxError
from dicepy.pipeline.context import EvaluationContext
from dicepy.pipeline.plugin import PluginBase
from dicepy.pipeline.result import EvaluationResult

MARKUP_VALUES: Final[dict[str, str]] = {
    "NEWLINE": "\n",
}


class FormattingPlugin(PluginBase):
    name = "formatting"

    def parse(self, text: str) -> DiceAst:  # type: ignore[override]
        return decode_formatting(text)

    def evaluate(self, node: DiceAst, context: EvaluationContext) -> EvaluationResult | None:  # type: ignore[override]
        if not isinstance(node, FormattingNode):
            return None

        value = MARKUP_VALUES.get(node.markup.upper())
        if value is None:
            raise DiceSyntaxError(f"Unknown formatting markup: %{node.markup}%")
        return EvaluationResult(total=0, details={"markup": node.markup, "value": value})

    def extract_formatting(self, ast: DiceAst) -> list[FormattingNode]:  # type: ignore[override]
        return [node for node in find_nodes(ast, NodeType.FORMATTING) if isinstance(node, FormattingNode)]


__all__ = ["MARKUP_VALUES", "FormattingPlugin"]
