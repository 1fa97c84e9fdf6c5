"""Cross-references to earlier inline or named rolls (`$[[N]]`, `$[roll:name]`)."""

from __future__ import annotations

from dicepy.ast.embedded import decode_roll_reference
from dicepy.ast.model import DiceAst, NodeType, RollReferenceNode
from dicepy.ast.walk import find_nodes
from dicepy.errors import DiceMissingDataError
from dicepy.pipeline.context import EvaluationContext
from dicepy.pipeline.plugin import PluginBase
from dicepy.pipeline.result import EvaluationResult


class RollReferencesPlugin(PluginBase):
    name = "roll-references"

    def parse(self, text: str) -> DiceAst:  # type: ignore[override]
        return decode_roll_reference(text)

    def evaluate(self, node: DiceAst, context: EvaluationContext) -> EvaluationResult | None:  # type: ignore[override]
        if not isinstance(node, RollReferenceNode):
            return None

        if node.ref not in context.rolls:
            raise DiceMissingDataError(f"Referenced roll '{node.ref}' not found")

        value = context.rolls[node.ref]
        if isinstance(value, list):
            return EvaluationResult(total=0, rolls=list(value), details={"ref": node.ref, "value": value})
        return EvaluationResult(total=value, details={"ref": node.ref, "value": value})

    def extract_rolls(self, ast: DiceAst) -> list[int | str]:  # type: ignore[override]
        return [node.ref for node in find_nodes(ast, NodeType.ROLL_REFERENCE) if isinstance(node, RollReferenceNode)]


__all__ = ["RollReferencesPlugin"]
