"""Named macro expansion (`#name`)."""

from __future__ import annotations

import logging

from dicepy.ast.model import DiceAst, MacroNode, NodeType
from dicepy.ast.walk import find_nodes
from dicepy.errors import DiceMissingDataError, DiceValidationError
from dicepy.pipeline.context import EvaluationContext
from dicepy.pipeline.plugin import RegistryBoundPlugin
from dicepy.pipeline.result import EvaluationResult

logger = logging.getLogger(__name__)


class MacrosPlugin(RegistryBoundPlugin):
    """Expands `#name` by evaluating `context.macro_map[name]` one nesting level deeper.

    Map values may be ready-made ASTs or expression text; text is parsed
    through the registry on every expansion.
    """

    name = "macros"

    def evaluate(self, node: DiceAst, context: EvaluationContext) -> EvaluationResult | None:  # type: ignore[override]
        if not isinstance(node, MacroNode):
            return None

        if context.nesting_level >= context.max_nesting:
            raise DiceValidationError(f"Macro recursion limit exceeded ({context.max_nesting} levels)")

        definition = context.macro_map.get(node.name)
        if definition is None or definition == "":
            raise DiceMissingDataError(f"Macro '{node.name}' not found")

        macro_ast = self.registry.parse(definition) if isinstance(definition, str) else definition
        nested = context.nested()
        logger.debug("Expanding macro %r at nesting level %d", node.name, nested.nesting_level)
        result = self.registry.evaluate(macro_ast, nested)

        return EvaluationResult(
            total=result.total,
            rolls=list(result.rolls),
            warnings=[f"Macro '{node.name}' expanded (nesting level: {nested.nesting_level})"],
            details={**result.details, "macro": node.name, "nesting_level": nested.nesting_level},
        )

    def extract_macros(self, ast: DiceAst) -> list[str]:  # type: ignore[override]
        return [node.name for node in find_nodes(ast, NodeType.MACRO) if isinstance(node, MacroNode)]


__all__ = ["MacrosPlugin"]
