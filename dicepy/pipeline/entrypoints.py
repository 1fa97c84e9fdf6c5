"""One-call entrypoints over a registry loaded with the built-in plugins."""

from __future__ import annotations

from dicepy.dice import DiceNotationPlugin
from dicepy.pipeline.context import EvaluationContext
from dicepy.pipeline.options import RollerOptions
from dicepy.pipeline.registry import Registry
from dicepy.pipeline.result import EvaluationResult
from dicepy.plugins import (
    FormattingPlugin,
    InlineRollsPlugin,
    MacrosPlugin,
    RollQueriesPlugin,
    RollReferencesPlugin,
    TablesPlugin,
)


def create_registry(options: RollerOptions | None = None) -> Registry:
    """Build a registry with the dice plugin first, then the auxiliary plugins."""
    resolved = options or RollerOptions()
    return Registry(
        (
            DiceNotationPlugin(resolved),
            MacrosPlugin(),
            TablesPlugin(),
            RollQueriesPlugin(),
            RollReferencesPlugin(),
            InlineRollsPlugin(),
            FormattingPlugin(),
        ),
        options=resolved,
    )


def process_expression(
    text: str,
    context: EvaluationContext | None = None,
    *,
    registry: Registry | None = None,
) -> EvaluationResult:
    """Parse, extract and evaluate `text` in one call."""
    resolved_registry = registry if registry is not None else create_registry()
    return resolved_registry.process_expression(text, context)
