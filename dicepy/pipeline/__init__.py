"""Evaluation context, results, plugin registry and lazy pipeline entrypoint exports."""

from __future__ import annotations

from dicepy.pipeline.context import EvaluationContext, StoredRoll, TableEntry, UserValue
from dicepy.pipeline.options import RollerOptions
from dicepy.pipeline.plugin import DicePlugin, PluginBase, RegistryBoundPlugin
from dicepy.pipeline.registry import Registry
from dicepy.pipeline.result import DiceParseResult, EvaluationResult, RollValue


def create_registry(options: RollerOptions | None = None) -> Registry:
    from dicepy.pipeline.entrypoints import create_registry as _create_registry

    return _create_registry(options)


def process_expression(
    text: str,
    context: EvaluationContext | None = None,
    *,
    registry: Registry | None = None,
) -> EvaluationResult:
    from dicepy.pipeline.entrypoints import process_expression as _process_expression

    return _process_expression(text, context, registry=registry)


__all__ = [
    "DiceParseResult",
    "DicePlugin",
    "EvaluationContext",
    "EvaluationResult",
    "PluginBase",
    "Registry",
    "RegistryBoundPlugin",
    "RollValue",
    "RollerOptions",
    "StoredRoll",
    "TableEntry",
    "UserValue",
    "create_registry",
    "process_expression",
]
