"""Dice-notation parsing and rolling."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dicepy.pipeline import EvaluationContext, EvaluationResult, Registry, RollerOptions


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


__all__ = ["create_registry", "process_expression"]
