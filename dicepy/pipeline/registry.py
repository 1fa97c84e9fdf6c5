"""Ordered plugin registry and the parse/extract/evaluate pipeline."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from dicepy.ast import assign_inline_roll_indices
from dicepy.errors import DiceRollerError, DiceSyntaxError
from dicepy.pipeline.context import EvaluationContext
from dicepy.pipeline.options import RollerOptions
from dicepy.pipeline.result import EvaluationResult

if TYPE_CHECKING:
    from dicepy.ast import DiceAst
    from dicepy.pipeline.plugin import DicePlugin

logger = logging.getLogger(__name__)

EXTRACTOR_HOOKS: tuple[tuple[str, str], ...] = (
    ("queries", "extract_queries"),
    ("macros", "extract_macros"),
    ("tables", "extract_tables"),
    ("rolls", "extract_rolls"),
    ("formatting", "extract_formatting"),
)


class Registry:
    """Plugins in registration order.

    `parse` and `evaluate` are first-success across plugins; the `extract_*`
    methods concatenate every plugin's output.
    """

    def __init__(self, plugins: Iterable[DicePlugin] = (), *, options: RollerOptions | None = None) -> None:
        self._plugins: list[DicePlugin] = []
        self._options = options or RollerOptions()
        for plugin in plugins:
            self.register(plugin)

    @property
    def plugins(self) -> tuple[DicePlugin, ...]:
        return tuple(self._plugins)

    @property
    def options(self) -> RollerOptions:
        return self._options

    def register(self, plugin: DicePlugin) -> None:
        if any(existing.name == plugin.name for existing in self._plugins):
            raise ValueError(f"Plugin {plugin.name!r} is already registered")
        self._plugins.append(plugin)
        if plugin.register is not None:
            plugin.register(self)
        logger.debug("Registered plugin %r", plugin.name)

    def new_context(self, **kwargs: Any) -> EvaluationContext:
        return EvaluationContext.create(options=self._options, **kwargs)

    def parse(self, text: str) -> DiceAst:
        """Parse with the first plugin that accepts `text`, then index inline rolls."""
        for plugin in self._plugins:
            if plugin.parse is None:
                continue
            try:
                ast = plugin.parse(text)
            except DiceRollerError as error:
                logger.debug("Plugin %r could not parse %r: %s", plugin.name, text, error)
                continue
            assign_inline_roll_indices(ast)
            return ast

        raise DiceSyntaxError(f"Unable to parse input: {text}")

    def evaluate(self, node: DiceAst, context: EvaluationContext) -> EvaluationResult:
        """Evaluate `node` with the first plugin that returns a result.

        A plugin that raises is skipped. If no plugin handles the node, the
        last error raised by a plugin is re-raised; with no such error the
        node type itself is reported as unsupported.
        """
        last_error: DiceRollerError | None = None
        try:
            for plugin in self._plugins:
                if plugin.evaluate is None:
                    continue

                mark = len(context.warnings)
                try:
                    result = plugin.evaluate(node, context)
                except DiceRollerError as error:
                    del context.warnings[mark:]
                    logger.debug("Plugin %r failed on %s node: %s", plugin.name, node.type, error)
                    last_error = error
                    continue

                if result is None:
                    continue

                logger.debug("Plugin %r handled %s node, total=%r", plugin.name, node.type, result.total)
                context.warnings.extend(result.warnings)
                return EvaluationResult(
                    total=result.total or 0,
                    rolls=list(result.rolls),
                    warnings=list(context.warnings),
                    details=dict(result.details),
                )
        except DiceRollerError:
            raise
        except Exception as error:
            raise DiceSyntaxError(f"Evaluation failed: {error}") from error

        if last_error is not None:
            raise last_error
        raise DiceSyntaxError(f"Unable to evaluate node type: {node.type}")

    def extract_queries(self, ast: DiceAst) -> list[Any]:
        return self._flat_map("extract_queries", ast)

    def extract_macros(self, ast: DiceAst) -> list[Any]:
        return self._flat_map("extract_macros", ast)

    def extract_tables(self, ast: DiceAst) -> list[Any]:
        return self._flat_map("extract_tables", ast)

    def extract_rolls(self, ast: DiceAst) -> list[Any]:
        return self._flat_map("extract_rolls", ast)

    def extract_formatting(self, ast: DiceAst) -> list[Any]:
        return self._flat_map("extract_formatting", ast)

    def process_expression(self, text: str, context: EvaluationContext | None = None) -> EvaluationResult:
        """Parse, run every extractor, evaluate, and merge the extractions into `details`."""
        resolved_context = context if context is not None else self.new_context()
        try:
            ast = self.parse(text)
            extracted = {key: self._flat_map(hook, ast) for key, hook in EXTRACTOR_HOOKS}
            result = self.evaluate(ast, resolved_context)
        except DiceRollerError:
            raise
        except Exception as error:
            raise DiceSyntaxError(f"Processing failed: {error}") from error

        return replace(result, details={**result.details, **extracted})

    def _flat_map(self, hook: str, ast: DiceAst) -> list[Any]:
        items: list[Any] = []
        for plugin in self._plugins:
            extractor = getattr(plugin, hook, None)
            if extractor is not None:
                items.extend(extractor(ast))
        return items
