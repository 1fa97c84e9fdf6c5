"""Weighted random table rolls (`Nt[name]`)."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from dicepy.ast.embedded import decode_table_roll
from dicepy.ast.model import DiceAst, NodeType, TableNode
from dicepy.ast.walk import find_nodes
from dicepy.errors import DiceMissingDataError, DiceValidationError
from dicepy.pipeline.context import EvaluationContext, TableEntry
from dicepy.pipeline.plugin import PluginBase
from dicepy.pipeline.result import EvaluationResult

logger = logging.getLogger(__name__)


def build_weighted_pool(entries: Sequence[TableEntry]) -> list[Any]:
    """Expand table entries into a pool sampled uniformly.

    When any `{"value", "weight"}` entry is present only weighted entries
    count; otherwise plain strings and numbers do, so repeats weigh more.
    """
    weighted = [entry for entry in entries if isinstance(entry, Mapping) and entry.get("weight")]
    if weighted:
        pool: list[Any] = []
        for entry in weighted:
            if entry.get("value") is None:
                continue
            weight = entry["weight"]
            if isinstance(weight, int) and not isinstance(weight, bool) and weight > 0:
                pool.extend([entry["value"]] * weight)
        return pool
    return [entry for entry in entries if isinstance(entry, str | int | float) and not isinstance(entry, bool)]


class TablesPlugin(PluginBase):
    name = "tables"

    def parse(self, text: str) -> DiceAst:  # type: ignore[override]
        return decode_table_roll(text)

    def evaluate(self, node: DiceAst, context: EvaluationContext) -> EvaluationResult | None:  # type: ignore[override]
        if not isinstance(node, TableNode):
            return None

        entries = context.table_map.get(node.name)
        if not entries:
            raise DiceMissingDataError(f"Table '{node.name}' not found or empty")
        if isinstance(node.count, bool) or not isinstance(node.count, int) or node.count < 1:
            raise DiceValidationError(f"Invalid roll count for table '{node.name}': {node.count}")

        pool = build_weighted_pool(entries)
        if not pool:
            raise DiceValidationError(f"Table '{node.name}' has no valid entries")

        results = [context.rng.choice(pool) for _ in range(node.count)]
        logger.debug("Rolled table %r x%d: %s", node.name, node.count, results)
        return EvaluationResult(
            total=0,
            rolls=[],
            details={
                "table": node.name,
                "count": node.count,
                "results": results,
                "weighted_pool_size": len(pool),
            },
        )

    def extract_tables(self, ast: DiceAst) -> list[dict[str, Any]]:  # type: ignore[override]
        return [
            {"name": node.name, "count": node.count}
            for node in find_nodes(ast, NodeType.TABLE)
            if isinstance(node, TableNode)
        ]


__all__ = ["TablesPlugin", "build_weighted_pool"]
