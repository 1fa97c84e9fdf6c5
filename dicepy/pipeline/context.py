"""Evaluation context threaded through every recursive evaluation call."""

from __future__ import annotations

import random
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, TypeAlias

from dicepy.pipeline.options import RollerOptions

if TYPE_CHECKING:
    from dicepy.ast import DiceAst

TableEntry: TypeAlias = str | int | float | Mapping[str, object]
StoredRoll: TypeAlias = int | float | list[int | float]
UserValue: TypeAlias = str | int | float


@dataclass(slots=True)
class EvaluationContext:
    """Per-call state for one top-level evaluation.

    `rolls` and `warnings` are shared by every nested context created with
    `nested()`; do not share one instance between concurrent evaluations.
    """

    macro_map: dict[str, DiceAst | str] = field(default_factory=dict)
    table_map: dict[str, Sequence[TableEntry]] = field(default_factory=dict)
    user_input: dict[str, UserValue] = field(default_factory=dict)
    rolls: dict[int | str, StoredRoll] = field(default_factory=dict)
    nesting_level: int = 0
    max_nesting: int = 99
    warnings: list[str] = field(default_factory=list)
    max_rolls: int = 99
    rng: random.Random = field(default_factory=random.Random)

    @classmethod
    def create(
        cls,
        *,
        options: RollerOptions | None = None,
        seed: int | None = None,
        **kwargs: object,
    ) -> EvaluationContext:
        resolved = options or RollerOptions()
        kwargs.setdefault("max_nesting", resolved.default_max_nesting)
        kwargs.setdefault("max_rolls", resolved.default_max_rolls)
        if seed is not None:
            kwargs.setdefault("rng", random.Random(seed))
        return cls(**kwargs)  # type: ignore[arg-type]

    def nested(self) -> EvaluationContext:
        """Same maps, rolls and warnings, one level deeper."""
        return replace(self, nesting_level=self.nesting_level + 1)
