"""Plugin contract for the dice registry."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias

if TYPE_CHECKING:
    from dicepy.ast import DiceAst
    from dicepy.pipeline.context import EvaluationContext
    from dicepy.pipeline.registry import Registry
    from dicepy.pipeline.result import EvaluationResult

ParseHook: TypeAlias = "Callable[[str], DiceAst]"
EvaluateHook: TypeAlias = "Callable[[DiceAst, EvaluationContext], EvaluationResult | None]"
ExtractHook: TypeAlias = "Callable[[DiceAst], list[Any]]"
RegisterHook: TypeAlias = "Callable[[Registry], None]"


class DicePlugin(Protocol):
    """Registry plugin contract.

    Every hook is optional; an absent hook is `None`. `evaluate` returns
    `None` for nodes it does not handle and reports only the warnings it
    produced itself (the registry collects nested warnings in the context).
    """

    @property
    def name(self) -> str: ...

    register: RegisterHook | None
    parse: ParseHook | None
    evaluate: EvaluateHook | None
    extract_queries: ExtractHook | None
    extract_macros: ExtractHook | None
    extract_tables: ExtractHook | None
    extract_rolls: ExtractHook | None
    extract_formatting: ExtractHook | None


class PluginBase:
    """Base class giving every optional hook a `None` default."""

    name: str = "plugin"

    register: RegisterHook | None = None
    parse: ParseHook | None = None
    evaluate: EvaluateHook | None = None
    extract_queries: ExtractHook | None = None
    extract_macros: ExtractHook | None = None
    extract_tables: ExtractHook | None = None
    extract_rolls: ExtractHook | None = None
    extract_formatting: ExtractHook | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class RegistryBoundPlugin(PluginBase):
    """Plugin that keeps the registry it was registered with, for nested calls."""

    def __init__(self) -> None:
        self._registry: Registry | None = None

    def register(self, registry: Registry) -> None:  # type: ignore[override]
        self._registry = registry

    @property
    def registry(self) -> Registry:
        if self._registry is None:
            raise RuntimeError(f"Plugin {self.name!r} is not registered with a registry")
        return self._registry
