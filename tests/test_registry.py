from dataclasses import dataclass
from typing import ClassVar

import pytest

from dicepy.ast import DiceAst, NodeType, NumberNode, TableNode
from dicepy.errors import DiceMissingDataError, DiceSyntaxError, DiceValidationError
from dicepy.pipeline import (
    EvaluationContext,
    EvaluationResult,
    PluginBase,
    Registry,
    RegistryBoundPlugin,
    RollerOptions,
)


@dataclass(frozen=True, slots=True)
class WordNode:
    type: ClassVar[NodeType] = NodeType.MACRO

    word: str


class WordPlugin(PluginBase):
    """Parses bare words and evaluates them to their length."""

    name = "words"

    def parse(self, text: str) -> DiceAst:  # type: ignore[override]
        if not text.isalpha():
            raise DiceSyntaxError(f"Not a word: {text}")
        return WordNode(text)  # type: ignore[return-value]

    def evaluate(self, node: DiceAst, context: EvaluationContext) -> EvaluationResult | None:  # type: ignore[override]
        if not isinstance(node, WordNode):
            return None
        return EvaluationResult(total=len(node.word), warnings=[f"word {node.word}"])

    def extract_macros(self, ast: DiceAst) -> list[str]:  # type: ignore[override]
        return [ast.word] if isinstance(ast, WordNode) else []


class FailingPlugin(PluginBase):
    """Warns, then fails on every node."""

    name = "failing"

    def __init__(self, error: Exception) -> None:
        self.error = error

    def evaluate(self, node: DiceAst, context: EvaluationContext) -> EvaluationResult | None:  # type: ignore[override]
        context.warnings.append("should be rolled back")
        raise self.error


class NumberPlugin(PluginBase):
    name = "numbers"

    def evaluate(self, node: DiceAst, context: EvaluationContext) -> EvaluationResult | None:  # type: ignore[override]
        if isinstance(node, NumberNode):
            return EvaluationResult(total=node.value)
        return None


def test_register_rejects_duplicate_names() -> None:
    registry = Registry([WordPlugin()])

    with pytest.raises(ValueError, match="Plugin 'words' is already registered"):
        registry.register(WordPlugin())


def test_register_hook_binds_registry() -> None:
    plugin = RegistryBoundPlugin()
    with pytest.raises(RuntimeError):
        _ = plugin.registry

    registry = Registry([plugin])

    assert plugin.registry is registry
    assert registry.plugins == (plugin,)


def test_new_context_uses_registry_options() -> None:
    registry = Registry(options=RollerOptions(default_max_rolls=7, default_max_nesting=3))
    context = registry.new_context(seed=1)

    assert context.max_rolls == 7
    assert context.max_nesting == 3


def test_parse_uses_first_accepting_plugin() -> None:
    registry = Registry([WordPlugin()])

    assert registry.parse("hello") == WordNode("hello")


def test_parse_failure_reports_input() -> None:
    registry = Registry([NumberPlugin(), WordPlugin()])

    with pytest.raises(DiceSyntaxError, match="Unable to parse input: 1 2"):
        registry.parse("1 2")


def test_evaluate_skips_declining_plugins() -> None:
    registry = Registry([NumberPlugin(), WordPlugin()])
    context = registry.new_context()

    result = registry.evaluate(WordNode("dice"), context)  # type: ignore[arg-type]

    assert result.total == 4
    assert result.warnings == ["word dice"]
    assert context.warnings == ["word dice"]


def test_unhandled_node_type() -> None:
    registry = Registry([NumberPlugin()])

    with pytest.raises(DiceSyntaxError, match="Unable to evaluate node type: table"):
        registry.evaluate(TableNode("loot"), registry.new_context())


def test_failed_plugin_is_skipped_and_its_warnings_dropped() -> None:
    registry = Registry([FailingPlugin(DiceValidationError("nope")), NumberPlugin()])
    context = registry.new_context()

    result = registry.evaluate(NumberNode(3), context)

    assert result.total == 3
    assert context.warnings == []


def test_last_plugin_error_is_reraised() -> None:
    registry = Registry([FailingPlugin(DiceMissingDataError("missing")), NumberPlugin()])

    with pytest.raises(DiceMissingDataError, match="missing"):
        registry.evaluate(TableNode("loot"), registry.new_context())


def test_unexpected_plugin_exception_is_wrapped() -> None:
    registry = Registry([FailingPlugin(KeyError("boom"))])

    with pytest.raises(DiceSyntaxError, match="Evaluation failed") as excinfo:
        registry.evaluate(NumberNode(1), registry.new_context())

    assert isinstance(excinfo.value.__cause__, KeyError)


def test_missing_total_defaults_to_zero() -> None:
    class NoTotalPlugin(PluginBase):
        name = "no-total"

        def evaluate(self, node: DiceAst, context: EvaluationContext) -> EvaluationResult | None:  # type: ignore[override]
            return EvaluationResult(total=None)  # type: ignore[arg-type]

    registry = Registry([NoTotalPlugin()])

    assert registry.evaluate(NumberNode(9), registry.new_context()).total == 0


def test_process_expression_merges_extractions() -> None:
    registry = Registry([WordPlugin()])

    result = registry.process_expression("abc")

    assert result.total == 3
    assert result.details == {
        "queries": [],
        "macros": ["abc"],
        "tables": [],
        "rolls": [],
        "formatting": [],
    }
