"""Core dice-notation plugin: parses expressions and evaluates arithmetic and dice nodes."""

from __future__ import annotations

import logging
from typing import Any

from dicepy.ast.model import (
    ArithmeticNode,
    CustomDiceNode,
    DiceAst,
    DiceNode,
    FudgeDiceNode,
    FunctionNode,
    GroupedRollNode,
    Modifier,
    ModifierType,
    NumberNode,
    UnaryNode,
)
from dicepy.dice.functions import call_function, power
from dicepy.dice.modifiers import apply_modifiers
from dicepy.dice.rolling import roll_custom_dice, roll_dice, roll_fudge_dice
from dicepy.errors import DiceValidationError
from dicepy.parser import parse_result
from dicepy.pipeline.context import EvaluationContext
from dicepy.pipeline.options import RollerOptions
from dicepy.pipeline.plugin import RegistryBoundPlugin
from dicepy.pipeline.result import EvaluationResult

logger = logging.getLogger(__name__)


class DiceNotationPlugin(RegistryBoundPlugin):
    """Parses the full dice grammar and evaluates numbers, arithmetic, functions and dice.

    Every other node type (macros, tables, queries, ...) is declined so the
    registry can hand it to the matching auxiliary plugin. Child nodes are
    evaluated back through the registry for the same reason.
    """

    name = "dice"

    def __init__(self, options: RollerOptions | None = None) -> None:
        super().__init__()
        self.options = options or RollerOptions()

    def parse(self, text: str) -> DiceAst:  # type: ignore[override]
        return parse_result(text).ast_root()

    def evaluate(self, node: DiceAst, context: EvaluationContext) -> EvaluationResult | None:  # type: ignore[override]
        match node:
            case NumberNode(value=value):
                return EvaluationResult(total=value)
            case UnaryNode():
                return self._evaluate_unary(node, context)
            case ArithmeticNode():
                return self._evaluate_arithmetic(node, context)
            case FunctionNode():
                return self._evaluate_function(node, context)
            case DiceNode():
                return self._evaluate_dice(node, context)
            case CustomDiceNode():
                return self._evaluate_custom_dice(node, context)
            case FudgeDiceNode():
                return self._evaluate_fudge_dice(node, context)
            case GroupedRollNode():
                return self._evaluate_grouped_roll(node, context)
            case _:
                return None

    def _evaluate_unary(self, node: UnaryNode, context: EvaluationContext) -> EvaluationResult:
        operand = self.registry.evaluate(node.operand, context)
        total = -operand.total if node.op == "-" else operand.total
        return EvaluationResult(total=total, rolls=list(operand.rolls), details={"op": node.op})

    def _evaluate_arithmetic(self, node: ArithmeticNode, context: EvaluationContext) -> EvaluationResult:
        left = self.registry.evaluate(node.left, context)
        right = self.registry.evaluate(node.right, context)

        match node.op:
            case "+":
                total = left.total + right.total
            case "-":
                total = left.total - right.total
            case "*":
                total = left.total * right.total
            case "/":
                if right.total == 0:
                    raise DiceValidationError("Division by zero")
                total = left.total / right.total
            case "%":
                if right.total == 0:
                    raise DiceValidationError("Modulo by zero")
                total = left.total % right.total
            case "**":
                total = power(left.total, right.total)
            case _:
                raise DiceValidationError(f"Unknown operator: {node.op}")

        return EvaluationResult(
            total=total,
            rolls=[*left.rolls, *right.rolls],
            details={"op": node.op, "left": left.details, "right": right.details},
        )

    def _evaluate_function(self, node: FunctionNode, context: EvaluationContext) -> EvaluationResult:
        args = [self.registry.evaluate(arg, context).total for arg in node.args]
        total = call_function(node.name, args)
        return EvaluationResult(total=total, details={"function": node.name, "args": args})

    def _evaluate_dice(self, node: DiceNode, context: EvaluationContext) -> EvaluationResult:
        _require_positive_count(node.count)
        if node.sides <= 0:
            raise DiceValidationError("Dice sides must be positive")

        rolls = roll_dice(context.rng, node.count, node.sides)
        logger.debug("Rolled %dd%d: %s", node.count, node.sides, rolls)
        return self._finish(
            rolls, node.modifiers, node.sides, context, label=node.label, count=node.count, sides=node.sides
        )

    def _evaluate_custom_dice(self, node: CustomDiceNode, context: EvaluationContext) -> EvaluationResult:
        _require_positive_count(node.count)
        if not node.sides:
            raise DiceValidationError("Custom dice must have at least one side")

        rolls = roll_custom_dice(context.rng, node.count, node.sides)
        return self._finish(
            rolls, node.modifiers, max(node.sides), context, count=node.count, sides=list(node.sides)
        )

    def _evaluate_fudge_dice(self, node: FudgeDiceNode, context: EvaluationContext) -> EvaluationResult:
        _require_positive_count(node.count)
        rolls = roll_fudge_dice(context.rng, node.count, node.variant)
        return self._finish(rolls, node.modifiers, 1, context, count=node.count, variant=node.variant)

    def _evaluate_grouped_roll(self, node: GroupedRollNode, context: EvaluationContext) -> EvaluationResult:
        pool: list[int | float] = []
        for expression in node.expressions:
            result = self.registry.evaluate(expression, context)
            pool.extend(roll for roll in result.rolls if isinstance(roll, int | float))

        sides = int(max([*pool, 1]))
        outcome = apply_modifiers(pool, node.modifiers, sides, context, self.options)
        outcome.details.update(
            group_size=len(node.expressions),
            modifiers=_modifier_names(node.modifiers),
            roll_once=any(modifier.type is ModifierType.ROLL_ONCE for modifier in node.modifiers),
        )
        return outcome

    def _finish(
        self,
        rolls: list[int],
        modifiers: tuple[Modifier, ...],
        sides: int,
        context: EvaluationContext,
        **details: Any,
    ) -> EvaluationResult:
        outcome = apply_modifiers(rolls, modifiers, sides, context, self.options)
        outcome.details.update(details, modifiers=_modifier_names(modifiers))
        return outcome


def _require_positive_count(count: int) -> None:
    if count <= 0:
        raise DiceValidationError("Dice count must be positive")


def _modifier_names(modifiers: tuple[Modifier, ...]) -> list[str]:
    return [modifier.type.value for modifier in modifiers]


__all__ = ["DiceNotationPlugin"]
