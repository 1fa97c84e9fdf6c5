"""Error hierarchy raised by parsing and evaluation."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from dicepy.diagnostics import Diagnostic


class DiceRollerError(Exception):
    """Base class for every failure the dice engine reports to callers."""

    default_code: ClassVar[str] = "DICE_ROLLER_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code


class DiceSyntaxError(DiceRollerError):
    """Input could not be parsed, or a node/function/markup name is unknown."""

    default_code = "SYNTAX_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        *,
        diagnostics: list[Diagnostic] | None = None,
    ) -> None:
        super().__init__(message, code)
        self.diagnostics = list(diagnostics) if diagnostics is not None else []


class DiceValidationError(DiceRollerError):
    """Well-formed input with invalid values (zero dice, division by zero, ...)."""

    default_code = "VALIDATION_ERROR"


class DiceMissingDataError(DiceRollerError):
    """A macro, table, roll reference or user input could not be resolved."""

    default_code = "MISSING_DATA_ERROR"


__all__ = [
    "DiceMissingDataError",
    "DiceRollerError",
    "DiceSyntaxError",
    "DiceValidationError",
]
