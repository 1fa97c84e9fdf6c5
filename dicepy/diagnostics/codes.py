"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final

from dicepy.diagnostics.diagnostic import Diagnostic, Severity
from dicepy.text import TextRange


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None

    def at(self, range: TextRange, message: str | None = None) -> Diagnostic:
        return Diagnostic(
            code=self.code,
            message=message if message is not None else self.message,
            range=range,
            severity=self.severity,
            hint=self.hint,
            category=self.category,
        )


LEXER_UNEXPECTED_CHARACTER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNEXPECTED_CHARACTER",
    message="Unexpected character",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_INLINE_ROLL: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_INLINE_ROLL",
    message="Unterminated inline roll.",
    hint="Close the inline roll with `]]`.",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_ROLL_QUERY: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_ROLL_QUERY",
    message="Unterminated roll query.",
    hint="Close the roll query with `}`.",
    severity="error",
    category="lexer",
)

PARSER_EXPECTED_EXPRESSION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_EXPRESSION",
    message="Expected an expression",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TOKEN",
    message="Expected token",
    severity="error",
    category="parser",
)

PARSER_UNEXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_TOKEN",
    message="Unexpected token",
    severity="error",
    category="parser",
)

PARSER_EMPTY_INPUT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EMPTY_INPUT",
    message="Empty expression",
    hint="Write a roll such as `1d20 + 5`.",
    severity="error",
    category="parser",
)
