"""Diagnostics."""

from dicepy.diagnostics.codes import (
    LEXER_UNEXPECTED_CHARACTER,
    LEXER_UNTERMINATED_INLINE_ROLL,
    LEXER_UNTERMINATED_ROLL_QUERY,
    PARSER_EMPTY_INPUT,
    PARSER_EXPECTED_EXPRESSION,
    PARSER_EXPECTED_TOKEN,
    PARSER_UNEXPECTED_TOKEN,
    DiagnosticSpec,
)
from dicepy.diagnostics.diagnostic import Diagnostic, Severity
from dicepy.diagnostics.report import collect_diagnostics, first_error, has_errors

__all__ = [
    "LEXER_UNEXPECTED_CHARACTER",
    "LEXER_UNTERMINATED_INLINE_ROLL",
    "LEXER_UNTERMINATED_ROLL_QUERY",
    "PARSER_EMPTY_INPUT",
    "PARSER_EXPECTED_EXPRESSION",
    "PARSER_EXPECTED_TOKEN",
    "PARSER_UNEXPECTED_TOKEN",
    "Diagnostic",
    "DiagnosticSpec",
    "Severity",
    "collect_diagnostics",
    "first_error",
    "has_errors",
]
