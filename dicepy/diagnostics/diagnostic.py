"""Diagnostics core types."""

from dataclasses import dataclass
from typing import Literal

from dicepy.text import TextRange

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic emitted by the lexer or parser."""

    code: str
    message: str
    range: TextRange
    severity: Severity = "error"
    hint: str | None = None
    category: str | None = None

    def render(self) -> str:
        start, end = self.range.as_tuple()
        return f"{self.message} at {start}..{end}"
