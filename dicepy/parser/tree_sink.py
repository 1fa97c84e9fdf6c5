"""Lossless tree sink for parser events."""

from dataclasses import dataclass

from dicepy.cst import GreenNode, TreeBuilder
from dicepy.diagnostics import Diagnostic
from dicepy.lexer import Trivia, TriviaPiece
from dicepy.syntax import DiceSyntaxKind
from dicepy.text import TextSize


@dataclass(frozen=True, slots=True)
class ParsedGreenTree:
    root: GreenNode
    diagnostics: list[Diagnostic]


class LosslessTreeSink:
    """Converts parser events + trivia ownership into a green CST."""

    def __init__(self, text: str, trivia: list[Trivia]) -> None:
        self._text = text
        self._trivia = trivia
        self._text_pos = TextSize.from_int(0)
        self._trivia_pos = 0
        self._parents_count = 0
        self._errors: list[Diagnostic] = []
        self._builder = TreeBuilder()
        self._needs_eof = True
        self._trivia_pieces: list[TriviaPiece] = []

    def token(self, kind: DiceSyntaxKind, end: TextSize) -> None:
        self._do_token(kind, end)

    def start_node(self, kind: DiceSyntaxKind) -> None:
        self._builder.start_node(kind)
        self._parents_count += 1

    def finish_node(self) -> None:
        self._parents_count -= 1
        if self._parents_count < 0:
            raise RuntimeError("finish_node called more often than start_node")

        if self._parents_count == 0 and self._needs_eof:
            self._do_token(DiceSyntaxKind.EOF, TextSize.from_int(len(self._text)))

        self._builder.finish_node()

    def errors(self, errors: list[Diagnostic]) -> None:
        self._errors = list(errors)

    def finish(self) -> ParsedGreenTree:
        return ParsedGreenTree(root=self._builder.finish(), diagnostics=self._errors)

    def _do_token(self, kind: DiceSyntaxKind, token_end: TextSize) -> None:
        if kind == DiceSyntaxKind.EOF:
            self._needs_eof = False

        self._eat_trivia(trailing=False)
        leading = tuple(self._trivia_pieces)
        self._trivia_pieces.clear()

        token_start = self._text_pos
        self._text_pos = max(token_end, token_start)

        self._eat_trivia(trailing=True)
        trailing = tuple(self._trivia_pieces)
        self._trivia_pieces.clear()

        self._builder.token_with_trivia(
            kind=kind,
            text=self._text[token_start.value : self._text_pos.value],
            leading=leading,
            trailing=trailing,
        )

    def _eat_trivia(self, *, trailing: bool) -> None:
        while self._trivia_pos < len(self._trivia):
            trivia = self._trivia[self._trivia_pos]
            if trivia.trailing != trailing or self._text_pos != trivia.range.start:
                break

            self._trivia_pieces.append(TriviaPiece(kind=trivia.kind, length=trivia.range.len()))
            self._text_pos = trivia.range.end
            self._trivia_pos += 1
