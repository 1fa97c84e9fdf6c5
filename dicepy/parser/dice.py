"""High-level parse entrypoint for dice expressions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dicepy.diagnostics import collect_diagnostics
from dicepy.lexer import Lexer
from dicepy.parser.grammar import parse_expression_root
from dicepy.parser.parse import build_lossless_tree
from dicepy.parser.parser import Parser
from dicepy.parser.token_source import TokenSource
from dicepy.parser.tree_sink import ParsedGreenTree

if TYPE_CHECKING:
    from dicepy.pipeline import DiceParseResult


def parse(text: str) -> ParsedGreenTree:
    """Parse an expression into a lossless green tree plus diagnostics."""
    lexer = Lexer(text)
    source = TokenSource(lexer)
    parser = Parser(source)

    parse_expression_root(parser)
    events, parser_diagnostics = parser.finish()
    trivia, lexer_diagnostics = source.finish()
    diagnostics = collect_diagnostics(lexer_diagnostics, parser_diagnostics)

    return build_lossless_tree(
        text=text,
        events=events,
        trivia=trivia,
        diagnostics=diagnostics,
    )


def parse_result(text: str) -> DiceParseResult:
    from dicepy.pipeline import DiceParseResult

    return DiceParseResult(source_text=text, parsed=parse(text))
