"""Lexer."""

from dicepy.lexer.lexer import MODIFIER_PATTERN, Lexer, dump_tokens, token_text
from dicepy.lexer.tokens import (
    Token,
    TokenKind,
    Trivia,
    TriviaKind,
    TriviaPiece,
    trivia_kind_from_token_kind,
)

__all__ = [
    "MODIFIER_PATTERN",
    "Lexer",
    "Token",
    "TokenKind",
    "Trivia",
    "TriviaKind",
    "TriviaPiece",
    "dump_tokens",
    "token_text",
    "trivia_kind_from_token_kind",
]
