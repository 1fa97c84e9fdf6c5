"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum

from dicepy.text import TextRange, TextSize


class TokenKind(IntEnum):
    # -------------------------
    # Special / sentinels
    # -------------------------
    EOF = 1

    # -------------------------
    # Trivia tokens (emitted by the lexer)
    # -------------------------
    WHITESPACE = 10
    SKIPPED = 11  # unrecognised input, preserved for the CST

    # -------------------------
    # Literals / names
    # -------------------------
    INT = 20
    DECIMAL = 21
    FUNCTION_NAME = 22  # floor, ceil, round, abs, min, max
    LABEL_TEXT = 23  # text inside `2d6[fire]`

    # -------------------------
    # Dice markers
    # -------------------------
    DICE_MARKER = 30  # d / D
    FUDGE_MARKER = 31  # dF, dF.1, dF.2, dF.3
    MODIFIER = 32  # one whole modifier fragment, e.g. `kh3`, `r<=2`, `!>5`

    # -------------------------
    # Embedded forms (single tokens, decoded during lowering)
    # -------------------------
    MACRO = 40  # #name
    INLINE_ROLL = 41  # [[ ... ]]
    TABLE_NAME = 42  # t[name]
    ROLL_QUERY = 43  # ?{ ... }
    ROLL_REFERENCE = 44  # $[[N]] or $[roll:name]

    # -------------------------
    # Operators
    # -------------------------
    PLUS = 50  # +
    MINUS = 51  # -
    STAR = 52  # *
    SLASH = 53  # /
    PERCENT = 54  # %
    STAR_STAR = 55  # **

    # -------------------------
    # Punctuation
    # -------------------------
    COMMA = 60  # ,
    LBRACE = 61  # {
    RBRACE = 62  # }
    LBRACKET = 63  # [
    RBRACKET = 64  # ]
    LPAREN = 65  # (
    RPAREN = 66  # )

    @property
    def is_trivia(self) -> bool:
        return self in (TokenKind.WHITESPACE, TokenKind.SKIPPED)


class TriviaKind(IntEnum):
    """The trivia vocabulary (separate from TokenKind for type-safety)."""

    WHITESPACE = 1
    SKIPPED = 2


def trivia_kind_from_token_kind(kind: TokenKind) -> TriviaKind:
    """Map lexer trivia token kinds to TriviaKind.

    Raises if called with a non-trivia TokenKind.
    """
    match kind:
        case TokenKind.WHITESPACE:
            return TriviaKind.WHITESPACE
        case TokenKind.SKIPPED:
            return TriviaKind.SKIPPED
        case _:
            raise ValueError(f"Not a trivia token kind: {kind!r}")


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token (trivia or non-trivia)."""

    kind: TokenKind
    range: TextRange


@dataclass(frozen=True, slots=True)
class Trivia:
    """Range-based trivia recorded by the TokenSource."""

    kind: TriviaKind
    range: TextRange
    trailing: bool


@dataclass(frozen=True, slots=True)
class TriviaPiece:
    """Compact trivia unit stored in the CST (kind + length)."""

    kind: TriviaKind
    length: TextSize
