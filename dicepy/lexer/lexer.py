"""Lexer."""

import re
from typing import Final

from dicepy.diagnostics import (
    LEXER_UNEXPECTED_CHARACTER,
    LEXER_UNTERMINATED_INLINE_ROLL,
    LEXER_UNTERMINATED_ROLL_QUERY,
    Diagnostic,
)
from dicepy.lexer.tokens import Token, TokenKind
from dicepy.text import TextRange, TextSize, slice_text_range

# Alternatives are tried in order, so longer forms sharing a prefix come first.
MODIFIER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"""
    k[hl]\d+
    | k[<>]\d+
    | d[hl]\d+
    | ro(?:<=|>=|!=|[<>=])?\d+
    | r(?:<=|>=|!=|[<>=])?\d+
    | !(?:!|p|r\d*|[<>=]\d+|\d+)?
    | mi\d+
    | ma\d+
    | m
    | c[sf](?:<=|>=|[<>=])?\d*
    | s[ad]
    | [sf](?:<=|>=|[<>=])?\d*
    | [oe]
    | [<>=]\d+
    """,
    re.VERBOSE,
)

FUNCTION_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?:floor|ceil|round|abs|min|max)(?=\s*\()")
MACRO_PATTERN: Final[re.Pattern[str]] = re.compile(r"#[a-zA-Z_][a-zA-Z0-9_-]*")
TABLE_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"t\[[a-zA-Z0-9_-]+\]")
ROLL_REFERENCE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\[\[\d+\]\]|\$\[roll:[a-zA-Z0-9_-]+\]")
LABEL_PATTERN: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_\s-]{2,}")


class Lexer:
    """Lossless lexer for dice expressions.

    Modifier fragments such as `kh3` or `r<=2` come out as a single
    `MODIFIER` token; their meaning is decoded after parsing.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._position = 0
        self._current_start = TextSize.from_int(0)
        self._current_kind = TokenKind.EOF
        self._label_span: tuple[int, int] | None = None
        self._diagnostics: list[Diagnostic] = []

    @property
    def source(self) -> str:
        """Original expression text."""
        return self._source

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """List of diagnostics emitted during lexing."""
        return self._diagnostics

    @property
    def current(self) -> TokenKind:
        return self._current_kind

    @property
    def current_range(self) -> TextRange:
        return TextRange.new(self._current_start, TextSize.from_int(self._position))

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    def next_token(self) -> Token:
        self._current_start = TextSize.from_int(self._position)

        if self.is_eof:
            self._current_kind = TokenKind.EOF
            return Token(TokenKind.EOF, TextRange.empty(self._current_start))

        kind = self._lex_token()
        self._current_kind = kind
        return Token(kind, self.current_range)

    def lex(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.kind == TokenKind.EOF:
                break
        return tokens

    def _lex_token(self) -> TokenKind:
        if self._label_span is not None and self._label_span[0] == self._position:
            _, label_end = self._label_span
            self._label_span = None
            self._position = label_end
            return TokenKind.LABEL_TEXT

        ch = self._current_char()

        if ch.isspace():
            return self._consume_whitespaces()

        if _is_digit(ch):
            return self._lex_number()

        if ch == "d" or ch == "D":
            return self._lex_dice_marker()

        if ch.isalpha():
            return self._lex_word()

        if ch in "!<>=":
            return self._lex_modifier()

        if ch == "#":
            return self._lex_pattern(MACRO_PATTERN, TokenKind.MACRO)

        if ch == "$":
            return self._lex_pattern(ROLL_REFERENCE_PATTERN, TokenKind.ROLL_REFERENCE)

        if ch == "?" and self._peek_char() == "{":
            return self._lex_roll_query()

        if ch == "[":
            if self._peek_char() == "[":
                return self._lex_inline_roll()
            self._detect_label()
            self._advance(1)
            return TokenKind.LBRACKET

        if ch == "*":
            if self._peek_char() == "*":
                self._advance(2)
                return TokenKind.STAR_STAR
            self._advance(1)
            return TokenKind.STAR

        single = _SINGLE_CHAR_TOKENS.get(ch)
        if single is not None:
            self._advance(1)
            return single

        return self._unexpected_character()

    def _lex_number(self) -> TokenKind:
        saw_dot = False
        while not self.is_eof:
            ch = self._current_char()
            if _is_digit(ch):
                self._advance(1)
                continue
            if ch == "." and not saw_dot and _is_digit(self._peek_char()):
                saw_dot = True
                self._advance(1)
                continue
            break
        return TokenKind.DECIMAL if saw_dot else TokenKind.INT

    def _lex_dice_marker(self) -> TokenKind:
        next_char = self._peek_char()
        if next_char in ("F", "f"):
            self._advance(2)
            if self._current_char() == "." and _is_digit(self._peek_char()):
                self._advance(1)
                while _is_digit(self._current_char()):
                    self._advance(1)
            return TokenKind.FUDGE_MARKER

        if self._current_char() == "d" and next_char in ("h", "l") and _is_digit(self._peek_char(2)):
            return self._lex_modifier()

        self._advance(1)
        return TokenKind.DICE_MARKER

    def _lex_word(self) -> TokenKind:
        function_name = FUNCTION_NAME_PATTERN.match(self._source, self._position)
        if function_name is not None:
            self._position = function_name.end()
            return TokenKind.FUNCTION_NAME

        if self._current_char() == "t" and self._peek_char() == "[":
            return self._lex_pattern(TABLE_NAME_PATTERN, TokenKind.TABLE_NAME)

        return self._lex_modifier()

    def _lex_modifier(self) -> TokenKind:
        return self._lex_pattern(MODIFIER_PATTERN, TokenKind.MODIFIER)

    def _lex_pattern(self, pattern: re.Pattern[str], kind: TokenKind) -> TokenKind:
        match = pattern.match(self._source, self._position)
        if match is None or match.end() == self._position:
            return self._unexpected_character()
        self._position = match.end()
        return kind

    def _lex_inline_roll(self) -> TokenKind:
        # Track both `[[`/`]]` pairs and single brackets so that nested
        # inline rolls and labels stay inside one token.
        self._advance(2)
        depth = 1
        brackets = 0
        while not self.is_eof:
            ch = self._current_char()
            if ch == "]" and brackets > 0:
                brackets -= 1
                self._advance(1)
                continue
            if ch == "[" and self._peek_char() == "[":
                depth += 1
                self._advance(2)
                continue
            if ch == "]" and self._peek_char() == "]":
                depth -= 1
                self._advance(2)
                if depth == 0:
                    return TokenKind.INLINE_ROLL
                continue
            if ch == "[":
                brackets += 1
            self._advance(1)

        self._diagnostics.append(LEXER_UNTERMINATED_INLINE_ROLL.at(self.current_range))
        return TokenKind.INLINE_ROLL

    def _lex_roll_query(self) -> TokenKind:
        self._advance(2)
        while not self.is_eof:
            if self._current_char() == "}":
                self._advance(1)
                return TokenKind.ROLL_QUERY
            self._advance(1)

        self._diagnostics.append(LEXER_UNTERMINATED_ROLL_QUERY.at(self.current_range))
        return TokenKind.ROLL_QUERY

    def _detect_label(self) -> None:
        close = self._source.find("]", self._position + 1)
        if close == -1:
            return
        content = self._source[self._position + 1 : close]
        if LABEL_PATTERN.fullmatch(content) and any(ch.isalpha() for ch in content):
            self._label_span = (self._position + 1, close)

    def _unexpected_character(self) -> TokenKind:
        self._advance(1)
        self._diagnostics.append(
            LEXER_UNEXPECTED_CHARACTER.at(
                self.current_range,
                message=f"Unexpected character {self._source[self._current_start.value]!r}",
            )
        )
        return TokenKind.SKIPPED

    def _consume_whitespaces(self) -> TokenKind:
        while not self.is_eof and self._current_char().isspace():
            self._advance(1)
        return TokenKind.WHITESPACE

    def _current_char(self) -> str:
        if self.is_eof:
            return "\0"
        return self._source[self._position]

    def _peek_char(self, ahead: int = 1) -> str:
        index = self._position + ahead
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _advance(self, steps: int) -> None:
        self._position += steps


def _is_digit(ch: str) -> bool:
    # `str.isdigit` also accepts superscripts and other non-decimal digits.
    return "0" <= ch <= "9"


_SINGLE_CHAR_TOKENS: Final[dict[str, TokenKind]] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    ",": TokenKind.COMMA,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "]": TokenKind.RBRACKET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}


def token_text(source: str, token: Token) -> str:
    """Get the text of a token from the source string based on its range."""
    if token.kind == TokenKind.EOF:
        return ""
    return slice_text_range(source, token.range)


def dump_tokens(tokens: list[Token], source: str, diagnostics: list[Diagnostic] | None = None) -> None:
    """Print token list with kind, range, and text for debugging."""
    for i, tok in enumerate(tokens):
        text = token_text(source, tok)
        print(f"{i:03d} {tok.kind.name:<16} range={tok.range.as_tuple()} text={text!r}")

    if diagnostics is not None:
        print("\nDiagnostics:")
        for d in diagnostics:
            print(f"- {d.severity.upper()} {d.code} range={d.range.as_tuple()} message={d.message}")
