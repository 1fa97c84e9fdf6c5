import pytest

from dicepy.lexer import Lexer, Token, TokenKind, token_text
from tests._debug import debug_dump_tokens


def lex(text: str) -> list[Token]:
    return Lexer(text).lex()


def significant(text: str) -> list[tuple[TokenKind, str]]:
    tokens = lex(text)
    debug_dump_tokens("significant", text, tokens)
    return [(token.kind, token_text(text, token)) for token in tokens if not token.kind.is_trivia]


# 1) Plain dice arithmetic
def test_dice_with_modifier_and_bonus():
    assert significant("4d6kh3 + 2") == [
        (TokenKind.INT, "4"),
        (TokenKind.DICE_MARKER, "d"),
        (TokenKind.INT, "6"),
        (TokenKind.MODIFIER, "kh3"),
        (TokenKind.PLUS, "+"),
        (TokenKind.INT, "2"),
        (TokenKind.EOF, ""),
    ]


def test_whitespace_is_trivia_and_ranges_are_contiguous():
    text = " 1d20  +5 "
    tokens = lex(text)

    assert tokens[0].kind == TokenKind.WHITESPACE
    assert tokens[-1].kind == TokenKind.EOF
    assert "".join(token_text(text, token) for token in tokens) == text
    for previous, current in zip(tokens, tokens[1:]):
        assert previous.range.end == current.range.start


def test_numbers_and_operators():
    assert [kind for kind, _ in significant("2.5 * 3 ** 2 % 4 / 1 - 0")] == [
        TokenKind.DECIMAL,
        TokenKind.STAR,
        TokenKind.INT,
        TokenKind.STAR_STAR,
        TokenKind.INT,
        TokenKind.PERCENT,
        TokenKind.INT,
        TokenKind.SLASH,
        TokenKind.INT,
        TokenKind.MINUS,
        TokenKind.INT,
        TokenKind.EOF,
    ]


# 2) Modifier fragments come out as one token each
@pytest.mark.parametrize(
    ("source", "fragments"),
    [
        ("4d6dl1", ["dl1"]),
        ("4d6dh1", ["dh1"]),
        ("4d6k>3", ["k>3"]),
        ("3d6r<=2", ["r<=2"]),
        ("3d6r!=4", ["r!=4"]),
        ("3d6ro1", ["ro1"]),
        ("3d6!!", ["!!"]),
        ("3d6!p", ["!p"]),
        ("3d6!r>4", ["!r", ">4"]),
        ("3d6!r5", ["!r5"]),
        ("3d6!=2", ["!=2"]),
        ("3d6!5", ["!5"]),
        ("5d10cs>=9cf1", ["cs>=9", "cf1"]),
        ("5d10s>7f<3", ["s>7", "f<3"]),
        ("4d6mi2ma5sd", ["mi2", "ma5", "sd"]),
        ("6d6msa", ["m", "sa"]),
        ("1d1=1e", ["=1", "e"]),
        ("{1d6,1d8}o", ["o"]),
    ],
)
def test_modifier_fragments(source: str, fragments: list[str]):
    assert [text for kind, text in significant(source) if kind == TokenKind.MODIFIER] == fragments


def test_fudge_markers():
    assert significant("4dF + dF.3") == [
        (TokenKind.INT, "4"),
        (TokenKind.FUDGE_MARKER, "dF"),
        (TokenKind.PLUS, "+"),
        (TokenKind.FUDGE_MARKER, "dF.3"),
        (TokenKind.EOF, ""),
    ]


def test_lowercase_fudge_marker():
    assert significant("4df + df.2")[1] == (TokenKind.FUDGE_MARKER, "df")
    assert significant("4df + df.2")[3] == (TokenKind.FUDGE_MARKER, "df.2")


def test_function_name_requires_call_parenthesis():
    assert significant("floor (2.5)")[0] == (TokenKind.FUNCTION_NAME, "floor")
    assert significant("max(1, 2)")[0] == (TokenKind.FUNCTION_NAME, "max")
    # `ma3` is a clamp modifier, not the start of `max`.
    assert (TokenKind.MODIFIER, "ma3") in significant("4d6ma3")


# 3) Embedded forms are single tokens
@pytest.mark.parametrize(
    ("source", "kind"),
    [
        ("#attack-bonus", TokenKind.MACRO),
        ("[[2d6 + 3]]", TokenKind.INLINE_ROLL),
        ("[[1d6 + [[2]]]]", TokenKind.INLINE_ROLL),
        ("?{Attack|Hit,1d20|Miss,0}", TokenKind.ROLL_QUERY),
        ("$[[0]]", TokenKind.ROLL_REFERENCE),
        ("$[roll:initiative]", TokenKind.ROLL_REFERENCE),
    ],
)
def test_embedded_forms_are_single_tokens(source: str, kind: TokenKind):
    assert significant(source) == [(kind, source), (TokenKind.EOF, "")]


def test_table_roll_with_count():
    assert significant("2t[loot-table]") == [
        (TokenKind.INT, "2"),
        (TokenKind.TABLE_NAME, "t[loot-table]"),
        (TokenKind.EOF, ""),
    ]


def test_label_text_after_dice():
    assert significant("2d6[cold damage]") == [
        (TokenKind.INT, "2"),
        (TokenKind.DICE_MARKER, "d"),
        (TokenKind.INT, "6"),
        (TokenKind.LBRACKET, "["),
        (TokenKind.LABEL_TEXT, "cold damage"),
        (TokenKind.RBRACKET, "]"),
        (TokenKind.EOF, ""),
    ]


def test_bracket_without_letters_is_not_a_label():
    kinds = [kind for kind, _ in significant("d[1,2,3]")]

    assert TokenKind.LABEL_TEXT not in kinds
    assert kinds[:3] == [TokenKind.DICE_MARKER, TokenKind.LBRACKET, TokenKind.INT]


# 4) Diagnostics
def test_unexpected_character_is_skipped_with_diagnostic():
    lexer = Lexer("1d20 @ 3")
    tokens = lexer.lex()

    assert TokenKind.SKIPPED in [token.kind for token in tokens]
    assert [diagnostic.code for diagnostic in lexer.diagnostics] == ["LEXER_UNEXPECTED_CHARACTER"]
    assert lexer.diagnostics[0].range.as_tuple() == (5, 6)


@pytest.mark.parametrize("source", ["²d6", "3²", "1d٣"])
def test_non_ascii_digits_are_skipped(source: str):
    lexer = Lexer(source)
    tokens = lexer.lex()

    assert TokenKind.SKIPPED in [token.kind for token in tokens]
    assert [diagnostic.code for diagnostic in lexer.diagnostics] == ["LEXER_UNEXPECTED_CHARACTER"]


@pytest.mark.parametrize(
    ("source", "code"),
    [
        ("[[1d6", "LEXER_UNTERMINATED_INLINE_ROLL"),
        ("?{Bonus|0", "LEXER_UNTERMINATED_ROLL_QUERY"),
    ],
)
def test_unterminated_forms_report_diagnostics(source: str, code: str):
    lexer = Lexer(source)
    lexer.lex()

    assert [diagnostic.code for diagnostic in lexer.diagnostics] == [code]
