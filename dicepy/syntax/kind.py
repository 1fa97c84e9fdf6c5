"""Unified syntax kinds for parser and CST."""

from enum import IntEnum

from dicepy.lexer import TokenKind


class DiceSyntaxKind(IntEnum):
    """Dice notation syntax vocabulary (tokens + nodes).

    Token kinds share their numeric values with `TokenKind`.
    """

    TOMBSTONE = 0
    EOF = 1

    # Trivia tokens
    WHITESPACE = 10
    SKIPPED = 11

    # Lexical tokens
    INT = 20
    DECIMAL = 21
    FUNCTION_NAME = 22
    LABEL_TEXT = 23

    DICE_MARKER = 30
    FUDGE_MARKER = 31
    MODIFIER = 32

    MACRO = 40
    INLINE_ROLL = 41
    TABLE_NAME = 42
    ROLL_QUERY = 43
    ROLL_REFERENCE = 44

    PLUS = 50
    MINUS = 51
    STAR = 52
    SLASH = 53
    PERCENT = 54
    STAR_STAR = 55

    COMMA = 60
    LBRACE = 61
    RBRACE = 62
    LBRACKET = 63
    RBRACKET = 64
    LPAREN = 65
    RPAREN = 66

    # Node kinds
    ROOT = 1000
    ERROR = 1001
    EXPRESSION_ROOT = 1002
    BINARY_EXPR = 1003
    UNARY_EXPR = 1004
    PAREN_EXPR = 1005
    NUMBER = 1006
    FUNCTION_CALL = 1007
    ARG_LIST = 1008
    DICE = 1009
    CUSTOM_DICE = 1010
    SIDE_LIST = 1011
    FUDGE_DICE = 1012
    GROUPED_ROLL = 1013
    MODIFIER_LIST = 1014
    LABEL = 1015
    TABLE_ROLL = 1016
    MACRO_REF = 1017
    INLINE_ROLL_EXPR = 1018
    ROLL_QUERY_EXPR = 1019
    ROLL_REFERENCE_EXPR = 1020

    @staticmethod
    def from_token_kind(kind: TokenKind) -> "DiceSyntaxKind":
        try:
            return DiceSyntaxKind[kind.name]
        except KeyError:
            raise ValueError(f"Unsupported TokenKind mapping: {kind!r}") from None
