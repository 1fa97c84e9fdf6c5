"""Dice grammar routines that emit CST events.

Precedence, loosest first: additive, exponential, multiplicative, primary.
"""

from typing import Final

from dicepy.diagnostics import (
    PARSER_EMPTY_INPUT,
    PARSER_EXPECTED_EXPRESSION,
    PARSER_EXPECTED_TOKEN,
    PARSER_UNEXPECTED_TOKEN,
    Diagnostic,
)
from dicepy.lexer import TokenKind
from dicepy.parser.marker import CompletedMarker
from dicepy.parser.parser import Parser
from dicepy.syntax import DiceSyntaxKind

ADDITIVE_OPERATORS: Final[frozenset[TokenKind]] = frozenset({TokenKind.PLUS, TokenKind.MINUS})
MULTIPLICATIVE_OPERATORS: Final[frozenset[TokenKind]] = frozenset(
    {TokenKind.STAR, TokenKind.SLASH, TokenKind.PERCENT}
)

# Single-token primaries and the node each one becomes.
_ATOMS: Final[dict[TokenKind, DiceSyntaxKind]] = {
    TokenKind.DECIMAL: DiceSyntaxKind.NUMBER,
    TokenKind.MACRO: DiceSyntaxKind.MACRO_REF,
    TokenKind.INLINE_ROLL: DiceSyntaxKind.INLINE_ROLL_EXPR,
    TokenKind.ROLL_QUERY: DiceSyntaxKind.ROLL_QUERY_EXPR,
    TokenKind.ROLL_REFERENCE: DiceSyntaxKind.ROLL_REFERENCE_EXPR,
}


def parse_expression_root(parser: Parser) -> None:
    root = parser.start()
    if parser.at(TokenKind.EOF):
        parser.error(PARSER_EMPTY_INPUT.at(parser.current_range))
    else:
        parse_expression(parser)
        if not parser.at(TokenKind.EOF):
            parser.error(_unexpected_token(parser))
            error = parser.start()
            while not parser.at(TokenKind.EOF):
                parser.bump()
            error.complete(parser, DiceSyntaxKind.ERROR)
    root.complete(parser, DiceSyntaxKind.EXPRESSION_ROOT)


def parse_expression(parser: Parser) -> CompletedMarker | None:
    return parse_additive(parser)


def parse_additive(parser: Parser) -> CompletedMarker | None:
    left = parse_exponential(parser)
    if left is None:
        return None

    while parser.at_set(ADDITIVE_OPERATORS):
        marker = left.precede(parser)
        parser.bump()
        if parse_exponential(parser) is None:
            parser.error(_expected_expression(parser))
        left = marker.complete(parser, DiceSyntaxKind.BINARY_EXPR)
    return left


def parse_exponential(parser: Parser) -> CompletedMarker | None:
    # The right operand recurses into the exponential rule itself, so one
    # pass of the loop absorbs the whole remaining `**` chain.
    left = parse_multiplicative(parser)
    if left is None:
        return None

    while parser.at(TokenKind.STAR_STAR):
        marker = left.precede(parser)
        parser.bump()
        if parse_exponential(parser) is None:
            parser.error(_expected_expression(parser))
        left = marker.complete(parser, DiceSyntaxKind.BINARY_EXPR)
    return left


def parse_multiplicative(parser: Parser) -> CompletedMarker | None:
    left = parse_primary(parser)
    if left is None:
        return None

    while parser.at_set(MULTIPLICATIVE_OPERATORS):
        marker = left.precede(parser)
        parser.bump()
        if parse_primary(parser) is None:
            parser.error(_expected_expression(parser))
        left = marker.complete(parser, DiceSyntaxKind.BINARY_EXPR)
    return left


def parse_primary(parser: Parser) -> CompletedMarker | None:
    current = parser.current

    if current == TokenKind.FUNCTION_NAME:
        return parse_function_call(parser)

    if current == TokenKind.LBRACE:
        return parse_grouped_roll(parser)

    if current == TokenKind.INT:
        match parser.nth(1):
            case TokenKind.DICE_MARKER:
                return parse_dice(parser)
            case TokenKind.FUDGE_MARKER:
                return parse_fudge_dice(parser)
            case TokenKind.TABLE_NAME:
                return parse_table_roll(parser)
            case _:
                return _parse_atom(parser, DiceSyntaxKind.NUMBER)

    if current == TokenKind.DICE_MARKER:
        return parse_dice(parser)

    if current == TokenKind.FUDGE_MARKER:
        return parse_fudge_dice(parser)

    if current == TokenKind.TABLE_NAME:
        return parse_table_roll(parser)

    atom_kind = _ATOMS.get(current)
    if atom_kind is not None:
        return _parse_atom(parser, atom_kind)

    if current == TokenKind.MINUS:
        marker = parser.start()
        parser.bump()
        if parse_primary(parser) is None:
            parser.error(_expected_expression(parser))
        return marker.complete(parser, DiceSyntaxKind.UNARY_EXPR)

    if current == TokenKind.LPAREN:
        marker = parser.start()
        parser.bump()
        if parse_expression(parser) is None:
            parser.error(_expected_expression(parser))
        parser.expect(TokenKind.RPAREN, _expected_token(parser, TokenKind.RPAREN))
        return marker.complete(parser, DiceSyntaxKind.PAREN_EXPR)

    return None


def parse_function_call(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    parser.expect(TokenKind.LPAREN, _expected_token(parser, TokenKind.LPAREN))
    _parse_separated_expressions(parser, DiceSyntaxKind.ARG_LIST)
    parser.expect(TokenKind.RPAREN, _expected_token(parser, TokenKind.RPAREN))
    return marker.complete(parser, DiceSyntaxKind.FUNCTION_CALL)


def parse_grouped_roll(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    _parse_separated_expressions(parser, DiceSyntaxKind.ARG_LIST)
    parser.expect(TokenKind.RBRACE, _expected_token(parser, TokenKind.RBRACE))
    parse_modifier_list(parser)
    return marker.complete(parser, DiceSyntaxKind.GROUPED_ROLL)


def parse_dice(parser: Parser) -> CompletedMarker:
    """`2d6`, `d20[fire]kh1`, `d[1,2,3]` and friends."""
    marker = parser.start()
    parser.eat(TokenKind.INT)
    parser.bump()

    if parser.at(TokenKind.LBRACKET):
        _parse_side_list(parser)
        parse_modifier_list(parser)
        return marker.complete(parser, DiceSyntaxKind.CUSTOM_DICE)

    parser.expect(TokenKind.INT, _expected_token(parser, TokenKind.INT))
    if parser.at(TokenKind.LBRACKET):
        parse_label(parser)
    parse_modifier_list(parser)
    return marker.complete(parser, DiceSyntaxKind.DICE)


def parse_fudge_dice(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.eat(TokenKind.INT)
    parser.bump()
    parse_modifier_list(parser)
    return marker.complete(parser, DiceSyntaxKind.FUDGE_DICE)


def parse_table_roll(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.eat(TokenKind.INT)
    parser.bump()
    return marker.complete(parser, DiceSyntaxKind.TABLE_ROLL)


def parse_label(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    if not parser.eat(TokenKind.LABEL_TEXT):
        # Anything else up to the closing bracket is kept and reconstructed
        # from source text during lowering.
        while not parser.at(TokenKind.RBRACKET) and not parser.at(TokenKind.EOF):
            parser.bump()
    parser.expect(TokenKind.RBRACKET, _expected_token(parser, TokenKind.RBRACKET))
    return marker.complete(parser, DiceSyntaxKind.LABEL)


def parse_modifier_list(parser: Parser) -> CompletedMarker | None:
    if not parser.at(TokenKind.MODIFIER):
        return None

    marker = parser.start()
    while parser.at(TokenKind.MODIFIER):
        parser.bump()
    return marker.complete(parser, DiceSyntaxKind.MODIFIER_LIST)


def _parse_side_list(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    if parser.eat(TokenKind.INT):
        while parser.eat(TokenKind.COMMA):
            parser.expect(TokenKind.INT, _expected_token(parser, TokenKind.INT))
    parser.expect(TokenKind.RBRACKET, _expected_token(parser, TokenKind.RBRACKET))
    return marker.complete(parser, DiceSyntaxKind.SIDE_LIST)


def _parse_separated_expressions(parser: Parser, kind: DiceSyntaxKind) -> CompletedMarker:
    marker = parser.start()
    if parse_expression(parser) is None:
        parser.error(_expected_expression(parser))
    while parser.eat(TokenKind.COMMA):
        if parse_expression(parser) is None:
            parser.error(_expected_expression(parser))
    return marker.complete(parser, kind)


def _parse_atom(parser: Parser, kind: DiceSyntaxKind) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    return marker.complete(parser, kind)


def _expected_token(parser: Parser, kind: TokenKind) -> Diagnostic:
    return PARSER_EXPECTED_TOKEN.at(parser.current_range, message=f"Expected token {kind.name}")


def _expected_expression(parser: Parser) -> Diagnostic:
    return PARSER_EXPECTED_EXPRESSION.at(parser.current_range)


def _unexpected_token(parser: Parser) -> Diagnostic:
    return PARSER_UNEXPECTED_TOKEN.at(parser.current_range, message=f"Unexpected token {parser.current.name}")
