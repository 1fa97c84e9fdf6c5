import pytest

from dicepy.ast import ArithmeticNode
from dicepy.errors import DiceSyntaxError
from dicepy.parser import parse_result
from dicepy.text import TextRange, TextSize


def test_parse_result_exposes_green_diagnostics_and_error_state() -> None:
    result = parse_result("1d20 + 5")

    assert result.green_root() is result.parsed.root
    assert result.diagnostics == []
    assert result.has_errors is False


def test_parse_result_caches_syntax_and_ast() -> None:
    result = parse_result("1d20 + 5")

    first_syntax = result.syntax_root()
    second_syntax = result.syntax_root()
    assert first_syntax is second_syntax

    first_ast = result.ast_root()
    second_ast = result.ast_root()
    assert first_ast is second_ast
    assert isinstance(first_ast, ArithmeticNode)


def test_parse_result_with_errors_refuses_to_lower() -> None:
    result = parse_result("(1 + 2")

    assert result.has_errors is True
    with pytest.raises(DiceSyntaxError, match="Expected"):
        result.ast_root()


def test_text_range_helpers() -> None:
    first = TextRange.new(TextSize(2), TextSize(5))
    second = TextRange(4, 9)

    assert first.len() == TextSize(3)
    assert second.as_tuple() == (4, 9)
    assert TextRange.empty(TextSize(3)).len() == TextSize(0)
    assert first < second

    with pytest.raises(ValueError):
        TextRange(5, 2)
    with pytest.raises(ValueError):
        TextSize(-1)
