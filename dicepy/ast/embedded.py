"""Decoders for the self-contained forms that can appear inside an expression.

Each form is lexed as a single token (or, for standalone plugins, is the
whole input); these helpers turn its text into the matching AST node.
"""

from __future__ import annotations

import re
from typing import Final

from dicepy.ast.model import (
    FormattingNode,
    InlineRollNode,
    MacroNode,
    QueryOption,
    RollQueryNode,
    RollReferenceNode,
    TableNode,
)
from dicepy.errors import DiceSyntaxError

ROLL_QUERY_PATTERN: Final[re.Pattern[str]] = re.compile(r"\?\{([^}]*)\}")
NUMERIC_REFERENCE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\[\[(\d+)\]\]")
NAMED_REFERENCE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\[roll:([a-zA-Z0-9_-]+)\]")
TABLE_ROLL_PATTERN: Final[re.Pattern[str]] = re.compile(r"(\d+)?t\[([a-zA-Z0-9_-]+)\]")
INLINE_ROLL_PATTERN: Final[re.Pattern[str]] = re.compile(r"\[\[(.+)\]\]", re.DOTALL)
MACRO_PATTERN: Final[re.Pattern[str]] = re.compile(r"#([a-zA-Z_][a-zA-Z0-9_-]*)")
FORMATTING_PATTERN: Final[re.Pattern[str]] = re.compile(r"%(\w+)%")


def decode_roll_query(text: str) -> RollQueryNode:
    match = ROLL_QUERY_PATTERN.fullmatch(text.strip())
    if match is None:
        raise DiceSyntaxError(f"Invalid roll query: {text}")

    content = match[1]
    if not content.strip():
        raise DiceSyntaxError("Roll query must have at least a prompt")

    parts = [part.strip() for part in content.split("|")]
    prompt = parts[0]

    if len(parts) == 1:
        return RollQueryNode(prompt=prompt)

    if len(parts) == 2:
        if "," in parts[1]:
            options = tuple(
                QueryOption(label=item.strip(), value=item.strip()) for item in parts[1].split(",")
            )
            return RollQueryNode(prompt=prompt, options=options)
        return RollQueryNode(prompt=prompt, default=parts[1])

    options = tuple(_decode_query_option(part) for part in parts[1:])
    return RollQueryNode(prompt=prompt, options=options)


def _decode_query_option(part: str) -> QueryOption:
    label, separator, value = part.partition(",")
    if not separator:
        return QueryOption(label=label.strip(), value=label.strip())
    return QueryOption(label=label.strip(), value=value.strip())


def decode_roll_reference(text: str) -> RollReferenceNode:
    stripped = text.strip()
    if match := NUMERIC_REFERENCE_PATTERN.fullmatch(stripped):
        return RollReferenceNode(ref=int(match[1]))
    if match := NAMED_REFERENCE_PATTERN.fullmatch(stripped):
        return RollReferenceNode(ref=match[1])
    raise DiceSyntaxError(f"Invalid roll reference: {text}")


def decode_table_roll(text: str) -> TableNode:
    match = TABLE_ROLL_PATTERN.fullmatch(text.strip())
    if match is None:
        raise DiceSyntaxError(f"Invalid table roll: {text}")
    return TableNode(name=match[2], count=int(match[1]) if match[1] else 1)


def decode_inline_roll(text: str) -> InlineRollNode:
    match = INLINE_ROLL_PATTERN.fullmatch(text.strip())
    if match is None or not match[1].strip():
        raise DiceSyntaxError(f"Invalid inline roll: {text}")
    return InlineRollNode(expression=match[1].strip())


def decode_macro(text: str) -> MacroNode:
    match = MACRO_PATTERN.fullmatch(text.strip())
    if match is None:
        raise DiceSyntaxError(f"Invalid macro reference: {text}")
    return MacroNode(name=match[1])


def decode_formatting(text: str) -> FormattingNode:
    match = FORMATTING_PATTERN.fullmatch(text.strip())
    if match is None:
        raise DiceSyntaxError(f"Invalid formatting markup: {text}")
    return FormattingNode(markup=match[1])


__all__ = [
    "decode_formatting",
    "decode_inline_roll",
    "decode_macro",
    "decode_roll_query",
    "decode_roll_reference",
    "decode_table_roll",
]
