"""Decode raw modifier fragments (`kh3`, `r<=2`, `!>5`, ...) into `Modifier` values.

The lexer emits each fragment as one token; this module is the single place
that knows what the text inside those tokens means.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Final

from dicepy.ast.model import ExplodeKind, Modifier, ModifierType
from dicepy.errors import DiceSyntaxError

_COMPARATOR = r"(?P<op><=|>=|!=|[<>=])"

_KEEP_DROP: Final[re.Pattern[str]] = re.compile(r"(?P<kind>kh|kl|dh|dl)(?P<n>\d+)")
_KEEP_FILTER: Final[re.Pattern[str]] = re.compile(r"k(?P<op>[<>])(?P<n>\d+)")
_REROLL: Final[re.Pattern[str]] = re.compile(rf"(?P<kind>ro|r){_COMPARATOR}?(?P<n>\d+)")
_CLAMP: Final[re.Pattern[str]] = re.compile(r"(?P<kind>mi|ma)(?P<n>\d+)")
_COUNTING: Final[re.Pattern[str]] = re.compile(rf"(?P<kind>cs|cf|s|f){_COMPARATOR}?(?P<n>\d*)")
_COMPARISON: Final[re.Pattern[str]] = re.compile(r"(?P<op>[<>=])(?P<n>\d+)")
_EXPLODE: Final[re.Pattern[str]] = re.compile(r"!(?P<rest>!|p|r\d*|[<>=]\d+|\d+)?")

_COMPARISON_TYPES: Final[dict[str, ModifierType]] = {
    ">": ModifierType.GREATER,
    "<": ModifierType.LESS,
    "=": ModifierType.EQUAL,
}

_FLAG_TYPES: Final[dict[str, ModifierType]] = {
    "sa": ModifierType.SORT_ASCENDING,
    "sd": ModifierType.SORT_DESCENDING,
    "m": ModifierType.MATCH,
    "o": ModifierType.ROLL_ONCE,
    "e": ModifierType.EXHAUSTIVE,
}


def decode_modifier(raw: str) -> Modifier:
    """Map one modifier fragment to its `Modifier`.

    Raises:
        DiceSyntaxError: If the text is not a recognised modifier.
    """
    flag = _FLAG_TYPES.get(raw)
    if flag is not None:
        return Modifier(type=flag, raw=raw)

    if match := _KEEP_DROP.fullmatch(raw):
        return Modifier(type=ModifierType(match["kind"]), raw=raw, value=int(match["n"]))

    if match := _KEEP_FILTER.fullmatch(raw):
        kind = ModifierType.KEEP_ABOVE if match["op"] == ">" else ModifierType.KEEP_BELOW
        return Modifier(type=kind, raw=raw, value=int(match["n"]))

    if match := _REROLL.fullmatch(raw):
        target = int(match["n"])
        return Modifier(
            type=ModifierType(match["kind"]),
            raw=raw,
            value=target,
            target=target,
            operator=match["op"] or "=",
        )

    if match := _EXPLODE.fullmatch(raw):
        return _decode_explode(raw, match["rest"])

    if match := _CLAMP.fullmatch(raw):
        return Modifier(type=ModifierType(match["kind"]), raw=raw, value=int(match["n"]))

    if match := _COUNTING.fullmatch(raw):
        target = int(match["n"]) if match["n"] else None
        return Modifier(
            type=ModifierType(match["kind"]),
            raw=raw,
            value=target,
            target=target,
            operator=match["op"],
        )

    if match := _COMPARISON.fullmatch(raw):
        target = int(match["n"])
        return Modifier(
            type=_COMPARISON_TYPES[match["op"]],
            raw=raw,
            value=target,
            target=target,
            operator=match["op"],
        )

    raise DiceSyntaxError(f"Unknown modifier: {raw}")


def decode_modifiers(fragments: Iterable[tuple[int, str]]) -> tuple[Modifier, ...]:
    """Decode `(offset, raw)` fragments in source order."""
    ordered = sorted(fragments, key=lambda fragment: fragment[0])
    return tuple(decode_modifier(raw) for _, raw in ordered)


def _decode_explode(raw: str, rest: str | None) -> Modifier:
    match rest:
        case None:
            return Modifier(type=ModifierType.EXPLODE, raw=raw, value=ExplodeKind.BASIC)
        case "!":
            return Modifier(type=ModifierType.EXPLODE, raw=raw, value=ExplodeKind.COMPOUND)
        case "p":
            return Modifier(type=ModifierType.EXPLODE, raw=raw, value=ExplodeKind.PENETRATING)
        case "r":
            return Modifier(type=ModifierType.EXPLODE, raw=raw, value=ExplodeKind.RECURSIVE)
        case _ if rest[0] == "r":
            # `!rN` caps the recursive explosion at N rolls.
            return Modifier(
                type=ModifierType.EXPLODE,
                raw=raw,
                value=ExplodeKind.RECURSIVE,
                operator=">=",
                limit=int(rest[1:]),
            )
        case _ if rest[0] == ">":
            kind, operator, target = ExplodeKind.GREATER, ">", int(rest[1:])
        case _ if rest[0] == "<":
            kind, operator, target = ExplodeKind.LESS, "<", int(rest[1:])
        case _ if rest[0] == "=":
            kind, operator, target = ExplodeKind.NOT_EQUAL, "!=", int(rest[1:])
        case _:
            kind, operator, target = ExplodeKind.CUSTOM, ">=", int(rest)
    return Modifier(type=ModifierType.EXPLODE, raw=raw, value=kind, target=target, operator=operator)


__all__ = ["decode_modifier", "decode_modifiers"]
