"""Parser infrastructure (token source + event-based parser + tree sink)."""

from dicepy.parser.dice import parse, parse_result
from dicepy.parser.event import (
    Event,
    FinishEvent,
    StartEvent,
    TokenEvent,
    process_events,
)
from dicepy.parser.grammar import parse_expression, parse_expression_root
from dicepy.parser.marker import CompletedMarker, Marker
from dicepy.parser.parse import build_lossless_tree
from dicepy.parser.parser import Parser
from dicepy.parser.token_source import TokenSource
from dicepy.parser.tree_sink import LosslessTreeSink, ParsedGreenTree

__all__ = [
    "CompletedMarker",
    "Event",
    "FinishEvent",
    "LosslessTreeSink",
    "Marker",
    "ParsedGreenTree",
    "Parser",
    "StartEvent",
    "TokenEvent",
    "TokenSource",
    "build_lossless_tree",
    "parse",
    "parse_expression",
    "parse_expression_root",
    "parse_result",
    "process_events",
]
