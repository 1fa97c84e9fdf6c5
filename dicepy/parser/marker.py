"""Markers for event-based parsing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from dicepy.parser.event import FinishEvent, StartEvent
from dicepy.syntax import DiceSyntaxKind
from dicepy.text import TextSize

if TYPE_CHECKING:
    from dicepy.parser.parser import Parser


@dataclass(slots=True)
class Marker:
    pos: int
    start: TextSize

    def complete(self, parser: Parser, kind: DiceSyntaxKind) -> CompletedMarker:
        event = parser.events[self.pos]
        if not isinstance(event, StartEvent):
            raise RuntimeError("Marker must point to a StartEvent")
        parser.events[self.pos] = StartEvent(kind=kind, forward_parent=event.forward_parent)

        finish_pos = len(parser.events)
        parser.events.append(FinishEvent())
        return CompletedMarker(start_pos=self.pos, finish_pos=finish_pos, offset=self.start)


@dataclass(frozen=True, slots=True)
class CompletedMarker:
    start_pos: int
    finish_pos: int
    offset: TextSize

    def precede(self, parser: Parser) -> Marker:
        """Start a new node that will wrap this completed one."""
        new_marker = parser.start()
        event = parser.events[self.start_pos]
        if not isinstance(event, StartEvent):
            raise RuntimeError("CompletedMarker points to non-start event")

        distance = new_marker.pos - self.start_pos
        if distance <= 0:
            raise RuntimeError("Invalid precede distance")
        parser.events[self.start_pos] = StartEvent(kind=event.kind, forward_parent=distance)

        new_marker.start = self.offset
        return new_marker
