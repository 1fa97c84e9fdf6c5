"""Parser events."""

from dataclasses import dataclass
from typing import Protocol

from dicepy.diagnostics import Diagnostic
from dicepy.syntax import DiceSyntaxKind
from dicepy.text import TextSize


@dataclass(frozen=True, slots=True)
class StartEvent:
    kind: DiceSyntaxKind
    forward_parent: int | None = None

    @staticmethod
    def tombstone() -> "StartEvent":
        return StartEvent(kind=DiceSyntaxKind.TOMBSTONE, forward_parent=None)


@dataclass(frozen=True, slots=True)
class FinishEvent:
    pass


@dataclass(frozen=True, slots=True)
class TokenEvent:
    kind: DiceSyntaxKind
    end: TextSize


Event = StartEvent | FinishEvent | TokenEvent


class TreeSink(Protocol):
    def token(self, kind: DiceSyntaxKind, end: TextSize) -> None: ...

    def start_node(self, kind: DiceSyntaxKind) -> None: ...

    def finish_node(self) -> None: ...

    def errors(self, errors: list[Diagnostic]) -> None: ...


def process_events(
    sink: TreeSink,
    events: list[Event],
    errors: list[Diagnostic],
) -> None:
    """Replay parser events into a sink.

    A start event that was `precede`d points forward to its new parent; the
    chain is opened outermost first and the forward starts become tombstones.
    """
    sink.errors(errors)

    for idx, event in enumerate(events):
        match event:
            case FinishEvent():
                sink.finish_node()
            case TokenEvent(kind=kind, end=end):
                sink.token(kind, end)
            case StartEvent(kind=DiceSyntaxKind.TOMBSTONE):
                pass
            case StartEvent():
                for kind in reversed(_parent_chain(events, idx, event)):
                    sink.start_node(kind)


def _parent_chain(events: list[Event], idx: int, start: StartEvent) -> list[DiceSyntaxKind]:
    chain = [start.kind]
    offset = start.forward_parent
    while offset is not None:
        idx += offset
        if idx >= len(events):
            raise RuntimeError("Invalid forward_parent offset in parser events")
        parent = events[idx]
        if not isinstance(parent, StartEvent):
            raise RuntimeError("forward_parent must point to StartEvent")
        events[idx] = StartEvent.tombstone()
        if parent.kind != DiceSyntaxKind.TOMBSTONE:
            chain.append(parent.kind)
        offset = parent.forward_parent
    return chain
