"""Immutable green CST for dice expressions."""

from dataclasses import dataclass
from typing import TypeAlias

from dicepy.lexer import TriviaPiece
from dicepy.syntax import DiceSyntaxKind
from dicepy.text import TextSize


@dataclass(frozen=True, slots=True)
class GreenToken:
    kind: DiceSyntaxKind
    text: str
    leading_trivia: tuple[TriviaPiece, ...]
    trailing_trivia: tuple[TriviaPiece, ...]

    @property
    def text_len(self) -> TextSize:
        """Length including the attached trivia."""
        trivia = sum(piece.length.value for piece in (*self.leading_trivia, *self.trailing_trivia))
        return TextSize.from_int(len(self.text) + trivia)


@dataclass(frozen=True, slots=True)
class GreenNode:
    kind: DiceSyntaxKind
    children: tuple["GreenElement", ...]

    @property
    def text_len(self) -> TextSize:
        return TextSize.from_int(sum(child.text_len.value for child in self.children))


GreenElement: TypeAlias = GreenNode | GreenToken


class TreeBuilder:
    """Stack-based builder producing immutable green nodes."""

    def __init__(self) -> None:
        self._stack: list[tuple[DiceSyntaxKind, list[GreenElement]]] = []
        self._roots: list[GreenElement] = []

    def start_node(self, kind: DiceSyntaxKind) -> None:
        self._stack.append((kind, []))

    def token_with_trivia(
        self,
        kind: DiceSyntaxKind,
        text: str,
        leading: tuple[TriviaPiece, ...],
        trailing: tuple[TriviaPiece, ...],
    ) -> None:
        self._push_element(
            GreenToken(
                kind=kind,
                text=text,
                leading_trivia=leading,
                trailing_trivia=trailing,
            )
        )

    def finish_node(self) -> None:
        if not self._stack:
            raise RuntimeError("finish_node called with empty builder stack")

        kind, children = self._stack.pop()
        self._push_element(GreenNode(kind=kind, children=tuple(children)))

    def finish(self) -> GreenNode:
        if self._stack:
            raise RuntimeError("Cannot finish tree: unclosed nodes remain on stack")

        if len(self._roots) == 1 and isinstance(self._roots[0], GreenNode):
            root = self._roots[0]
            if root.kind == DiceSyntaxKind.ROOT:
                return root

        return GreenNode(kind=DiceSyntaxKind.ROOT, children=tuple(self._roots))

    def _push_element(self, element: GreenElement) -> None:
        if self._stack:
            self._stack[-1][1].append(element)
            return
        self._roots.append(element)
