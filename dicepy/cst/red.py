"""Red CST wrappers that add parents and absolute offsets to green nodes."""

from __future__ import annotations

from typing import TypeAlias

from dicepy.cst.green import GreenNode, GreenToken
from dicepy.syntax import DiceSyntaxKind


class SyntaxToken:
    __slots__ = ("kind", "text", "parent", "index_in_parent", "_start", "_token_start", "_end")

    def __init__(
        self,
        *,
        green: GreenToken,
        parent: SyntaxNode,
        index_in_parent: int,
        start: int,
    ) -> None:
        self.kind = green.kind
        self.text = green.text
        self.parent = parent
        self.index_in_parent = index_in_parent
        self._start = start
        self._token_start = start + sum(piece.length.value for piece in green.leading_trivia)
        self._end = start + green.text_len.value

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    @property
    def token_start(self) -> int:
        """Offset of the token text, after its leading trivia."""
        return self._token_start

    @property
    def token_end(self) -> int:
        return self._token_start + len(self.text)

    def __repr__(self) -> str:
        return f"SyntaxToken({self.kind.name}, {self.text!r}, {self._token_start})"


class SyntaxNode:
    __slots__ = ("kind", "parent", "index_in_parent", "_children", "_source", "_start", "_end")

    def __init__(
        self,
        *,
        kind: DiceSyntaxKind,
        parent: SyntaxNode | None,
        index_in_parent: int,
        source: str,
        start: int,
    ) -> None:
        self.kind = kind
        self.parent = parent
        self.index_in_parent = index_in_parent
        self._source = source
        self._start = start
        self._end = start
        self._children: tuple[SyntaxElement, ...] = ()

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    @property
    def text(self) -> str:
        """Source text covered by the node, trivia included."""
        return self._source[self._start : self._end]

    @property
    def children(self) -> tuple[SyntaxElement, ...]:
        return self._children

    def child_nodes(self) -> tuple[SyntaxNode, ...]:
        return tuple(child for child in self._children if isinstance(child, SyntaxNode))

    def child_tokens(self) -> tuple[SyntaxToken, ...]:
        return tuple(child for child in self._children if isinstance(child, SyntaxToken))

    def first_token(self, kind: DiceSyntaxKind) -> SyntaxToken | None:
        for child in self._children:
            if isinstance(child, SyntaxToken) and child.kind == kind:
                return child
        return None

    def first_node(self, kind: DiceSyntaxKind) -> SyntaxNode | None:
        for child in self._children:
            if isinstance(child, SyntaxNode) and child.kind == kind:
                return child
        return None

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind.name}, {self._start}..{self._end})"


SyntaxElement: TypeAlias = SyntaxNode | SyntaxToken


def from_green(root: GreenNode, source: str = "") -> SyntaxNode:
    red_root, _ = _build_node(green=root, parent=None, index_in_parent=0, source=source, start=0)
    return red_root


def _build_node(
    *,
    green: GreenNode,
    parent: SyntaxNode | None,
    index_in_parent: int,
    source: str,
    start: int,
) -> tuple[SyntaxNode, int]:
    node = SyntaxNode(
        kind=green.kind,
        parent=parent,
        index_in_parent=index_in_parent,
        source=source,
        start=start,
    )

    current = start
    children: list[SyntaxElement] = []
    for child_index, child in enumerate(green.children):
        if isinstance(child, GreenNode):
            red_child, current = _build_node(
                green=child,
                parent=node,
                index_in_parent=child_index,
                source=source,
                start=current,
            )
            children.append(red_child)
            continue

        token = SyntaxToken(green=child, parent=node, index_in_parent=child_index, start=current)
        children.append(token)
        current = token.end

    node._children = tuple(children)
    node._end = current
    return node, current


__all__ = ["SyntaxElement", "SyntaxNode", "SyntaxToken", "from_green"]
