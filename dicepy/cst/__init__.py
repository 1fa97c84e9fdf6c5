"""Green/red CST structures."""

from dicepy.cst.green import GreenElement, GreenNode, GreenToken, TreeBuilder
from dicepy.cst.red import SyntaxElement, SyntaxNode, SyntaxToken, from_green

__all__ = [
    "GreenElement",
    "GreenNode",
    "GreenToken",
    "SyntaxElement",
    "SyntaxNode",
    "SyntaxToken",
    "TreeBuilder",
    "from_green",
]
