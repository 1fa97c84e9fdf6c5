"""Syntax kinds."""

from dicepy.syntax.kind import DiceSyntaxKind

__all__ = ["DiceSyntaxKind"]
