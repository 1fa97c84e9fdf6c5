"""Offsets and spans into expression text."""

from dicepy.text.text import TextRange, TextSize, slice_text_range

__all__ = ["TextRange", "TextSize", "slice_text_range"]
