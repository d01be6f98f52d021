"""Text utilities."""

from __future__ import annotations


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens, like ``wc -w``.

    Splits on runs of Unicode whitespace and ignores empty tokens, so
    leading, trailing and repeated whitespace never add to the count.
    """
    return len(text.split())
