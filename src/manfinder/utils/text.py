"""Text helpers for descriptions and result listings."""

from __future__ import annotations

from typing import Iterable, List


def normalize_description(text: str) -> str:
    """Lower-case a description and trim surrounding whitespace."""
    return text.strip().lower()


def sort_unique_lines(lines: Iterable[str]) -> List[str]:
    """Sort lines case-insensitively and drop adjacent duplicates.

    Duplicates are only detected once sorted, so the sort must come first.
    """
    result: List[str] = []
    for line in sorted(lines, key=str.lower):
        if not result or result[-1] != line:
            result.append(line)
    return result
