"""Extraction of a manual page's one-line description.

The parser is a tolerant line scanner, not a troff interpreter. It first
looks for the NAME section heading (``.SH NAME`` or ``.SH "NAME"``) and
then for the first line carrying either an mdoc ``.Nd`` macro or a
``name \\- description`` separator.
"""

from __future__ import annotations

import enum
import re
from typing import Iterator

from manfinder.utils.text import normalize_description

NAME_MARKERS = (".sh name", '.sh "name"')
SEPARATOR = "- "

# ".Nd" macro line, with its argument text if any
_ND_LINE = re.compile(r"^\s*\.nd\b(?:\s+(?P<text>.*?))?\s*$", re.IGNORECASE)
# trailing "-", "- " or "- \" (optionally followed by a space): text continues on the next line
_OPEN_SEPARATOR = re.compile(r"-(?: |\s?\\ ?)?$")


class _State(enum.Enum):
    SEEKING_NAME = enum.auto()
    SEEKING_DESCRIPTION = enum.auto()


def _is_name_marker(line: str) -> bool:
    lowered = line.lower()
    return any(marker in lowered for marker in NAME_MARKERS)


def _following(lines: Iterator[str]) -> str:
    # an open marker on the last line leaves nothing to take
    return normalize_description(next(lines, ""))


def parse_description(text: str) -> str:
    """Return the lower-cased one-line description of ``text``, or ``""``."""
    lines = iter(text.splitlines())
    state = _State.SEEKING_NAME

    for line in lines:
        if state is _State.SEEKING_NAME:
            if _is_name_marker(line):
                state = _State.SEEKING_DESCRIPTION
            continue

        macro = _ND_LINE.match(line)
        if macro is not None:
            if not macro.group("text"):
                return _following(lines)
            return normalize_description(macro.group("text"))

        if SEPARATOR in line or line.endswith("-"):
            if _OPEN_SEPARATOR.search(line):
                return _following(lines)
            return normalize_description(line.rsplit(SEPARATOR, 1)[-1])

    return ""
