"""Exact and substring lookup over a loaded index."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from manfinder.models import Index, IndexRecord
from manfinder.utils.text import sort_unique_lines

_SECTION_NUMBER = re.compile(r"^(\d+)")


@dataclass(slots=True)
class SearchResult:
    term: str
    lines: List[str]

    @property
    def empty(self) -> bool:
        return not self.lines

    def render(self) -> List[str]:
        if self.empty:
            return [f"{self.term}: nothing appropriate"]
        return list(self.lines)


def _section_key(record: IndexRecord) -> tuple[int, str, str]:
    match = _SECTION_NUMBER.match(record.section_label)
    number = int(match.group(1)) if match else 0
    return number, record.section_label.lower(), str(record.source_path)


class Searcher:
    """whatis/apropos queries and section resolution against one index."""

    def __init__(self, index: Index) -> None:
        self.index = index

    def _result(self, term: str, records: Iterable[IndexRecord]) -> SearchResult:
        return SearchResult(term=term, lines=sort_unique_lines(r.format() for r in records))

    def whatis(self, term: str) -> SearchResult:
        """Records whose page name equals ``term``."""
        return self._result(term, (r for r in self.index.values() if r.page_name == term))

    def apropos(self, term: str) -> SearchResult:
        """Records whose page name or description contains ``term``."""
        return self._result(
            term,
            (r for r in self.index.values() if term in r.page_name or term in r.description),
        )

    def matches(self, page_name: str) -> List[IndexRecord]:
        """All records for ``page_name``, lowest section first."""
        records = [r for r in self.index.values() if r.page_name == page_name]
        return sorted(records, key=_section_key)

    def resolve(self, page_name: str, section: str | None = None) -> Path | None:
        """Path of the page to display, or ``None`` if there is no entry.

        Without ``section`` the lowest numbered section wins. With a
        section, an exact label match is preferred over a label that only
        starts with it (``3`` finds ``3ssl`` when there is no plain ``3``).
        """
        records = self.matches(page_name)
        if section is not None:
            exact = [r for r in records if r.section_label == section]
            records = exact or [r for r in records if r.section_label.startswith(section)]
        if not records:
            return None
        return records[0].source_path
