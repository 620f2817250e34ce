"""Core manfinder data models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict


@dataclass(slots=True, frozen=True)
class DocumentEntry:
    """A compressed manual page discovered on disk."""

    path: Path
    page_name: str
    section_label: str
    section_number: int


@dataclass(slots=True, frozen=True)
class IndexRecord:
    """One searchable entry of the manual page index."""

    id: int
    page_name: str
    section_label: str
    description: str
    source_path: Path

    def format(self) -> str:
        return f"{self.page_name} ({self.section_label}) - {self.description}"


Index = Dict[int, IndexRecord]
