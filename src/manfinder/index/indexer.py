"""Manual page indexing pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from manfinder.errors import ConfigurationError
from manfinder.index.storage import SQLiteIndexStore
from manfinder.ingestion.description import parse_description
from manfinder.ingestion.extractor import FailurePolicy, extract_document
from manfinder.models import DocumentEntry, Index, IndexRecord
from manfinder.utils.files import iter_document_entries

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class IndexStats:
    indexed: int = 0
    failed: int = 0
    skipped: int = 0
    failed_files: List[Path] = field(default_factory=list)


class Indexer:
    """Builds the full index from a manual page root and persists it."""

    def __init__(self, store: SQLiteIndexStore) -> None:
        self.store = store

    def describe(self, path: Path) -> tuple[str, bool]:
        """Return ``(description, ok)`` for a single document."""
        result = extract_document(path, FailurePolicy.CONTINUE)
        if not result.ok:
            return "", False
        return parse_description(result.text), True

    def build(self, entries: Iterable[DocumentEntry], stats: IndexStats | None = None) -> Index:
        """Create index records for ``entries`` with ids counting up from 1."""
        stats = stats if stats is not None else IndexStats()
        index: Index = {}
        next_id = 1

        for entry in entries:
            if not entry.page_name or not entry.section_label:
                LOGGER.debug("Skipping unparseable filename %s", entry.path)
                stats.skipped += 1
                continue

            description, ok = self.describe(entry.path)
            if not ok:
                stats.failed += 1
                stats.failed_files.append(entry.path)

            index[next_id] = IndexRecord(
                id=next_id,
                page_name=entry.page_name,
                section_label=entry.section_label,
                description=description,
                source_path=entry.path,
            )
            next_id += 1
            stats.indexed += 1

        return index

    def rebuild(self, root: Path) -> IndexStats:
        """Discard the stored index and regenerate it from ``root``.

        The stored index is left untouched when ``root`` is not a directory.
        """
        root = Path(root)
        if not root.is_dir():
            raise ConfigurationError(f"Manual page root {root} is not a directory")

        LOGGER.info("Rebuilding index from %s", root)
        stats = IndexStats()
        index = self.build(iter_document_entries(root), stats)
        self.store.save(index)
        LOGGER.info(
            "Indexed %d pages (%d failed, %d skipped)", stats.indexed, stats.failed, stats.skipped
        )
        return stats
