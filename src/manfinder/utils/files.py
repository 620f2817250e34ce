"""Utility helpers for discovering manual pages on disk."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterator, Tuple

from manfinder.models import DocumentEntry

COMPRESSED_EXTENSIONS = ("gz", "bz2", "xz")

# name.<1-9>[alpha suffix].<compression>, e.g. "ls.1.gz" or "ssl.3ssl.gz"
MANPAGE_PATTERN = re.compile(
    r"\.([1-9])[a-zA-Z]*\.(?:" + "|".join(COMPRESSED_EXTENSIONS) + r")$"
)


def compression_of(path: Path) -> str:
    """Return the compression extension of a document path ("gz", "bz2", "xz")."""
    return path.suffix.lstrip(".").lower()


def parse_document_name(filename: str) -> Tuple[str, str] | None:
    """Split a document filename into ``(page_name, section_label)``.

    The compression extension is dropped and the remainder is split on its
    last dot. Returns ``None`` when either part would be empty.
    """
    stem, dot, ext = filename.rpartition(".")
    if not dot or ext.lower() not in COMPRESSED_EXTENSIONS:
        return None
    page, dot, section = stem.rpartition(".")
    if not dot or not page or not section:
        return None
    return page.lower(), section


def _walk_files(root: Path) -> Iterator[Path]:
    seen: set[str] = set()
    # os.walk reports errors through onerror; unreadable directories are skipped
    for dirpath, dirnames, filenames in os.walk(root, followlinks=True, onerror=lambda _: None):
        real = os.path.realpath(dirpath)
        if real in seen:
            dirnames[:] = []
            continue
        seen.add(real)
        for name in filenames:
            yield Path(dirpath) / name


def iter_document_entries(root: Path) -> Iterator[DocumentEntry]:
    """Yield manual pages under ``root`` in ascending section order.

    Pages within one section are ordered by filename, then by path.
    Broken links and unreadable entries are skipped.
    """
    entries = []
    for path in _walk_files(Path(root)):
        match = MANPAGE_PATTERN.search(path.name)
        if match is None or not os.path.isfile(path):
            continue
        parsed = parse_document_name(path.name)
        if parsed is None:
            continue
        page_name, section_label = parsed
        entries.append(
            DocumentEntry(
                path=path.absolute(),
                page_name=page_name,
                section_label=section_label,
                section_number=int(match.group(1)),
            )
        )

    entries.sort(key=lambda entry: (entry.section_number, entry.path.name, str(entry.path)))
    yield from entries
