"""SQLite persistence for the manual page index."""

from __future__ import annotations

import logging
import os
import sqlite3
import tempfile
from contextlib import closing
from pathlib import Path

from manfinder.errors import IndexPersistenceError
from manfinder.models import Index, IndexRecord

LOGGER = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class SQLiteIndexStore:
    """Persists a whole :data:`~manfinder.models.Index` as one SQLite file.

    ``save`` always replaces the previous file: the index is written to a
    temporary file next to the target and moved over it with
    :func:`os.replace`, so readers see either the old or the new index.
    """

    def __init__(self, index_path: Path) -> None:
        self.index_path = Path(index_path)

    def exists(self) -> bool:
        return self.index_path.is_file()

    def _write_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE records (
                id INTEGER PRIMARY KEY,
                page_name TEXT NOT NULL,
                section_label TEXT NOT NULL,
                description TEXT NOT NULL,
                source_path TEXT NOT NULL
            )
            """
        )
        conn.execute("CREATE INDEX idx_records_page_name ON records(page_name)")
        conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")

    def save(self, index: Index) -> None:
        """Write ``index``, replacing any existing file."""
        parent = self.index_path.parent
        parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.index_path.name}.", dir=parent)
        os.close(fd)
        try:
            with closing(sqlite3.connect(tmp_name)) as conn:
                with conn:
                    self._write_schema(conn)
                    conn.executemany(
                        """
                        INSERT INTO records(id, page_name, section_label, description, source_path)
                        VALUES (?, ?, ?, ?, ?)
                        """,
                        [
                            (
                                record.id,
                                record.page_name,
                                record.section_label,
                                record.description,
                                str(record.source_path),
                            )
                            for record in index.values()
                        ],
                    )
            os.replace(tmp_name, self.index_path)
        except (OSError, sqlite3.Error) as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise IndexPersistenceError(f"Unable to write index {self.index_path}: {exc}") from exc
        LOGGER.info("Saved %d records to %s", len(index), self.index_path)

    def load(self) -> Index:
        """Read the whole index into memory."""
        if not self.exists():
            raise IndexPersistenceError(f"Index not found: {self.index_path}")

        uri = f"{self.index_path.absolute().as_uri()}?mode=ro"
        try:
            with closing(sqlite3.connect(uri, uri=True)) as conn:
                conn.row_factory = sqlite3.Row
                version = conn.execute("PRAGMA user_version").fetchone()[0]
                if version != SCHEMA_VERSION:
                    raise IndexPersistenceError(
                        f"Index {self.index_path} has schema version {version}, "
                        f"expected {SCHEMA_VERSION}; rebuild it"
                    )
                rows = conn.execute(
                    """
                    SELECT id, page_name, section_label, description, source_path
                    FROM records ORDER BY id
                    """
                ).fetchall()
        except sqlite3.Error as exc:
            raise IndexPersistenceError(f"Unable to read index {self.index_path}: {exc}") from exc

        index: Index = {}
        for row in rows:
            index[row["id"]] = IndexRecord(
                id=row["id"],
                page_name=row["page_name"],
                section_label=row["section_label"],
                description=row["description"],
                source_path=Path(row["source_path"]),
            )
        LOGGER.debug("Loaded %d records from %s", len(index), self.index_path)
        return index
