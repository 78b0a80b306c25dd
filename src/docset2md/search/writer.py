"""Batched writer for the full-text search database."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import sqlite3

from docset2md.search.schema import INSERT_ENTRY_SQL, ensure_schema, optimize_fts


logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1000


@dataclass(slots=True)
class SearchEntry:
    """One converted page as stored in ``search.db``."""

    name: str
    type: str
    path: str
    language: str | None = None
    framework: str | None = None
    abstract: str | None = None
    declaration: str | None = None
    deprecated: bool = False
    beta: bool = False
    id: int | None = None

    def to_dict(self) -> dict[str, str | int | bool | None]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "language": self.language,
            "framework": self.framework,
            "path": self.path,
            "abstract": self.abstract,
            "declaration": self.declaration,
            "deprecated": self.deprecated,
            "beta": self.beta,
        }


class SearchIndexWriter:
    """Append entries to a fresh ``search.db``, committing every `batch_size` rows.

    `close` commits the tail, optimizes the FTS index, switches the journal
    back to DELETE and vacuums so the file is a single self-contained
    database next to the markdown tree.
    """

    def __init__(self, db_path: str | Path, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self._db_path = Path(db_path)
        self._batch_size = batch_size
        self._pending = 0
        self._total = 0

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        if self._db_path.exists():
            self._db_path.unlink()

        self._connection = sqlite3.connect(str(self._db_path))
        self._connection.execute("PRAGMA journal_mode=WAL;")
        ensure_schema(self._connection)
        self._connection.commit()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def add_entry(self, entry: SearchEntry) -> None:
        self._connection.execute(
            INSERT_ENTRY_SQL,
            (
                entry.name,
                entry.type,
                entry.language,
                entry.framework,
                entry.path,
                entry.abstract,
                entry.declaration,
                1 if entry.deprecated else 0,
                1 if entry.beta else 0,
            ),
        )
        self._pending += 1
        self._total += 1
        if self._pending >= self._batch_size:
            self._connection.commit()
            self._pending = 0

    def entry_count(self) -> int:
        return self._total

    def close(self) -> None:
        self._connection.commit()
        self._pending = 0
        if self._total > 0:
            optimize_fts(self._connection)
            self._connection.commit()
        self._connection.execute("PRAGMA journal_mode=DELETE;")
        self._connection.execute("VACUUM;")
        self._connection.close()
        logger.info("Search index written: %s entries in %s", self._total, self._db_path)

    def __enter__(self) -> "SearchIndexWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
