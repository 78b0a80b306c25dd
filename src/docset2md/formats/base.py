"""Shared contract and helpers for per-flavor docset format handlers."""

from __future__ import annotations

from pathlib import Path
import sqlite3
from typing import Iterator, Protocol, runtime_checkable

from docset2md.models import EntryFilters, NormalizedEntry, ParsedContent


INDEX_RELATIVE_PATH = Path("Contents/Resources/docSet.dsidx")
DOCUMENTS_RELATIVE_PATH = Path("Contents/Resources/Documents")


@runtime_checkable
class DocsetFormat(Protocol):
    """Protocol that every docset flavor handler must implement."""

    name: str

    async def detect(self, docset_path: Path) -> bool:
        """Return True when the directory is a docset of this flavor; never raises."""

    async def initialize(self, docset_path: Path) -> None:
        """Open the docset storage; propagates errors for unreadable docsets."""

    def is_initialized(self) -> bool:
        """Return True between a successful `initialize` and `close`."""

    def get_entry_count(self, filters: EntryFilters | None = None) -> int:
        """Count the entries `iter_entries` would yield for the same filters."""

    def iter_entries(self, filters: EntryFilters | None = None) -> Iterator[NormalizedEntry]:
        """Lazily yield entries in a stable order, stopping at `filters.limit`."""

    async def extract_content(self, entry: NormalizedEntry) -> ParsedContent | None:
        """Resolve an entry body, or None when the entry has no content."""

    def get_types(self) -> list[str]:
        """Return the canonical type names present in the docset."""

    def get_categories(self) -> list[str]:
        """Return framework or category names, empty when the flavor has none."""

    def supports_multiple_languages(self) -> bool:
        """Return True when entries carry a language."""

    def get_languages(self) -> list[str]:
        """Return language codes, empty unless multilingual."""

    def close(self) -> None:
        """Release storage handles; safe before `initialize`."""


def connect_readonly(db_path: str | Path) -> sqlite3.Connection:
    """Open an existing SQLite file read-only with `sqlite3.Row` rows.

    The schema is read once so a missing or corrupt file raises
    `sqlite3.Error` here rather than on the first query.
    """

    connection = sqlite3.connect(f"{Path(db_path).resolve().as_uri()}?mode=ro", uri=True)
    connection.row_factory = sqlite3.Row
    try:
        connection.execute("SELECT name FROM sqlite_master LIMIT 1").fetchone()
    except sqlite3.Error:
        connection.close()
        raise
    return connection


def list_tables(db_path: str | Path) -> set[str]:
    connection = connect_readonly(db_path)
    try:
        rows = connection.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    finally:
        connection.close()
    return {row["name"] for row in rows}


def docset_name(docset_path: Path) -> str:
    name = docset_path.name
    if name.endswith(".docset"):
        name = name[: -len(".docset")]
    return name or "Docset"


def apply_limit(count: int, filters: EntryFilters | None) -> int:
    if filters is not None and filters.limit:
        return min(count, filters.limit)
    return count
