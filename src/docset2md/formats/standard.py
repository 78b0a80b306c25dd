"""Handler for generic Dash docsets: ``searchIndex`` plus static HTML."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator
from urllib.parse import urlsplit

from docset2md.formats.base import DOCUMENTS_RELATIVE_PATH, INDEX_RELATIVE_PATH, apply_limit, list_tables
from docset2md.formats.html_docset import HtmlDocsetBase, strip_dash_metadata
from docset2md.models import EntryFilters, NormalizedEntry, ParsedContent
from docset2md.type_normalizer import expand_types, normalize


class StandardDashFormat(HtmlDocsetBase):
    """Flat ``searchIndex(id, name, type, path)`` docsets such as PHP or Python."""

    name = "Standard Dash"

    async def detect(self, docset_path: Path) -> bool:
        try:
            index_path = docset_path / INDEX_RELATIVE_PATH
            if not index_path.is_file():
                return False
            tables = list_tables(index_path)
            if "searchIndex" not in tables or "ZTOKEN" in tables:
                return False
            return not (docset_path / DOCUMENTS_RELATIVE_PATH / "cache.db").exists()
        except Exception:
            return False

    def _where(self, filters: EntryFilters | None) -> tuple[str, list[object]]:
        """Only the type filter applies; the index has no framework or language column."""
        if filters is None or not filters.types:
            return "", []
        codes = expand_types(filters.types)
        return f" WHERE type IN ({','.join('?' * len(codes))})", list(codes)

    def get_entry_count(self, filters: EntryFilters | None = None) -> int:
        where, params = self._where(filters)
        row = self._require_index().execute(f"SELECT COUNT(*) AS c FROM searchIndex{where}", tuple(params)).fetchone()
        return apply_limit(int(row["c"]), filters)

    def iter_entries(self, filters: EntryFilters | None = None) -> Iterator[NormalizedEntry]:
        where, params = self._where(filters)
        sql = f"SELECT id, name, type, path FROM searchIndex{where} ORDER BY type, name"
        if filters is not None and filters.limit:
            sql += " LIMIT ?"
            params.append(filters.limit)

        for row in self._require_index().execute(sql, tuple(params)):
            yield NormalizedEntry(
                id=row["id"],
                name=row["name"],
                type=normalize(row["type"]),
                path=row["path"],
            )

    def resolve_content_path(self, path: str) -> str | None:
        """Translate an index path into a path below ``Documents``, or None.

        Absolute http(s) URLs map to ``<host><path>``, which is how Dash
        mirrors downloaded pages; other schemes cannot be resolved locally.
        """

        page = strip_dash_metadata(path)
        if page.startswith(("http://", "https://")):
            parts = urlsplit(page)
            if not parts.netloc:
                return None
            return f"{parts.netloc}{parts.path}"
        if "://" in page:
            return None
        return page

    async def extract_content(self, entry: NormalizedEntry) -> ParsedContent | None:
        self._require_index()
        relative_path = self.resolve_content_path(entry.path)
        if not relative_path:
            return None

        html = self._read_html(relative_path)
        if html is None:
            return None
        return self._parse_page(html, entry)

    def _link_rows(self) -> Iterator[tuple[str, str, str]]:
        for row in self._require_index().execute("SELECT name, type, path FROM searchIndex"):
            yield row["name"], row["type"], row["path"]

    def get_types(self) -> list[str]:
        if self._index is None:
            return []
        rows = self._index.execute("SELECT DISTINCT type FROM searchIndex ORDER BY type").fetchall()
        return list(dict.fromkeys(normalize(row["type"]) for row in rows))

    def get_categories(self) -> list[str]:
        return []
