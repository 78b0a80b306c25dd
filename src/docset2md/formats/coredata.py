"""Handler for CoreData-style docsets with ``ZTOKEN``/``ZNODE`` tables."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from docset2md.formats.base import INDEX_RELATIVE_PATH, apply_limit, list_tables
from docset2md.formats.html_docset import HtmlDocsetBase, strip_dash_metadata
from docset2md.models import EntryFilters, NormalizedEntry, ParsedContent
from docset2md.type_normalizer import expand_types, normalize


_TOKEN_FROM = """
    FROM ZTOKEN t
    JOIN ZTOKENTYPE tt ON t.ZTOKENTYPE = tt.Z_PK
    LEFT JOIN ZTOKENMETAINFORMATION m ON t.Z_PK = m.ZTOKEN
    LEFT JOIN ZFILEPATH f ON m.ZFILE = f.Z_PK
"""


class CoreDataFormat(HtmlDocsetBase):
    """Tokens joined to their type names and file paths."""

    name = "CoreData"

    async def detect(self, docset_path: Path) -> bool:
        try:
            index_path = docset_path / INDEX_RELATIVE_PATH
            if not index_path.is_file():
                return False
            tables = list_tables(index_path)
            return "ZTOKEN" in tables and "ZNODE" in tables
        except Exception:
            return False

    def _where(self, filters: EntryFilters | None) -> tuple[str, list[object]]:
        """Only the type filter applies; frameworks and languages are ignored."""
        # Tokens without a file have nothing to convert and are not enumerated.
        conditions = ["f.ZPATH IS NOT NULL", "f.ZPATH != ''"]
        params: list[object] = []
        if filters is not None and filters.types:
            codes = expand_types(filters.types)
            conditions.append(f"tt.ZTYPENAME IN ({','.join('?' * len(codes))})")
            params.extend(codes)
        return " WHERE " + " AND ".join(conditions), params

    def get_entry_count(self, filters: EntryFilters | None = None) -> int:
        where, params = self._where(filters)
        row = self._require_index().execute(f"SELECT COUNT(*) AS c {_TOKEN_FROM}{where}", tuple(params)).fetchone()
        return apply_limit(int(row["c"]), filters)

    def iter_entries(self, filters: EntryFilters | None = None) -> Iterator[NormalizedEntry]:
        where, params = self._where(filters)
        sql = (
            "SELECT t.Z_PK AS id, t.ZTOKENNAME AS name, tt.ZTYPENAME AS type, f.ZPATH AS path"
            f" {_TOKEN_FROM}{where} ORDER BY tt.ZTYPENAME, t.ZTOKENNAME"
        )
        if filters is not None and filters.limit:
            sql += " LIMIT ?"
            params.append(filters.limit)

        for row in self._require_index().execute(sql, tuple(params)):
            yield NormalizedEntry(
                id=row["id"],
                name=row["name"],
                type=normalize(row["type"]),
                path=strip_dash_metadata(row["path"]),
            )

    async def extract_content(self, entry: NormalizedEntry) -> ParsedContent | None:
        self._require_index()
        if not entry.path:
            return None
        html = self._read_html(entry.path)
        if html is None:
            return None
        return self._parse_page(html, entry)

    def _link_rows(self) -> Iterator[tuple[str, str, str]]:
        sql = f"SELECT t.ZTOKENNAME AS name, tt.ZTYPENAME AS type, f.ZPATH AS path {_TOKEN_FROM}{self._where(None)[0]}"
        for row in self._require_index().execute(sql):
            yield row["name"], row["type"], row["path"]

    def get_types(self) -> list[str]:
        if self._index is None:
            return []
        rows = self._index.execute("SELECT DISTINCT ZTYPENAME FROM ZTOKENTYPE ORDER BY ZTYPENAME").fetchall()
        return list(dict.fromkeys(normalize(row["ZTYPENAME"]) for row in rows))

    def get_categories(self) -> list[str]:
        if self._index is None:
            return []
        rows = self._index.execute(
            "SELECT DISTINCT ZKNAME AS name FROM ZNODE WHERE ZKNAME IS NOT NULL AND ZKNAME != '' ORDER BY ZKNAME"
        ).fetchall()
        return [row["name"] for row in rows]
