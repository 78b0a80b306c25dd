"""Read-side queries over ``search.db``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re
import sqlite3

from docset2md.formats.base import connect_readonly
from docset2md.search.writer import SearchEntry


DEFAULT_LIMIT = 20

# name, type, framework, abstract, declaration
BM25_WEIGHTS = (10.0, 5.0, 2.0, 1.0, 1.0)

_OPERATORS = {"AND", "OR", "NOT"}
_TOKEN_RE = re.compile(r'"[^"]*"|\S+')


@dataclass(slots=True)
class SearchResult:
    entry: SearchEntry
    score: float

    def to_dict(self) -> dict[str, str | int | float | bool | None]:
        payload: dict[str, str | int | float | bool | None] = dict(self.entry.to_dict())
        payload["score"] = self.score
        return payload


def _quoted(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def build_match_expression(query: str) -> str:
    """Quote each token so punctuation is literal; keep phrases, operators and prefix ``*``."""

    parts: list[str] = []
    for token in _TOKEN_RE.findall(query.strip()):
        if token in _OPERATORS:
            parts.append(token)
        elif len(token) >= 2 and token.startswith('"') and token.endswith('"'):
            if token[1:-1].strip():
                parts.append(_quoted(token[1:-1]))
        elif token.endswith("*") and token.rstrip("*"):
            parts.append(_quoted(token.rstrip("*")) + "*")
        elif token.strip("*"):
            parts.append(_quoted(token.strip("*")))

    while parts and parts[0] in _OPERATORS:
        parts.pop(0)
    while parts and parts[-1] in _OPERATORS:
        parts.pop()
    return " ".join(parts)


def _row_to_entry(row: sqlite3.Row) -> SearchEntry:
    return SearchEntry(
        id=row["id"],
        name=row["name"],
        type=row["type"],
        language=row["language"],
        framework=row["framework"],
        path=row["path"],
        abstract=row["abstract"],
        declaration=row["declaration"],
        deprecated=bool(row["deprecated"]),
        beta=bool(row["beta"]),
    )


class SearchIndexReader:
    def __init__(self, db_path: str | Path) -> None:
        self._connection = connect_readonly(db_path)

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> "SearchIndexReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def search(
        self,
        query: str,
        *,
        type: str | None = None,
        framework: str | None = None,
        language: str | None = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> list[SearchResult]:
        """Return entries matching `query`, best match first."""

        match_expression = build_match_expression(query)
        if not match_expression:
            return []

        where_clauses = ["entries_fts MATCH ?"]
        params: list[object] = [match_expression]
        if type:
            where_clauses.append("e.type = ?")
            params.append(type)
        if framework:
            where_clauses.append("e.framework = ?")
            params.append(framework)
        if language:
            where_clauses.append("e.language = ?")
            params.append(language)
        params.extend([max(1, limit), max(0, offset)])

        weights = ", ".join(str(weight) for weight in BM25_WEIGHTS)
        rows = self._connection.execute(
            f"""
            SELECT e.*, bm25(entries_fts, {weights}) AS score
            FROM entries_fts
            JOIN entries e ON e.id = entries_fts.rowid
            WHERE {' AND '.join(where_clauses)}
            ORDER BY score
            LIMIT ? OFFSET ?
            """,
            tuple(params),
        ).fetchall()

        # bm25 is negative; smaller means a better match.
        return [SearchResult(entry=_row_to_entry(row), score=abs(float(row["score"]))) for row in rows]

    def get_entry(self, entry_id: int) -> SearchEntry | None:
        row = self._connection.execute("SELECT * FROM entries WHERE id = ?", (entry_id,)).fetchone()
        if row is None:
            return None
        return _row_to_entry(row)

    def _grouped_counts(self, column: str) -> list[tuple[str, int]]:
        rows = self._connection.execute(
            f"""
            SELECT {column} AS value, COUNT(*) AS c
            FROM entries
            WHERE {column} IS NOT NULL
            GROUP BY {column}
            ORDER BY c DESC, {column}
            """
        ).fetchall()
        return [(row["value"], int(row["c"])) for row in rows]

    def get_types(self) -> list[tuple[str, int]]:
        return self._grouped_counts("type")

    def get_frameworks(self) -> list[tuple[str, int]]:
        return self._grouped_counts("framework")

    def get_languages(self) -> list[tuple[str, int]]:
        return self._grouped_counts("language")

    def count(self) -> int:
        row = self._connection.execute("SELECT COUNT(*) AS c FROM entries").fetchone()
        return int(row["c"])
