"""Read-only resolver from cache uuids to byte ranges in shared blob files."""

from __future__ import annotations

from pathlib import Path
import sqlite3
from typing import Iterable

from docset2md.formats.base import connect_readonly
from docset2md.models import CacheRef


def _row_to_ref(row: sqlite3.Row) -> CacheRef:
    return CacheRef(
        uuid=row["uuid"],
        data_id=int(row["data_id"]),
        offset=int(row["offset"]),
        length=int(row["length"]),
    )


class CacheReader:
    """Lookup service over the ``refs`` and ``metadata`` tables of ``cache.db``."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self._connection = connect_readonly(self.db_path)

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> "CacheReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def get(self, uuid: str) -> CacheRef | None:
        row = self._connection.execute(
            "SELECT uuid, data_id, offset, length FROM refs WHERE uuid = ?",
            (uuid,),
        ).fetchone()
        if row is None:
            return None
        return _row_to_ref(row)

    def get_many(self, uuids: Iterable[str]) -> dict[str, CacheRef]:
        """Resolve several uuids at once; unknown uuids are omitted."""

        wanted = list(dict.fromkeys(uuids))
        refs: dict[str, CacheRef] = {}
        # SQLITE_MAX_VARIABLE_NUMBER is 999 on older builds.
        for start in range(0, len(wanted), 500):
            batch = wanted[start : start + 500]
            placeholders = ",".join("?" * len(batch))
            rows = self._connection.execute(
                f"SELECT uuid, data_id, offset, length FROM refs WHERE uuid IN ({placeholders})",
                tuple(batch),
            ).fetchall()
            for row in rows:
                refs[row["uuid"]] = _row_to_ref(row)
        return refs

    def exists(self, uuid: str) -> bool:
        row = self._connection.execute("SELECT 1 FROM refs WHERE uuid = ? LIMIT 1", (uuid,)).fetchone()
        return row is not None

    def list_blob_ids(self) -> list[int]:
        rows = self._connection.execute("SELECT DISTINCT data_id FROM refs ORDER BY data_id").fetchall()
        return [int(row["data_id"]) for row in rows]

    def count_refs(self, blob_id: int) -> int:
        row = self._connection.execute(
            "SELECT COUNT(*) AS c FROM refs WHERE data_id = ?",
            (blob_id,),
        ).fetchone()
        return int(row["c"]) if row is not None else 0

    def get_metadata(self, key: str) -> str | None:
        row = self._connection.execute("SELECT value FROM metadata WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return str(row["value"])
