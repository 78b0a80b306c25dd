from __future__ import annotations

from pathlib import Path
import sqlite3

from docset2md.formats.cache_reader import CacheReader
from docset2md.models import CacheRef


def _build_cache_db(path: Path, refs: list[tuple[str, int, int, int]]) -> Path:
    connection = sqlite3.connect(path)
    connection.executescript(
        """
        CREATE TABLE refs (uuid TEXT PRIMARY KEY, data_id INTEGER, offset INTEGER, length INTEGER);
        CREATE TABLE metadata (key TEXT PRIMARY KEY, value TEXT);
        """
    )
    connection.executemany("INSERT INTO refs VALUES (?, ?, ?, ?)", refs)
    connection.execute("INSERT INTO metadata VALUES ('version', '3')")
    connection.commit()
    connection.close()
    return path


def test_get_returns_ref_or_none(tmp_path: Path) -> None:
    db_path = _build_cache_db(tmp_path / "cache.db", [("lsAAA", 7, 0, 120)])

    with CacheReader(db_path) as reader:
        assert reader.get("lsAAA") == CacheRef(uuid="lsAAA", data_id=7, offset=0, length=120)
        assert reader.get("lsMISSING") is None
        assert reader.exists("lsAAA")
        assert not reader.exists("lsMISSING")


def test_get_many_returns_exactly_the_present_uuids(tmp_path: Path) -> None:
    db_path = _build_cache_db(
        tmp_path / "cache.db",
        [("lsA", 1, 0, 10), ("lsB", 1, 10, 20), ("lcC", 2, 0, 5)],
    )

    with CacheReader(db_path) as reader:
        refs = reader.get_many(["lsA", "nope", "lcC", "lsA", "other"])

    assert set(refs) == {"lsA", "lcC"}
    assert refs["lcC"].data_id == 2


def test_get_many_handles_more_uuids_than_one_batch(tmp_path: Path) -> None:
    rows = [(f"ls{index:04d}", index % 3, index, 1) for index in range(1200)]
    db_path = _build_cache_db(tmp_path / "cache.db", rows)

    with CacheReader(db_path) as reader:
        refs = reader.get_many([row[0] for row in rows] + ["absent"])

    assert len(refs) == 1200


def test_list_blob_ids_is_strictly_ascending_and_complete(tmp_path: Path) -> None:
    db_path = _build_cache_db(
        tmp_path / "cache.db",
        [("a", 9, 0, 1), ("b", 2, 0, 1), ("c", 9, 1, 1), ("d", 5, 0, 1), ("e", 2, 1, 1)],
    )

    with CacheReader(db_path) as reader:
        blob_ids = reader.list_blob_ids()
        assert reader.count_refs(9) == 2
        assert reader.count_refs(404) == 0

    assert blob_ids == [2, 5, 9]
    assert all(left < right for left, right in zip(blob_ids, blob_ids[1:]))


def test_get_metadata(tmp_path: Path) -> None:
    db_path = _build_cache_db(tmp_path / "cache.db", [])

    with CacheReader(db_path) as reader:
        assert reader.get_metadata("version") == "3"
        assert reader.get_metadata("missing") is None
