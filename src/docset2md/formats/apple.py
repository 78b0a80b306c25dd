"""Handler for Apple documentation bundles backed by a DocC content cache."""

from __future__ import annotations

from collections import OrderedDict
import json
import logging
from pathlib import Path
import re
import sqlite3
from typing import Iterator
from urllib.parse import unquote

import brotli

from docset2md.exceptions import DocsetNotInitializedError
from docset2md.formats.base import (
    DOCUMENTS_RELATIVE_PATH,
    INDEX_RELATIVE_PATH,
    apply_limit,
    connect_readonly,
    list_tables,
)
from docset2md.formats.cache_reader import CacheReader
from docset2md.formats.docc_parser import DocCParser
from docset2md.formats.request_keys import framework_for_key, generate_uuid, language_for_key
from docset2md.models import EntryFilters, NormalizedEntry, ParsedContent


logger = logging.getLogger(__name__)

_REQUEST_KEY_RE = re.compile(r"request_key=(l[sc]/[^#]+)")
_LANGUAGE_PATTERNS = {"swift": "%request_key=ls/%", "objc": "%request_key=lc/%"}
# Decoded blobs held in memory at once.
DEFAULT_MAX_BLOBS = 8


class BlobStore:
    """Decoded ``fs/<data_id>`` blobs with an LRU bound on how many stay in memory."""

    def __init__(self, fs_dir: Path, *, max_blobs: int = DEFAULT_MAX_BLOBS) -> None:
        self.fs_dir = fs_dir
        self._max_blobs = max_blobs
        self._blobs: OrderedDict[int, bytes] = OrderedDict()

    def read(self, data_id: int) -> bytes | None:
        cached = self._blobs.get(data_id)
        if cached is not None:
            self._blobs.move_to_end(data_id)
            return cached

        blob_path = self.fs_dir / str(data_id)
        if not blob_path.is_file():
            return None

        raw = blob_path.read_bytes()
        try:
            decoded = brotli.decompress(raw)
        except brotli.error:
            # Some blobs (images, pre-expanded caches) are stored uncompressed.
            decoded = raw
        self._blobs[data_id] = decoded
        if len(self._blobs) > self._max_blobs:
            self._blobs.popitem(last=False)
        return decoded

    def clear(self) -> None:
        self._blobs.clear()


class AppleDocCFormat:
    """Apple bundle: ``searchIndex`` entries, ``cache.db`` refs, ``fs/`` blobs."""

    name = "Apple DocC"

    def __init__(self) -> None:
        self._docset_path: Path | None = None
        self._index: sqlite3.Connection | None = None
        self._cache: CacheReader | None = None
        self._blobs: BlobStore | None = None
        self._parser = DocCParser()

    async def detect(self, docset_path: Path) -> bool:
        try:
            documents = docset_path / DOCUMENTS_RELATIVE_PATH
            index_path = docset_path / INDEX_RELATIVE_PATH
            if not (index_path.is_file() and (documents / "cache.db").is_file() and (documents / "fs").is_dir()):
                return False
            return "searchIndex" in list_tables(index_path)
        except Exception:
            return False

    async def initialize(self, docset_path: Path) -> None:
        self.close()
        documents = docset_path / DOCUMENTS_RELATIVE_PATH
        try:
            self._index = connect_readonly(docset_path / INDEX_RELATIVE_PATH)
            self._cache = CacheReader(documents / "cache.db")
        except sqlite3.Error:
            self.close()
            raise
        self._blobs = BlobStore(documents / "fs")
        self._docset_path = docset_path
        logger.debug("Opened Apple docset %s", docset_path)

    def is_initialized(self) -> bool:
        return self._index is not None

    def _require_index(self) -> sqlite3.Connection:
        if self._index is None:
            raise DocsetNotInitializedError(self._docset_path or Path("."), "Apple docset not initialized")
        return self._index

    def _where(self, filters: EntryFilters | None) -> tuple[str, list[object]]:
        # Rows without a request key have no cached content and are never enumerated.
        conditions = ["(path LIKE '%request_key=ls/%' OR path LIKE '%request_key=lc/%')"]
        params: list[object] = []

        if filters is not None and filters.types:
            conditions.append(f"type IN ({','.join('?' * len(filters.types))})")
            params.extend(filters.types)

        if filters is not None and filters.languages:
            patterns = [_LANGUAGE_PATTERNS[language] for language in filters.languages if language in _LANGUAGE_PATTERNS]
            if patterns:
                conditions.append("(" + " OR ".join("path LIKE ?" for _ in patterns) + ")")
                params.extend(patterns)
            else:
                # Only unknown language codes were requested.
                conditions.append("0")

        if filters is not None and filters.frameworks:
            conditions.append("(" + " OR ".join("path LIKE ?" for _ in filters.frameworks) + ")")
            params.extend(f"%/documentation/{framework.lower()}%" for framework in filters.frameworks)

        return " WHERE " + " AND ".join(conditions), params

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
            match = _REQUEST_KEY_RE.search(row["path"])
            if match is None:
                continue
            request_key = unquote(match.group(1))
            yield NormalizedEntry(
                id=row["id"],
                name=row["name"],
                type=row["type"],
                path=request_key,
                language=language_for_key(request_key),
                framework=framework_for_key(request_key),
            )

    async def extract_content(self, entry: NormalizedEntry) -> ParsedContent | None:
        if self._cache is None or self._blobs is None:
            raise DocsetNotInitializedError(self._docset_path or Path("."), "Apple docset not initialized")

        try:
            uuid = generate_uuid(entry.path)
        except ValueError:
            logger.debug("Skipping entry with malformed request key: %s", entry.path)
            return None

        ref = self._cache.get(uuid)
        if ref is None:
            return None

        blob = self._blobs.read(ref.data_id)
        if blob is None:
            return None

        try:
            document = json.loads(blob[ref.offset : ref.offset + ref.length])
        except ValueError:
            logger.debug("Undecodable cache slice for %s (uuid=%s)", entry.path, uuid)
            return None

        if not isinstance(document, dict) or not (document.get("metadata") or document.get("schemaVersion")):
            return None

        return self._parser.parse(document, entry.language or "swift")

    def get_types(self) -> list[str]:
        if self._index is None:
            return []
        rows = self._index.execute("SELECT DISTINCT type FROM searchIndex ORDER BY type").fetchall()
        return [row["type"] for row in rows]

    def get_categories(self) -> list[str]:
        if self._index is None:
            return []
        rows = self._index.execute(
            "SELECT DISTINCT name FROM searchIndex WHERE type = 'Framework' ORDER BY name"
        ).fetchall()
        return [row["name"] for row in rows]

    def supports_multiple_languages(self) -> bool:
        return True

    def get_languages(self) -> list[str]:
        return ["swift", "objc"]

    def close(self) -> None:
        if self._index is not None:
            self._index.close()
            self._index = None
        if self._cache is not None:
            self._cache.close()
            self._cache = None
        if self._blobs is not None:
            self._blobs.clear()
            self._blobs = None
