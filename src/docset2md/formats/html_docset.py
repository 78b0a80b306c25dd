"""Storage shared by docset flavors whose pages are static HTML files."""

from __future__ import annotations

import logging
from pathlib import Path
import sqlite3
from typing import Iterator

from docset2md.exceptions import DocsetNotInitializedError
from docset2md.formats.base import (
    DOCUMENTS_RELATIVE_PATH,
    INDEX_RELATIVE_PATH,
    connect_readonly,
    docset_name,
)
from docset2md.formats.html_parser import HtmlParser
from docset2md.formats.tarix import DEFAULT_CACHE_SIZE, TarixArchive
from docset2md.models import LinkMapping, NormalizedEntry, ParsedContent
from docset2md.sanitize import sanitize
from docset2md.type_normalizer import normalize


logger = logging.getLogger(__name__)


def strip_dash_metadata(path: str) -> str:
    """Drop ``<dash_entry_...>`` prefixes and the ``#fragment`` from an index path."""

    if "<dash_entry" in path:
        path = path[path.rfind(">") + 1 :]
    return path.split("#", 1)[0]


class HtmlDocsetBase:
    """Open ``docSet.dsidx``, the optional tarix archive and ``Documents/``.

    Subclasses provide entry enumeration; content lookup tries the tarix
    archive first (with and without the ``<name>.docset/...`` prefix) and
    then falls back to the ``Documents`` directory.
    """

    name = "HTML"

    def __init__(self, *, tarix_cache_size: int = DEFAULT_CACHE_SIZE) -> None:
        self._tarix_cache_size = tarix_cache_size
        self._docset_path: Path | None = None
        self._docset_name = "Docset"
        self._index: sqlite3.Connection | None = None
        self._tarix: TarixArchive | None = None
        self._parser = HtmlParser()
        self._link_map: dict[str, LinkMapping] | None = None

    @property
    def docset_name(self) -> str:
        return self._docset_name

    async def initialize(self, docset_path: Path) -> None:
        self.close()
        resources = docset_path / "Contents" / "Resources"
        archive_path = resources / "tarix.tgz"
        archive_index_path = resources / "tarixIndex.db"
        try:
            self._index = connect_readonly(docset_path / INDEX_RELATIVE_PATH)
            if archive_path.is_file() and archive_index_path.is_file():
                self._tarix = TarixArchive(archive_path, archive_index_path, cache_size=self._tarix_cache_size)
                logger.debug("Using tarix archive for %s", docset_path)
        except sqlite3.Error:
            self.close()
            raise
        self._docset_path = docset_path
        self._docset_name = docset_name(docset_path)

    def is_initialized(self) -> bool:
        return self._index is not None

    def _require_index(self) -> sqlite3.Connection:
        if self._index is None:
            raise DocsetNotInitializedError(self._docset_path or Path("."), f"{self.name} docset not initialized")
        return self._index

    def _read_html(self, relative_path: str) -> str | None:
        if self._tarix is not None:
            prefixed = f"{self._docset_name}.docset/{DOCUMENTS_RELATIVE_PATH.as_posix()}/{relative_path}"
            for candidate in (prefixed, relative_path):
                try:
                    return self._tarix.extract_file(candidate)
                except KeyError:
                    continue

        if self._docset_path is None:
            return None
        documents = self._docset_path / DOCUMENTS_RELATIVE_PATH
        page = documents / relative_path
        if not page.is_file():
            return None
        return page.read_text(encoding="utf-8", errors="replace")

    def _parse_page(self, html: str, entry: NormalizedEntry) -> ParsedContent:
        if self._link_map is not None:
            self._parser.set_link_context(self._link_map, entry.type.lower())
        return self._parser.parse(html, entry.name, entry.type)

    def _link_rows(self) -> Iterator[tuple[str, str, str]]:
        """Return ``(name, raw type, raw path)`` for every linkable entry."""

        raise NotImplementedError

    def build_link_mapping(self) -> dict[str, LinkMapping]:
        """Map each page's HTML filename to the markdown path it is written to."""

        link_map: dict[str, LinkMapping] = {}
        for name, raw_type, raw_path in self._link_rows():
            page = strip_dash_metadata(raw_path)
            filename = page.rsplit("/", 1)[-1] or page
            entry_type = normalize(raw_type)
            link_map[filename] = LinkMapping(
                output_path=f"{entry_type.lower()}/{sanitize(name)}.md",
                type=entry_type,
                name=name,
            )
        return link_map

    def set_link_mapping(self, link_map: dict[str, LinkMapping] | None) -> None:
        self._link_map = link_map

    def supports_multiple_languages(self) -> bool:
        return False

    def get_languages(self) -> list[str]:
        return []

    def close(self) -> None:
        if self._index is not None:
            self._index.close()
            self._index = None
        if self._tarix is not None:
            self._tarix.close()
            self._tarix = None
        self._link_map = None
