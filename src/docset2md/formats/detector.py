"""Pick and initialize the handler for a docset directory."""

from __future__ import annotations

import logging
from pathlib import Path

from docset2md.exceptions import UnsupportedDocsetError
from docset2md.formats.apple import AppleDocCFormat
from docset2md.formats.base import DocsetFormat
from docset2md.formats.coredata import CoreDataFormat
from docset2md.formats.standard import StandardDashFormat
from docset2md.formats.tarix import DEFAULT_CACHE_SIZE


logger = logging.getLogger(__name__)


def build_default_formats(*, tarix_cache_size: int = DEFAULT_CACHE_SIZE) -> list[DocsetFormat]:
    """Return handlers in detection priority order, most specific first."""

    return [
        AppleDocCFormat(),
        CoreDataFormat(tarix_cache_size=tarix_cache_size),
        StandardDashFormat(tarix_cache_size=tarix_cache_size),
    ]


class FormatDetector:
    def __init__(self, formats: list[DocsetFormat] | None = None) -> None:
        self._formats = list(formats) if formats is not None else build_default_formats()

    async def detect_format(self, docset_path: str | Path) -> DocsetFormat | None:
        """Return the first matching handler, already initialized, or None."""

        path = Path(docset_path)
        for docset_format in self._formats:
            if await docset_format.detect(path):
                logger.info("Detected %s docset at %s", docset_format.name, path)
                await docset_format.initialize(path)
                return docset_format
        logger.info("No docset format matched %s", path)
        return None

    async def require_format(self, docset_path: str | Path) -> DocsetFormat:
        docset_format = await self.detect_format(docset_path)
        if docset_format is None:
            raise UnsupportedDocsetError(Path(docset_path), "Unsupported docset format")
        return docset_format

    def get_format_by_name(self, name: str) -> DocsetFormat | None:
        for docset_format in self._formats:
            if docset_format.name == name:
                return docset_format
        return None

    def get_format_names(self) -> list[str]:
        return [docset_format.name for docset_format in self._formats]
