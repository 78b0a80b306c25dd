"""Full-text search artifact written next to converted markdown."""

from .builder import build_search_binary
from .reader import SearchIndexReader, SearchResult
from .schema import ensure_schema
from .writer import SearchEntry, SearchIndexWriter

__all__ = [
    "SearchEntry",
    "SearchIndexReader",
    "SearchIndexWriter",
    "SearchResult",
    "build_search_binary",
    "ensure_schema",
]
