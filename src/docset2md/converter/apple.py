"""Language/framework layout for Apple DocC bundles."""

from __future__ import annotations

import logging
from pathlib import Path
import re

from docset2md.converter.base import BaseConverter
from docset2md.converter.markdown import MarkdownGenerator
from docset2md.formats.base import DocsetFormat
from docset2md.formats.docc_parser import doc_output_path, doc_segments
from docset2md.models import ContentItem, NormalizedEntry, ParsedContent
from docset2md.sanitize import sanitize


logger = logging.getLogger(__name__)

INDEX_FILE_NAME = "_index.md"
INDEXED_TYPES = {"Class", "Struct", "Protocol", "Enum"}
_LANGUAGE_DIRS = {"swift": "swift", "objc": "objective-c"}
_LANGUAGE_TITLES = {"swift": "Swift", "objc": "Objective-C"}
DEFAULT_LANGUAGE = "swift"
_DOC_PATH_RE = re.compile(r"l[sc]/documentation/(.+)")


def language_dir(language: str | None) -> str:
    return _LANGUAGE_DIRS.get(language or DEFAULT_LANGUAGE, _LANGUAGE_DIRS["objc"])


def _doc_parts(entry: NormalizedEntry) -> list[str] | None:
    match = _DOC_PATH_RE.search(entry.path)
    if match is None:
        return None
    return doc_segments(match.group(1).split("/")) or None


class AppleDocCConverter(BaseConverter):
    """Write ``<language>/<framework>/.../<symbol>.md`` pages.

    Framework roots become ``<framework>/_index.md``; nested symbols keep
    their documentation path as directories. Framework indexes list only
    top-level types, and each language gets a root index of frameworks.
    """

    search_variant = "docc"

    def __init__(self, docset_format: DocsetFormat, docset_name: str = "Apple") -> None:
        super().__init__(docset_format, docset_name)
        self._framework_items: dict[str, dict[str, list[ContentItem]]] = {}
        self._seen: set[str] = set()

    def reset_index_tracking(self) -> None:
        self._framework_items.clear()
        self._seen.clear()

    def get_output_path(self, entry: NormalizedEntry, content: ParsedContent, output_dir: Path) -> Path:
        root = Path(output_dir) / language_dir(entry.language)
        parts = _doc_parts(entry)
        if parts is not None:
            return root / doc_output_path(parts)
        framework = (content.framework or "other").lower()
        return root / framework / f"{sanitize(entry.name)}.md"

    def track_for_index(
        self,
        entry: NormalizedEntry,
        content: ParsedContent,
        file_path: Path,
        output_dir: Path,
    ) -> None:
        key = f"{entry.type}:{entry.name}:{entry.language or ''}"
        if key in self._seen:
            return
        self._seen.add(key)

        parts = _doc_parts(entry)
        if parts is not None:
            framework = parts[0]
        else:
            framework = (content.framework or "other").lower()

        if parts is not None and len(parts) > 1:
            url = "./" + "/".join(parts[1:-1] + [f"{parts[-1]}.md"])
        else:
            url = f"./{sanitize(entry.name)}.md"

        by_language = self._framework_items.setdefault(framework, {})
        items = by_language.setdefault(entry.language or DEFAULT_LANGUAGE, [])
        if entry.type in INDEXED_TYPES:
            items.append(
                ContentItem(
                    title=entry.name,
                    url=url,
                    abstract=content.abstract,
                    deprecated=content.deprecated,
                    beta=content.beta,
                )
            )

    def generate_indexes(self, output_dir: Path, generator: MarkdownGenerator) -> None:
        output_dir = Path(output_dir)
        for framework, by_language in self._framework_items.items():
            for language, items in by_language.items():
                if not items:
                    continue
                page = generator.generate_index(
                    framework,
                    f"Documentation for the {framework} framework.",
                    sorted(items, key=lambda item: item.title.lower()),
                )
                self.write_file(output_dir / language_dir(language) / framework / INDEX_FILE_NAME, page)

        for language, title in _LANGUAGE_TITLES.items():
            frameworks = sorted(
                framework for framework, by_language in self._framework_items.items() if language in by_language
            )
            if not frameworks:
                continue
            page = generator.generate_index(
                f"{title} Documentation",
                f"API documentation in {title}.",
                [ContentItem(title=framework, url=f"./{framework}/{INDEX_FILE_NAME}") for framework in frameworks],
            )
            self.write_file(output_dir / _LANGUAGE_DIRS[language] / INDEX_FILE_NAME, page)
            logger.info("Wrote %s index with %s frameworks", title, len(frameworks))
