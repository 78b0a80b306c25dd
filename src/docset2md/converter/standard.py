"""Type/item layout shared by Standard Dash and CoreData docsets."""

from __future__ import annotations

import logging
from pathlib import Path

from docset2md.converter.base import BaseConverter
from docset2md.converter.markdown import MarkdownGenerator
from docset2md.formats.base import DocsetFormat
from docset2md.models import ContentItem, NormalizedEntry, ParsedContent
from docset2md.sanitize import sanitize


logger = logging.getLogger(__name__)

INDEX_FILE_NAME = "_index.md"


class StandardConverter(BaseConverter):
    """Write ``<type>/<name>.md`` pages plus one index per type and a root index."""

    def __init__(self, docset_format: DocsetFormat, docset_name: str) -> None:
        super().__init__(docset_format, docset_name)
        self._type_items: dict[str, list[ContentItem]] = {}

    def prepare(self) -> None:
        super().prepare()
        build_link_mapping = getattr(self._format, "build_link_mapping", None)
        set_link_mapping = getattr(self._format, "set_link_mapping", None)
        if callable(build_link_mapping) and callable(set_link_mapping):
            set_link_mapping(build_link_mapping())

    def reset_index_tracking(self) -> None:
        self._type_items.clear()

    def get_output_path(self, entry: NormalizedEntry, content: ParsedContent, output_dir: Path) -> Path:
        return Path(output_dir) / entry.type.lower() / f"{sanitize(entry.name)}.md"

    def track_for_index(
        self,
        entry: NormalizedEntry,
        content: ParsedContent,
        file_path: Path,
        output_dir: Path,
    ) -> None:
        item = ContentItem(
            title=entry.name,
            url=f"./{sanitize(entry.name)}.md",
            abstract=content.abstract,
            deprecated=content.deprecated,
            beta=content.beta,
        )
        self._type_items.setdefault(entry.type.lower(), []).append(item)

    def generate_indexes(self, output_dir: Path, generator: MarkdownGenerator) -> None:
        output_dir = Path(output_dir)
        populated = {type_dir: items for type_dir, items in self._type_items.items() if items}

        for type_dir, items in populated.items():
            page = generator.generate_index(
                type_dir,
                f"{type_dir} entries.",
                sorted(items, key=lambda item: item.title.lower()),
            )
            self.write_file(output_dir / type_dir / INDEX_FILE_NAME, page)

        if not populated:
            return

        type_links = [
            ContentItem(title=f"{type_dir} ({len(populated[type_dir])})", url=f"./{type_dir}/{INDEX_FILE_NAME}")
            for type_dir in sorted(populated)
        ]
        root_page = generator.generate_index(self.docset_name, "Documentation index.", type_links)
        self.write_file(output_dir / INDEX_FILE_NAME, root_page)
        logger.info("Wrote %s type indexes and the root index", len(populated))
