"""Shared conversion loop for every docset flavor."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import time
from typing import Callable

from docset2md.converter.markdown import MarkdownGenerator
from docset2md.converter.writer import FileWriter, WriteStats
from docset2md.exceptions import SearchToolchainUnavailableError
from docset2md.formats.base import DocsetFormat
from docset2md.models import EntryFilters, NormalizedEntry, ParsedContent
from docset2md.search.builder import DEFAULT_BUILD_TIMEOUT_SECONDS, build_search_binary
from docset2md.search.writer import DEFAULT_BATCH_SIZE, SearchEntry, SearchIndexWriter


logger = logging.getLogger(__name__)

SEARCH_DB_NAME = "search.db"

ProgressCallback = Callable[[int, int, NormalizedEntry], None]


@dataclass(frozen=True, slots=True)
class ConverterOptions:
    output_dir: Path
    verbose: bool = False
    filters: EntryFilters | None = None
    generate_index: bool = False
    search_batch_size: int = DEFAULT_BATCH_SIZE
    build_timeout_seconds: float = DEFAULT_BUILD_TIMEOUT_SECONDS


@dataclass(slots=True)
class ConversionResult:
    processed: int = 0
    successful: int = 0
    failed: int = 0
    skipped: int = 0
    write_stats: WriteStats = field(default_factory=WriteStats)
    elapsed_ms: int = 0
    index_entries: int | None = None
    search_binary_built: bool | None = None
    search_binary_remediation: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "processed": self.processed,
            "successful": self.successful,
            "failed": self.failed,
            "skipped": self.skipped,
            "write_stats": self.write_stats.to_dict(),
            "elapsed_ms": self.elapsed_ms,
            "index_entries": self.index_entries,
            "search_binary_built": self.search_binary_built,
        }


class BaseConverter:
    """Drive one docset through extraction, markdown rendering and output.

    Subclasses decide the output layout (`get_output_path`) and how index
    pages summarize what was written (`track_for_index`,
    `generate_indexes`). `prepare` runs before any entry is enumerated and
    is where per-run state is reset and cross-entry link maps are
    installed on the format handler.
    """

    search_variant = "standard"

    def __init__(self, docset_format: DocsetFormat, docset_name: str) -> None:
        self._format = docset_format
        self._docset_name = docset_name.removesuffix(".docset")
        self._generator = MarkdownGenerator()
        self._writer = FileWriter()

    @property
    def docset_name(self) -> str:
        return self._docset_name

    def get_format(self) -> DocsetFormat:
        return self._format

    def get_format_name(self) -> str:
        return self._format.name

    def prepare(self) -> None:
        self.reset_index_tracking()

    async def convert(
        self,
        options: ConverterOptions,
        on_progress: ProgressCallback | None = None,
    ) -> ConversionResult:
        started = time.perf_counter()
        result = ConversionResult()
        detail_level = logging.INFO if options.verbose else logging.DEBUG

        self._writer.reset()
        self.prepare()

        output_dir = Path(options.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        filters = options.filters
        limit = filters.limit if filters is not None else None
        total = self._format.get_entry_count(filters)
        logger.info("Converting %s entries from %s (%s)", total, self._docset_name, self.get_format_name())

        search_writer: SearchIndexWriter | None = None
        if options.generate_index:
            search_writer = SearchIndexWriter(output_dir / SEARCH_DB_NAME, options.search_batch_size)

        try:
            for entry in self._format.iter_entries(filters):
                if limit and result.processed >= limit:
                    break
                result.processed += 1
                if on_progress is not None:
                    on_progress(result.processed, total, entry)

                content = await self._format.extract_content(entry)
                if content is None:
                    result.skipped += 1
                    logger.log(detail_level, "No content found for: %s", entry.name)
                    continue

                markdown = self._generator.generate(content)
                file_path = self.get_output_path(entry, content, output_dir)
                try:
                    self._writer.write(file_path, markdown)
                except OSError as exc:
                    result.failed += 1
                    logger.log(detail_level, "Error writing %s: %s", file_path, exc)
                    continue

                self.track_for_index(entry, content, file_path, output_dir)
                if search_writer is not None:
                    search_writer.add_entry(self._search_entry(entry, content, file_path, output_dir))
                result.successful += 1

            logger.info("Generating index files")
            self.generate_indexes(output_dir, self._generator)
        finally:
            if search_writer is not None:
                search_writer.close()

        if search_writer is not None:
            result.index_entries = search_writer.entry_count()
            try:
                result.search_binary_built = await build_search_binary(
                    output_dir,
                    self.search_variant,
                    options.build_timeout_seconds,
                )
            except SearchToolchainUnavailableError as exc:
                logger.warning("%s; search binary not built.\n%s", exc, exc.remediation)
                result.search_binary_built = False
                result.search_binary_remediation = exc.remediation

        result.write_stats = self._writer.stats()
        result.elapsed_ms = int((time.perf_counter() - started) * 1000)
        return result

    def _search_entry(
        self,
        entry: NormalizedEntry,
        content: ParsedContent,
        file_path: Path,
        output_dir: Path,
    ) -> SearchEntry:
        return SearchEntry(
            name=entry.name,
            type=entry.type,
            language=entry.language,
            framework=content.framework or entry.framework,
            path=file_path.relative_to(output_dir).as_posix(),
            abstract=content.abstract,
            declaration=content.declaration,
            deprecated=content.deprecated,
            beta=content.beta,
        )

    def write_file(self, file_path: Path, content: str) -> None:
        self._writer.write(file_path, content)

    def close(self) -> None:
        self._format.close()

    def reset_index_tracking(self) -> None:
        raise NotImplementedError

    def get_output_path(self, entry: NormalizedEntry, content: ParsedContent, output_dir: Path) -> Path:
        """Return the markdown path for `entry`; a pure function of its inputs."""

        raise NotImplementedError

    def track_for_index(
        self,
        entry: NormalizedEntry,
        content: ParsedContent,
        file_path: Path,
        output_dir: Path,
    ) -> None:
        raise NotImplementedError

    def generate_indexes(self, output_dir: Path, generator: MarkdownGenerator) -> None:
        raise NotImplementedError
