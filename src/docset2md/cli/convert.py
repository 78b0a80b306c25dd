"""CLI entrypoint for converting docsets to markdown."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
import sys
import time

from dotenv import load_dotenv

from docset2md.config import Settings
from docset2md.converter.base import ConverterOptions, SEARCH_DB_NAME
from docset2md.converter.registry import create_converter
from docset2md.exceptions import UnsupportedDocsetError
from docset2md.formats.base import DocsetFormat, docset_name
from docset2md.formats.detector import FormatDetector, build_default_formats
from docset2md.models import EntryFilters, NormalizedEntry
from docset2md.search.builder import BINARY_NAME
from docset2md.validation import ValidationResult, validate_links


load_dotenv()

LOGGER = logging.getLogger(__name__)

_LANGUAGE_CHOICES = {"swift": ("swift",), "objc": ("objc",), "both": ("swift", "objc")}


def _build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docset2md",
        description="Convert Dash docsets (Apple DocC, Standard Dash, CoreData) to markdown",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Convert a docset to markdown")
    convert.add_argument("docset", help="Path to the .docset directory")
    convert.add_argument("-o", "--output", default=str(settings.output_dir), help="Output directory")
    convert.add_argument(
        "-l",
        "--language",
        choices=sorted(_LANGUAGE_CHOICES),
        default="both",
        help="Language to export (Apple docsets only)",
    )
    convert.add_argument("-f", "--framework", nargs="+", help="Filter by framework name(s)")
    convert.add_argument("-t", "--type", nargs="+", help="Filter by entry type(s)")
    convert.add_argument("--limit", type=int, help="Limit number of entries to process")
    convert.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    convert.add_argument("--index", action="store_true", help="Generate searchable index (search.db)")
    convert.add_argument("--validate", action="store_true", help="Validate internal links after conversion")

    for name, help_text in (
        ("list-types", "List entry types with counts"),
        ("list-frameworks", "List frameworks or categories"),
        ("info", "Show docset information"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("docset", help="Path to the .docset directory")

    return parser


async def _open_docset(path: Path, settings: Settings) -> DocsetFormat | None:
    if not path.exists():
        print(f"Error: Docset not found at {path}", file=sys.stderr)
        return None

    detector = FormatDetector(build_default_formats(tarix_cache_size=settings.tarix_cache_size))
    try:
        return await detector.require_format(path)
    except UnsupportedDocsetError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        print(f"Supported formats: {', '.join(detector.get_format_names())}", file=sys.stderr)
        return None


def _build_filters(args: argparse.Namespace, docset_format: DocsetFormat) -> EntryFilters:
    languages = _LANGUAGE_CHOICES[args.language] if docset_format.supports_multiple_languages() else None
    return EntryFilters(
        types=tuple(args.type) if args.type else None,
        frameworks=tuple(args.framework) if args.framework else None,
        languages=languages,
        limit=args.limit if args.limit and args.limit > 0 else None,
    )


def _print_validation(result: ValidationResult) -> None:
    print("\n=== Link Validation Results ===\n")
    print(f"Total links checked: {result.total_links:,}")
    print(f"Valid links: {result.valid_links:,}")
    print(f"Broken links: {len(result.broken_links):,}")
    print(f"Absolute links: {len(result.absolute_links):,}")
    for link in result.broken_links[:20]:
        print(f"  {link.source_file}: [{link.link_text}]({link.link_path}) -> {link.resolved_path}")
    if len(result.broken_links) > 20:
        print(f"  ... and {len(result.broken_links) - 20:,} more")


async def _convert(args: argparse.Namespace, settings: Settings) -> int:
    docset_path = Path(args.docset).resolve()
    docset_format = await _open_docset(docset_path, settings)
    if docset_format is None:
        return 1

    name = docset_name(docset_path)
    output_dir = Path(args.output).resolve()
    print(f"Detected format: {docset_format.name}")
    print(f"Converting docset: {name}")
    print(f"Output directory: {output_dir}")

    converter = create_converter(docset_format, name)
    try:
        filters = _build_filters(args, docset_format)
        print(f"Found {docset_format.get_entry_count(filters):,} entries to process")

        started = time.perf_counter()

        def on_progress(current: int, total: int, entry: NormalizedEntry) -> None:
            total = max(total, 1)
            percent = current * 100 // total
            if args.verbose:
                print(f"[{current}/{total}] ({percent}%) Processing: {entry.name}")
                return
            previous = (current - 1) * 100 // total
            if percent != previous or current % 100 == 0 or current == total:
                elapsed = time.perf_counter() - started
                rate = int(current / elapsed) if elapsed > 0 else 0
                print(f"\rProgress: {current:,}/{total:,} ({percent}%) - {rate}/sec    ", end="", flush=True)

        result = await converter.convert(
            ConverterOptions(
                output_dir=output_dir,
                verbose=args.verbose,
                filters=filters,
                generate_index=args.index,
                search_batch_size=settings.search_batch_size,
                build_timeout_seconds=settings.build_timeout_seconds,
            ),
            on_progress,
        )
    finally:
        converter.close()

    if not args.verbose:
        print()

    print("\n=== Conversion Complete ===")
    print(f"Format: {converter.get_format_name()}")
    print(f"Time: {result.elapsed_ms / 1000:.1f}s")
    print(f"Entries processed: {result.processed:,}")
    print(f"Successful: {result.successful:,}")
    print(f"Skipped (no content): {result.skipped:,}")
    print(f"Failed: {result.failed:,}")
    print(f"Files written: {result.write_stats.files_written:,}")
    print(f"Directories created: {result.write_stats.directories_created}")
    print(f"Total size: {result.write_stats.bytes_written / 1024 / 1024:.1f} MB")
    if result.index_entries is not None:
        print(f"Search index: {result.index_entries:,} entries ({SEARCH_DB_NAME})")
        if result.search_binary_built:
            print(f"Search binary: {output_dir / BINARY_NAME}")
        elif result.search_binary_remediation:
            print(f"\n{result.search_binary_remediation}", file=sys.stderr)

    if args.validate:
        _print_validation(validate_links(output_dir))
    return 0


async def _list_types(args: argparse.Namespace, settings: Settings) -> int:
    docset_format = await _open_docset(Path(args.docset).resolve(), settings)
    if docset_format is None:
        return 1
    try:
        print(f"Format: {docset_format.name}")
        print("Entry types in docset:")
        for entry_type in docset_format.get_types():
            count = docset_format.get_entry_count(EntryFilters(types=(entry_type,)))
            print(f"  {entry_type}: {count:,}")
    finally:
        docset_format.close()
    return 0


async def _list_frameworks(args: argparse.Namespace, settings: Settings) -> int:
    docset_format = await _open_docset(Path(args.docset).resolve(), settings)
    if docset_format is None:
        return 1
    try:
        print(f"Format: {docset_format.name}")
        categories = docset_format.get_categories()
        if not categories:
            print("No frameworks/categories in this docset.")
        else:
            print(f"Frameworks/Categories ({len(categories)}):")
            for category in categories:
                print(f"  {category}")
    finally:
        docset_format.close()
    return 0


async def _info(args: argparse.Namespace, settings: Settings) -> int:
    docset_path = Path(args.docset).resolve()
    docset_format = await _open_docset(docset_path, settings)
    if docset_format is None:
        return 1
    try:
        print(f"Docset: {docset_path.name}")
        print(f"Path: {docset_path}")
        print(f"Format: {docset_format.name}")
        print()
        print(f"Total entries: {docset_format.get_entry_count():,}")
        categories = docset_format.get_categories()
        if categories:
            print(f"Frameworks/Categories: {len(categories)}")
        if docset_format.supports_multiple_languages():
            print(f"Languages: {', '.join(docset_format.get_languages())}")
        print()
        print("Entry types:")
        for entry_type in docset_format.get_types():
            count = docset_format.get_entry_count(EntryFilters(types=(entry_type,)))
            print(f"  {entry_type}: {count:,}")
    finally:
        docset_format.close()
    return 0


_COMMANDS = {
    "convert": _convert,
    "list-types": _list_types,
    "list-frameworks": _list_frameworks,
    "info": _info,
}


def main(argv: list[str] | None = None) -> int:
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    args = _build_parser(settings).parse_args(argv)
    level = logging.DEBUG if getattr(args, "verbose", False) else settings.log_level_value
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    try:
        return asyncio.run(_COMMANDS[args.command](args, settings))
    except KeyboardInterrupt:
        LOGGER.info("Conversion interrupted")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
