"""CLI entrypoint for querying a generated ``search.db``."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

from docset2md.search.reader import DEFAULT_LIMIT, SearchIndexReader, SearchResult


_ABSTRACT_PREVIEW = 100


def _default_db_path() -> Path:
    # A frozen binary looks for search.db next to itself.
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent / "search.db"
    return Path("search.db")


def _truncate(value: str, width: int) -> str:
    if len(value) <= width:
        return value.ljust(width)
    return value[: width - 3] + "..."


def format_simple(results: list[SearchResult]) -> str:
    if not results:
        return "No results found."

    blocks: list[str] = []
    for result in results:
        entry = result.entry
        markers = [label for label, flag in (("Deprecated", entry.deprecated), ("Beta", entry.beta)) if flag]
        status = f" *{', '.join(markers)}*" if markers else ""
        framework = f" ({entry.framework})" if entry.framework else ""
        lines = [f"[{entry.type}] {entry.name}{framework}{status}", f"  Path: {entry.path}"]
        if entry.abstract:
            abstract = entry.abstract
            if len(abstract) > _ABSTRACT_PREVIEW:
                abstract = abstract[:_ABSTRACT_PREVIEW] + "..."
            lines.append(f"  {abstract}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def format_table(results: list[SearchResult]) -> str:
    if not results:
        return "No results found."

    entries = [result.entry for result in results]
    name_width = min(30, max(4, *(len(entry.name) for entry in entries)))
    type_width = max(4, *(len(entry.type) for entry in entries))
    framework_width = max(9, *(len(entry.framework or "") for entry in entries))
    path_width = min(50, max(4, *(len(entry.path) for entry in entries)))

    header = " | ".join(
        [
            "Name".ljust(name_width),
            "Type".ljust(type_width),
            "Framework".ljust(framework_width),
            "Path".ljust(path_width),
        ]
    )
    separator = "-+-".join("-" * width for width in (name_width, type_width, framework_width, path_width))
    rows = [
        " | ".join(
            [
                _truncate(entry.name, name_width),
                entry.type.ljust(type_width),
                (entry.framework or "").ljust(framework_width),
                _truncate(entry.path, path_width),
            ]
        )
        for entry in entries
    ]
    return "\n".join([header, separator, *rows])


def format_json(results: list[SearchResult], query: str) -> str:
    payload = {
        "query": query,
        "total": len(results),
        "results": [result.to_dict() for result in results],
    }
    return json.dumps(payload, ensure_ascii=True, indent=2)


def format_counts(items: list[tuple[str, int]], title: str) -> str:
    if not items:
        return f"No {title.lower()} found."
    lines = [f"{title} ({len(items)}):"]
    lines.extend(f"  {name}: {count:,}" for name, count in items)
    return "\n".join(lines)


def main(argv: list[str] | None = None, *, variant: str = "docc") -> int:
    supports_language = variant == "docc"
    parser = argparse.ArgumentParser(prog="search", description="Search converted documentation")
    parser.add_argument("query", nargs="?", help="Search query (prefix*, \"exact phrase\", AND/OR/NOT)")
    parser.add_argument("--db", default=None, help="Path to search.db")
    parser.add_argument("--type", help="Filter by entry type")
    parser.add_argument("--framework", help="Filter by framework")
    parser.add_argument("--limit", type=int, default=DEFAULT_LIMIT, help="Maximum number of results")
    parser.add_argument("--format", choices=("simple", "table", "json"), default="simple", help="Output format")
    parser.add_argument("--list-types", action="store_true", help="List entry types with counts")
    parser.add_argument("--list-frameworks", action="store_true", help="List frameworks with counts")
    if supports_language:
        parser.add_argument("--language", choices=("swift", "objc"), help="Filter by language")
        parser.add_argument("--list-languages", action="store_true", help="List languages with counts")
    args = parser.parse_args(argv)

    db_path = Path(args.db) if args.db else _default_db_path()
    if not db_path.is_file():
        print(f"Error: search database not found at {db_path}", file=sys.stderr)
        return 1

    with SearchIndexReader(db_path) as reader:
        if args.list_types:
            print(format_counts(reader.get_types(), "Types"))
            return 0
        if args.list_frameworks:
            print(format_counts(reader.get_frameworks(), "Frameworks"))
            return 0
        if supports_language and args.list_languages:
            print(format_counts(reader.get_languages(), "Languages"))
            return 0

        if not args.query:
            parser.print_usage(sys.stderr)
            print("Error: a search query is required", file=sys.stderr)
            return 2

        results = reader.search(
            args.query,
            type=args.type,
            framework=args.framework,
            language=getattr(args, "language", None),
            limit=args.limit,
        )

    if args.format == "json":
        print(format_json(results, args.query))
    elif args.format == "table":
        print(format_table(results))
    else:
        print(format_simple(results))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
