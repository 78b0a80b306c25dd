from __future__ import annotations

import json
from pathlib import Path

import pytest

from docset2md.cli.search import format_counts, format_simple, format_table, main
from docset2md.search.reader import SearchResult
from docset2md.search.writer import SearchEntry, SearchIndexWriter


@pytest.fixture
def search_db(tmp_path: Path) -> Path:
    db_path = tmp_path / "search.db"
    with SearchIndexWriter(db_path) as writer:
        writer.add_entry(
            SearchEntry(
                name="array_map",
                type="Function",
                path="function/array_map.md",
                abstract="Applies the callback to the elements of the given arrays.",
            )
        )
        writer.add_entry(SearchEntry(name="DateTime", type="Class", path="class/datetime.md", deprecated=True))
    return db_path


def test_json_output(search_db: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["array_map", "--db", str(search_db), "--format", "json"], variant="standard")

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["query"] == "array_map"
    assert payload["total"] == 1
    assert payload["results"][0]["path"] == "function/array_map.md"
    assert "score" in payload["results"][0]


def test_simple_output_and_no_results(search_db: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["DateTime", "--db", str(search_db)], variant="standard") == 0
    out = capsys.readouterr().out
    assert "[Class] DateTime *Deprecated*" in out
    assert "  Path: class/datetime.md" in out

    assert main(["nothing", "--db", str(search_db)], variant="standard") == 0
    assert capsys.readouterr().out.strip() == "No results found."


def test_list_types(search_db: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--db", str(search_db), "--list-types"], variant="standard") == 0

    assert capsys.readouterr().out.strip() == "Types (2):\n  Class: 1\n  Function: 1"


def test_language_options_only_for_docc(search_db: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--db", str(search_db), "--list-languages"], variant="docc") == 0
    assert capsys.readouterr().out.strip() == "No languages found."

    with pytest.raises(SystemExit):
        main(["--db", str(search_db), "--list-languages"], variant="standard")


def test_missing_db_and_missing_query(tmp_path: Path, search_db: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["UIView", "--db", str(tmp_path / "nope.db")]) == 1
    assert "search database not found" in capsys.readouterr().err

    assert main(["--db", str(search_db)]) == 2
    assert "a search query is required" in capsys.readouterr().err


def test_formatters() -> None:
    results = [
        SearchResult(
            entry=SearchEntry(name="UIView", type="Class", path="swift/uikit/uiview.md", framework="UIKit", abstract="x" * 120),
            score=1.5,
        )
    ]

    simple = format_simple(results)
    table = format_table(results)

    assert simple.splitlines()[0] == "[Class] UIView (UIKit)"
    assert simple.endswith("x" * 100 + "...")
    assert table.splitlines()[0].startswith("Name   | Type  | Framework | Path")
    assert format_table([]) == "No results found."
    assert format_counts([("UIKit", 1200)], "Frameworks") == "Frameworks (1):\n  UIKit: 1,200"
