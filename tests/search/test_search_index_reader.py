from __future__ import annotations

from pathlib import Path

import pytest

from docset2md.search.reader import SearchIndexReader, build_match_expression
from docset2md.search.writer import SearchEntry, SearchIndexWriter


@pytest.fixture
def search_db(tmp_path: Path) -> Path:
    db_path = tmp_path / "search.db"
    with SearchIndexWriter(db_path) as writer:
        writer.add_entry(
            SearchEntry(
                name="UIView",
                type="Class",
                path="swift/uikit/uiview.md",
                language="swift",
                framework="UIKit",
                abstract="An object that manages the content for a rectangular area on the screen.",
                declaration="class UIView",
            )
        )
        writer.add_entry(
            SearchEntry(
                name="UIViewController",
                type="Class",
                path="swift/uikit/uiviewcontroller.md",
                language="swift",
                framework="UIKit",
                abstract="An object that manages a view hierarchy.",
            )
        )
        writer.add_entry(
            SearchEntry(
                name="UIView",
                type="Class",
                path="objective-c/uikit/uiview.md",
                language="objc",
                framework="UIKit",
            )
        )
        writer.add_entry(
            SearchEntry(
                name="NSView",
                type="Class",
                path="swift/appkit/nsview.md",
                language="swift",
                framework="AppKit",
                deprecated=True,
            )
        )
        writer.add_entry(
            SearchEntry(name="frame", type="Property", path="swift/uikit/uiview/frame.md", language="swift", framework="UIKit")
        )
    return db_path


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("UIView", '"UIView"'),
        ("UIView*", '"UIView"*'),
        ('"rectangular area"', '"rectangular area"'),
        ("view NOT controller", '"view" NOT "controller"'),
        ("AND view OR", '"view"'),
        ("init(frame:)", '"init(frame:)"'),
        ('say "hi', '"say" """hi"'),
        ("   ", ""),
    ],
)
def test_build_match_expression(query: str, expected: str) -> None:
    assert build_match_expression(query) == expected


def test_exact_name_ranks_first(search_db: Path) -> None:
    with SearchIndexReader(search_db) as reader:
        results = reader.search("UIView", language="swift")

    assert results[0].entry.name == "UIView"
    assert results[0].entry.path == "swift/uikit/uiview.md"
    assert all(result.score >= 0 for result in results)


def test_prefix_and_filters(search_db: Path) -> None:
    with SearchIndexReader(search_db) as reader:
        prefixed = {result.entry.name for result in reader.search("UIView*", language="swift")}
        appkit = reader.search("NSView", framework="AppKit")
        properties = reader.search("frame", type="Property")
        limited = reader.search("UIView*", limit=1)

    assert prefixed == {"UIView", "UIViewController"}
    assert [result.entry.name for result in appkit] == ["NSView"]
    assert appkit[0].entry.deprecated is True
    assert [result.entry.path for result in properties] == ["swift/uikit/uiview/frame.md"]
    assert len(limited) == 1


def test_empty_query_returns_nothing(search_db: Path) -> None:
    with SearchIndexReader(search_db) as reader:
        assert reader.search("") == []
        assert reader.search("AND") == []


def test_counts_and_lookup(search_db: Path) -> None:
    with SearchIndexReader(search_db) as reader:
        assert reader.count() == 5
        assert reader.get_types() == [("Class", 4), ("Property", 1)]
        assert reader.get_frameworks() == [("UIKit", 4), ("AppKit", 1)]
        assert reader.get_languages() == [("swift", 4), ("objc", 1)]
        entry = reader.get_entry(1)
        assert entry is not None
        assert entry.to_dict()["declaration"] == "class UIView"
        assert reader.get_entry(999) is None
