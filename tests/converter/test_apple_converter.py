from __future__ import annotations

from pathlib import Path

import pytest

from docset2md.converter.apple import AppleDocCConverter, language_dir
from docset2md.converter.base import ConverterOptions
from docset2md.models import NormalizedEntry, ParsedContent


def _entry(name: str, entry_type: str, path: str, language: str = "swift") -> NormalizedEntry:
    return NormalizedEntry(id=name, name=name, type=entry_type, path=path, language=language, framework="UIKit")


class _AppleFormat:
    name = "Apple DocC"

    def __init__(self, entries: list[NormalizedEntry]) -> None:
        self._entries = entries

    def get_entry_count(self, filters=None) -> int:
        return len(self._entries)

    def iter_entries(self, filters=None):
        yield from self._entries

    async def extract_content(self, entry: NormalizedEntry) -> ParsedContent | None:
        return ParsedContent(
            title=entry.name,
            type=entry.type,
            language=entry.language,
            framework="UIKit",
            abstract=f"{entry.name} abstract.",
        )

    def close(self) -> None:
        pass


ENTRIES = [
    _entry("UIKit", "Framework", "dash-apple-api://load?request_key=ls/documentation/uikit"),
    _entry("UIView", "Class", "dash-apple-api://load?request_key=ls/documentation/uikit/uiview"),
    _entry("frame", "Property", "dash-apple-api://load?request_key=ls/documentation/uikit/uiview/frame"),
    _entry("UIView", "Class", "dash-apple-api://load?request_key=lc/documentation/uikit/uiview", "objc"),
    _entry("UIView", "Class", "dash-apple-api://load?request_key=ls/documentation/uikit/uiview"),
]


def test_language_dir() -> None:
    assert language_dir("swift") == "swift"
    assert language_dir("objc") == "objective-c"
    assert language_dir(None) == "swift"
    assert language_dir("javascript") == "objective-c"


def test_output_paths_follow_documentation_path() -> None:
    converter = AppleDocCConverter(_AppleFormat([]))
    content = ParsedContent(title="x", type="Class", framework="UIKit")

    paths = [converter.get_output_path(entry, content, Path("/out")) for entry in ENTRIES[:4]]

    assert paths == [
        Path("/out/swift/uikit/_index.md"),
        Path("/out/swift/uikit/uiview.md"),
        Path("/out/swift/uikit/uiview/frame.md"),
        Path("/out/objective-c/uikit/uiview.md"),
    ]


def test_output_path_without_documentation_path_uses_framework() -> None:
    converter = AppleDocCConverter(_AppleFormat([]))
    entry = NormalizedEntry(id=1, name="Legacy Guide", type="Guide", path="legacy/guide.html", language="swift")

    path = converter.get_output_path(entry, ParsedContent(title="x", type="Guide", framework="UIKit"), Path("/out"))

    assert path == Path("/out/swift/uikit/legacy_guide.md")


@pytest.mark.asyncio
async def test_indexes_list_top_level_types_once(tmp_path: Path) -> None:
    converter = AppleDocCConverter(_AppleFormat(ENTRIES))

    result = await converter.convert(ConverterOptions(output_dir=tmp_path))

    assert result.successful == 5
    swift_framework_index = (tmp_path / "swift" / "uikit" / "_index.md").read_text(encoding="utf-8")
    assert swift_framework_index == (
        "# uikit\n\nDocumentation for the uikit framework.\n\n## Contents\n\n"
        "- [UIView](./uiview.md): UIView abstract."
    )
    assert (tmp_path / "objective-c" / "uikit" / "_index.md").is_file()

    swift_root = (tmp_path / "swift" / "_index.md").read_text(encoding="utf-8")
    assert swift_root == (
        "# Swift Documentation\n\nAPI documentation in Swift.\n\n## Contents\n\n"
        "- [uikit](./uikit/_index.md)"
    )
    objc_root = (tmp_path / "objective-c" / "_index.md").read_text(encoding="utf-8")
    assert objc_root.startswith("# Objective-C Documentation")


def test_dot_segments_stay_inside_output_dir(tmp_path: Path) -> None:
    converter = AppleDocCConverter(_AppleFormat([]))
    entry = _entry("escaped", "Class", "dash-apple-api://load?request_key=ls/documentation/uikit/../../../escaped")
    output_dir = tmp_path / "out"

    path = converter.get_output_path(entry, ParsedContent(title="x", type="Class"), output_dir)

    assert path == output_dir / "swift" / "uikit" / "escaped.md"
    assert path.resolve().is_relative_to(output_dir.resolve())


@pytest.mark.asyncio
async def test_convert_writes_dot_segment_paths_below_output_dir(tmp_path: Path) -> None:
    entry = _entry("escaped", "Class", "dash-apple-api://load?request_key=ls/documentation/uikit/../../escaped")
    output_dir = tmp_path / "out"

    result = await AppleDocCConverter(_AppleFormat([entry])).convert(ConverterOptions(output_dir=output_dir))

    assert result.successful == 1
    assert (output_dir / "swift" / "uikit" / "escaped.md").is_file()
    assert not (tmp_path / "escaped.md").exists()


@pytest.mark.asyncio
async def test_entries_without_language_are_written_and_indexed_as_swift(tmp_path: Path) -> None:
    entry = NormalizedEntry(
        id=1,
        name="UIView",
        type="Class",
        path="dash-apple-api://load?request_key=ls/documentation/uikit/uiview",
        language=None,
        framework="UIKit",
    )

    await AppleDocCConverter(_AppleFormat([entry])).convert(ConverterOptions(output_dir=tmp_path))

    assert (tmp_path / "swift" / "uikit" / "uiview.md").is_file()
    assert "- [UIView](./uiview.md)" in (tmp_path / "swift" / "uikit" / "_index.md").read_text(encoding="utf-8")
    assert not (tmp_path / "objective-c").exists()
