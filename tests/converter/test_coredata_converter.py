from __future__ import annotations

from pathlib import Path

import pytest

from docset2md.converter.base import ConverterOptions
from docset2md.converter.coredata import CoreDataConverter
from docset2md.models import NormalizedEntry, ParsedContent


class _CoreDataFormat:
    name = "CoreData"

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.link_map: dict | None = {"stale.html": "class/stale.md"}
        self.builds = 0

    def build_link_mapping(self) -> dict:
        self.builds += 1
        self.calls.append("build")
        return {"nsstring.html": f"class/nsstring.md#{self.builds}"}

    def set_link_mapping(self, link_map: dict | None) -> None:
        self.calls.append("clear" if link_map is None else "install")
        self.link_map = link_map

    def get_entry_count(self, filters=None) -> int:
        return 1

    def iter_entries(self, filters=None):
        yield NormalizedEntry(id=1, name="NSString", type="Class", path="nsstring.html")

    async def extract_content(self, entry: NormalizedEntry) -> ParsedContent | None:
        self.calls.append("extract")
        return ParsedContent(title=entry.name, type=entry.type)

    def close(self) -> None:
        pass


@pytest.mark.asyncio
async def test_link_map_is_rebuilt_before_extraction(tmp_path: Path) -> None:
    docset_format = _CoreDataFormat()
    converter = CoreDataConverter(docset_format, "Foundation")

    await converter.convert(ConverterOptions(output_dir=tmp_path / "a"))
    await converter.convert(ConverterOptions(output_dir=tmp_path / "b"))

    assert docset_format.calls == ["clear", "build", "install", "extract"] * 2
    assert docset_format.link_map == {"nsstring.html": "class/nsstring.md#2"}
    assert (tmp_path / "b" / "class" / "nsstring.md").is_file()
    assert (tmp_path / "b" / "class" / "_index.md").is_file()
