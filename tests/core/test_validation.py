from __future__ import annotations

from pathlib import Path

from docset2md.validation import validate_links


def test_validate_links_classifies_links(tmp_path: Path) -> None:
    (tmp_path / "function").mkdir()
    (tmp_path / "class").mkdir()
    (tmp_path / "class" / "datetime.md").write_text("# DateTime", encoding="utf-8")
    (tmp_path / "function" / "array_map.md").write_text(
        "\n".join(
            [
                "- [DateTime](../class/datetime.md)",
                "- [Missing](./missing.md)",
                "- [Absolute](/tmp/elsewhere.md)",
                "- [Web](https://example.com/page.md)",
                "- [Not markdown](./image.png)",
            ]
        ),
        encoding="utf-8",
    )

    result = validate_links(tmp_path)

    assert result.total_links == 3
    assert result.valid_links == 1
    assert result.absolute_links == [("function/array_map.md", "/tmp/elsewhere.md")]
    assert len(result.broken_links) == 1
    broken = result.broken_links[0]
    assert broken.source_file == "function/array_map.md"
    assert broken.link_text == "Missing"
    assert broken.resolved_path == "function/missing.md"
    assert result.to_dict()["broken_links"][0]["link_path"] == "./missing.md"


def test_validate_missing_directory(tmp_path: Path) -> None:
    result = validate_links(tmp_path / "absent")

    assert (result.total_links, result.valid_links, result.broken_links) == (0, 0, [])
