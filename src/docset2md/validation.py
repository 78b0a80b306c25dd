"""Check that relative links between generated markdown pages resolve."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import re


logger = logging.getLogger(__name__)

_MD_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+\.md)\)")


@dataclass(frozen=True, slots=True)
class BrokenLink:
    source_file: str
    link_text: str
    link_path: str
    resolved_path: str


@dataclass(slots=True)
class ValidationResult:
    total_links: int = 0
    valid_links: int = 0
    broken_links: list[BrokenLink] = field(default_factory=list)
    absolute_links: list[tuple[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "total_links": self.total_links,
            "valid_links": self.valid_links,
            "broken_links": [
                {
                    "source_file": link.source_file,
                    "link_text": link.link_text,
                    "link_path": link.link_path,
                    "resolved_path": link.resolved_path,
                }
                for link in self.broken_links
            ],
            "absolute_links": [{"file": file, "link": link} for file, link in self.absolute_links],
        }


def validate_links(output_dir: str | Path) -> ValidationResult:
    """Scan every ``.md`` file below `output_dir` for links to other ``.md`` files.

    External ``http(s)`` links are ignored. Absolute paths are counted and
    reported separately since they do not survive moving the tree.
    """

    root = Path(output_dir).resolve()
    result = ValidationResult()
    if not root.is_dir():
        return result

    markdown_files = sorted(root.rglob("*.md"))
    existing = set(markdown_files)
    logger.info("Validating links in %s markdown files", len(markdown_files))

    for md_file in markdown_files:
        text = md_file.read_text(encoding="utf-8", errors="replace")
        source = md_file.relative_to(root).as_posix()
        for link_text, link_path in _MD_LINK_RE.findall(text):
            if link_path.startswith(("http://", "https://")):
                continue
            result.total_links += 1

            if link_path.startswith("/"):
                result.absolute_links.append((source, link_path))
                continue

            resolved = Path(os.path.normpath(md_file.parent / link_path))
            if resolved in existing:
                result.valid_links += 1
            else:
                result.broken_links.append(
                    BrokenLink(
                        source_file=source,
                        link_text=link_text,
                        link_path=link_path,
                        resolved_path=os.path.relpath(resolved, root),
                    )
                )

    return result
