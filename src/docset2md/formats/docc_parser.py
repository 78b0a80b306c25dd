"""Apple DocC render JSON to structured content."""

from __future__ import annotations

import posixpath
import re
from typing import Any

from docset2md.models import ContentItem, Parameter, ParsedContent, Platform, Relationship, TopicGroup
from docset2md.sanitize import sanitize


_DOC_URL_RE = re.compile(r"^(?:doc://[^/]+)?/documentation/(.+)$")
_FRAMEWORK_RE = re.compile(r"documentation/([^/]+)")
_DECLARATION_LANGUAGES = {"swift": "swift", "objc": "occ"}
_ASIDE_TITLES = {
    "note": "Note",
    "warning": "Warning",
    "important": "Important",
    "tip": "Tip",
    "experiment": "Experiment",
}

Document = dict[str, Any]
References = dict[str, Any]


def _doc_parts(url: str | None) -> list[str] | None:
    if not url:
        return None
    match = _DOC_URL_RE.match(url)
    if not match:
        return None
    return doc_segments(match.group(1).split("/")) or None


def doc_segments(parts: list[str]) -> list[str]:
    """Sanitize documentation path segments, dropping empty and dot-only ones."""

    segments = [sanitize(part) for part in parts if part]
    return [segment for segment in segments if segment.strip(".")]


def doc_output_path(parts: list[str]) -> str:
    """Relative markdown path of a documentation page below its language root."""

    segments = doc_segments(parts)
    if len(segments) == 1:
        return f"{segments[0]}/_index.md"
    return "/".join(segments[:-1] + [f"{segments[-1]}.md"])


def relative_doc_link(current_parts: list[str] | None, target_url: str) -> str:
    target_parts = _doc_parts(target_url)
    if target_parts is None:
        return target_url
    target = doc_output_path(target_parts)
    if current_parts is None:
        return f"./{target}"
    start = posixpath.dirname(doc_output_path(current_parts))
    relative = posixpath.relpath(target, start or ".")
    return relative if relative.startswith("../") else f"./{relative}"


class DocCParser:
    """Render a DocC document into `ParsedContent` for one source language.

    Links to other documentation pages are written relative to the output
    file of the document being parsed, using the same layout as the Apple
    converter (``framework/_index.md`` for framework roots, sanitized leaf
    names below).
    """

    def __init__(self) -> None:
        self._current_parts: list[str] | None = None
        self._references: References = {}

    def parse(self, doc: Document, language: str) -> ParsedContent:
        metadata = doc.get("metadata") or {}
        identifier = doc.get("identifier") or {}
        self._current_parts = _doc_parts(identifier.get("url"))
        self._references = doc.get("references") or {}
        sections = doc.get("primaryContentSections") or []

        raw_platforms = metadata.get("platforms") or []
        platforms = [
            Platform(
                name=str(platform.get("name", "")),
                version=platform.get("introducedAt"),
                deprecated=bool(platform.get("deprecated")),
                beta=bool(platform.get("beta")),
            )
            for platform in raw_platforms
        ]

        see_also = [item for group in self._topic_groups(doc.get("seeAlsoSections")) for item in group.items]

        return ParsedContent(
            title=metadata.get("title") or "Untitled",
            type=metadata.get("role") or "unknown",
            language=language,
            framework=self._framework(doc),
            abstract=self._inline(doc.get("abstract")) or None,
            declaration=self._declaration(sections, language),
            description=self._overview(sections),
            parameters=self._parameters(sections),
            return_value=self._return_value(sections),
            topics=self._topic_groups(doc.get("topicSections")),
            see_also=see_also,
            relationships=self._relationships(doc.get("relationshipsSections")),
            hierarchy=self._hierarchy(doc),
            deprecated=any(platform.deprecated for platform in platforms),
            beta=any(platform.beta for platform in platforms),
            platforms=platforms,
        )

    def _framework(self, doc: Document) -> str | None:
        modules = (doc.get("metadata") or {}).get("modules") or []
        if modules and modules[0].get("name"):
            return str(modules[0]["name"])
        url = (doc.get("identifier") or {}).get("url") or ""
        match = _FRAMEWORK_RE.search(url)
        return match.group(1) if match else None

    def _declaration(self, sections: list[dict[str, Any]], language: str) -> str | None:
        wanted = _DECLARATION_LANGUAGES.get(language)
        for section in sections:
            declarations = section.get("declarations") or []
            if section.get("kind") != "declarations" or not declarations:
                continue
            for declaration in declarations:
                languages = declaration.get("languages")
                if wanted and languages and wanted not in languages:
                    continue
                return self._tokens(declaration)
            return self._tokens(declarations[0])
        return None

    @staticmethod
    def _tokens(declaration: dict[str, Any]) -> str:
        return "".join(str(token.get("text", "")) for token in declaration.get("tokens") or [])

    def _overview(self, sections: list[dict[str, Any]]) -> str | None:
        parts = [
            self._blocks(section["content"])
            for section in sections
            if section.get("kind") == "content" and section.get("content")
        ]
        return "\n\n".join(part for part in parts if part) or None

    def _parameters(self, sections: list[dict[str, Any]]) -> list[Parameter]:
        for section in sections:
            if section.get("kind") == "parameters" and section.get("parameters"):
                return [
                    Parameter(name=str(parameter.get("name", "")), description=self._blocks(parameter.get("content")))
                    for parameter in section["parameters"]
                ]
        return []

    def _return_value(self, sections: list[dict[str, Any]]) -> str | None:
        for section in sections:
            if section.get("kind") != "content":
                continue
            blocks = section.get("content") or []
            for index, block in enumerate(blocks):
                if block.get("type") != "heading" or "return" not in str(block.get("text", "")).lower():
                    continue
                following: list[dict[str, Any]] = []
                for candidate in blocks[index + 1 :]:
                    if candidate.get("type") == "heading":
                        break
                    following.append(candidate)
                if following:
                    return self._blocks(following)
        return None

    def _topic_groups(self, sections: list[dict[str, Any]] | None) -> list[TopicGroup]:
        groups: list[TopicGroup] = []
        for section in sections or []:
            items = self._items(section.get("identifiers"))
            if items:
                groups.append(TopicGroup(title=section.get("title") or "Topics", items=items))
        return groups

    def _relationships(self, sections: list[dict[str, Any]] | None) -> list[Relationship]:
        relationships: list[Relationship] = []
        for section in sections or []:
            if not section.get("identifiers"):
                continue
            relationships.append(
                Relationship(
                    kind=str(section.get("kind", "")),
                    title=str(section.get("title", "")),
                    items=self._items(section.get("identifiers")),
                )
            )
        return relationships

    def _items(self, identifiers: list[str] | None) -> list[ContentItem]:
        items: list[ContentItem] = []
        for identifier in identifiers or []:
            reference = self._references.get(identifier)
            if reference is None:
                continue
            url = reference.get("url")
            items.append(
                ContentItem(
                    title=reference.get("title") or identifier,
                    url=relative_doc_link(self._current_parts, url) if url else None,
                    abstract=self._inline(reference.get("abstract")) or None,
                    required=bool(reference.get("required")),
                    deprecated=bool(reference.get("deprecated")),
                    beta=bool(reference.get("beta")),
                )
            )
        return items

    def _hierarchy(self, doc: Document) -> list[str]:
        paths = (doc.get("hierarchy") or {}).get("paths") or []
        if not paths:
            return []
        return [(self._references.get(identifier) or {}).get("title") or identifier for identifier in paths[0]]

    def _blocks(self, blocks: list[dict[str, Any]] | None) -> str:
        rendered = (self._block(block) for block in blocks or [])
        return "\n\n".join(text for text in rendered if text)

    def _block(self, block: dict[str, Any]) -> str:
        kind = block.get("type")
        if kind == "heading":
            level = min(int(block.get("level", 1)) + 1, 6)
            return f"{'#' * level} {block.get('text', '')}"
        if kind == "paragraph":
            return self._inline(block.get("inlineContent"))
        if kind == "codeListing":
            code = "\n".join(block.get("code") or [])
            return f"```{block.get('syntax') or ''}\n{code}\n```"
        if kind == "aside":
            title = block.get("name") or _ASIDE_TITLES.get(str(block.get("style", "")), "Note")
            return f"> **{title}**: {self._blocks(block.get('content'))}"
        if kind == "unorderedList":
            return "\n".join(
                "- " + self._blocks(item.get("content")).replace("\n", "\n  ")
                for item in block.get("items") or []
            )
        if kind == "orderedList":
            start = int(block.get("start", 1))
            return "\n".join(
                f"{start + offset}. " + self._blocks(item.get("content")).replace("\n", "\n   ")
                for offset, item in enumerate(block.get("items") or [])
            )
        if kind == "table":
            return self._table(block)
        if kind == "termList":
            return "\n\n".join(
                f"**{self._inline_one(item.get('term'))}**: {self._inline_one(item.get('definition'))}"
                for item in block.get("items") or []
            )
        return ""

    def _table(self, block: dict[str, Any]) -> str:
        rows = block.get("rows") or []
        if not rows:
            return ""
        lines = [
            "| "
            + " | ".join(self._blocks(cell.get("content")).replace("|", "\\|") for cell in row.get("cells") or [])
            + " |"
            for row in rows
        ]
        columns = len(rows[0].get("cells") or []) or 1
        separator = "| " + " | ".join(["---"] * columns) + " |"
        return "\n".join([lines[0], separator, *lines[1:]])

    def _inline(self, content: list[dict[str, Any]] | None) -> str:
        return "".join(self._inline_one(item) for item in content or [])

    def _inline_one(self, item: dict[str, Any] | None) -> str:
        if not item:
            return ""
        kind = item.get("type")
        if kind == "text":
            return str(item.get("text", ""))
        if kind == "codeVoice":
            return f"`{item.get('code', '')}`"
        if kind == "reference":
            return self._reference(item)
        if kind in ("emphasis", "newTerm"):
            return f"*{self._inline(item.get('inlineContent'))}*"
        if kind in ("strong", "inlineHead"):
            return f"**{self._inline(item.get('inlineContent'))}**"
        if kind in ("subscript", "superscript"):
            return self._inline(item.get("inlineContent"))
        if kind == "strikethrough":
            return f"~~{self._inline(item.get('inlineContent'))}~~"
        if kind == "image":
            return self._image(str(item.get("identifier", "")))
        return ""

    def _reference(self, item: dict[str, Any]) -> str:
        identifier = str(item.get("identifier", ""))
        reference = self._references.get(identifier) or {}
        title = item.get("overridingTitle") or reference.get("title") or identifier
        url = reference.get("url")
        if url and item.get("isActive") is not False:
            return f"[{title}]({relative_doc_link(self._current_parts, url)})"
        return title

    def _image(self, identifier: str) -> str:
        reference = self._references.get(identifier) or {}
        variants = reference.get("variants") or []
        if reference.get("type") == "image" and variants:
            return f"![{reference.get('alt') or 'Image'}]({variants[0].get('url', '')})"
        return ""
