"""Render `ParsedContent` and index pages as markdown."""

from __future__ import annotations

from collections.abc import Sequence

from docset2md.models import ContentItem, Parameter, ParsedContent, Platform


_ROLE_NAMES = {
    "collection": "Framework",
    "collectionGroup": "Collection",
    "symbol": "Symbol",
    "article": "Article",
    "sampleCode": "Sample Code",
    "dictionarySymbol": "Dictionary",
    "restRequestSymbol": "REST Request",
}
_DECLARATION_FENCES = {"swift": "swift", "objc": "objectivec"}


def format_role(role: str) -> str:
    return _ROLE_NAMES.get(role, role)


def format_platforms(platforms: Sequence[Platform]) -> str:
    labels: list[str] = []
    for platform in platforms:
        label = platform.name
        if platform.version:
            label += f" {platform.version}+"
        if platform.deprecated:
            label += " (deprecated)"
        if platform.beta:
            label += " (beta)"
        labels.append(label)
    return ", ".join(labels)


def render_items(items: Sequence[ContentItem]) -> str:
    lines: list[str] = []
    for item in items:
        line = f"- [{item.title}]({item.url})" if item.url else f"- {item.title}"

        markers = [
            marker
            for marker, flag in (("Required", item.required), ("Deprecated", item.deprecated), ("Beta", item.beta))
            if flag
        ]
        if markers:
            line += f" *({', '.join(markers)})*"
        if item.abstract:
            line += f": {item.abstract}"
        lines.append(line)
    return "\n".join(lines)


def _render_parameters(parameters: Sequence[Parameter]) -> str:
    lines: list[str] = []
    for parameter in parameters:
        # Continuation lines stay inside the list item.
        description = "\n  ".join(parameter.description.split("\n"))
        lines.append(f"- **{parameter.name}**: {description}")
    return "\n".join(lines)


class MarkdownGenerator:
    """Produce one markdown page per entry plus directory index pages.

    Sections appear in a fixed order and are separated by a blank line:
    title, metadata, breadcrumb, abstract, declaration, overview,
    parameters, return value, topics, relationships, see also. Empty
    sections are omitted.
    """

    def generate(self, content: ParsedContent) -> str:
        sections: list[str] = [f"# {content.title}"]

        meta_lines: list[str] = []
        if content.framework:
            meta_lines.append(f"**Framework**: {content.framework}")
        if content.type and content.type != "unknown":
            meta_lines.append(f"**Type**: {format_role(content.type)}")
        if content.platforms:
            meta_lines.append(f"**Platforms**: {format_platforms(content.platforms)}")
        if content.deprecated:
            meta_lines.append("**Status**: Deprecated")
        elif content.beta:
            meta_lines.append("**Status**: Beta")
        if meta_lines:
            sections.append("  \n".join(meta_lines))

        if len(content.hierarchy) > 1:
            sections.append("> " + " > ".join(content.hierarchy))

        if content.abstract:
            sections.append(content.abstract)

        if content.declaration:
            fence = _DECLARATION_FENCES.get(content.language or "", "")
            sections.append("## Declaration")
            sections.append(f"```{fence}\n{content.declaration}\n```")

        if content.description:
            sections.append("## Overview")
            sections.append(content.description)

        if content.parameters:
            sections.append("## Parameters")
            sections.append(_render_parameters(content.parameters))

        if content.return_value:
            sections.append("## Return Value")
            sections.append(content.return_value)

        topics = [group for group in content.topics if group.items]
        if topics:
            sections.append("## Topics")
            for group in topics:
                sections.append(f"### {group.title}")
                sections.append(render_items(group.items))

        relationships = [relationship for relationship in content.relationships if relationship.items]
        if relationships:
            sections.append("## Relationships")
            for relationship in relationships:
                sections.append(f"### {relationship.title}")
                sections.append(render_items(relationship.items))

        if content.see_also:
            sections.append("## See Also")
            sections.append(render_items(content.see_also))

        return "\n\n".join(sections)

    def generate_index(
        self,
        title: str,
        description: str | None = None,
        items: Sequence[ContentItem] | None = None,
    ) -> str:
        sections: list[str] = [f"# {title}"]
        if description:
            sections.append(description)
        if items:
            sections.append("## Contents")
            sections.append(render_items(items))
        return "\n\n".join(sections)
