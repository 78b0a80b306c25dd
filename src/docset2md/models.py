"""Format-independent records shared by format handlers and converters."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class NormalizedEntry:
    """One documentation item as enumerated from a docset index."""

    id: int | str
    name: str
    type: str
    path: str
    language: str | None = None
    framework: str | None = None


@dataclass(slots=True)
class Parameter:
    name: str
    description: str


@dataclass(slots=True)
class Platform:
    name: str
    version: str | None = None
    deprecated: bool = False
    beta: bool = False


@dataclass(slots=True)
class ContentItem:
    """Cross-reference rendered as a list item in topics and indexes."""

    title: str
    url: str | None = None
    abstract: str | None = None
    required: bool = False
    deprecated: bool = False
    beta: bool = False


@dataclass(slots=True)
class TopicGroup:
    title: str
    items: list[ContentItem] = field(default_factory=list)


@dataclass(slots=True)
class Relationship:
    kind: str
    title: str
    items: list[ContentItem] = field(default_factory=list)


@dataclass(slots=True)
class ParsedContent:
    """Extracted body of one entry, ready for markdown generation."""

    title: str
    type: str
    language: str | None = None
    framework: str | None = None
    abstract: str | None = None
    declaration: str | None = None
    description: str | None = None
    parameters: list[Parameter] = field(default_factory=list)
    return_value: str | None = None
    topics: list[TopicGroup] = field(default_factory=list)
    see_also: list[ContentItem] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)
    hierarchy: list[str] = field(default_factory=list)
    deprecated: bool = False
    beta: bool = False
    platforms: list[Platform] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class CacheRef:
    """Byte range of one cached document inside a shared blob file."""

    uuid: str
    data_id: int
    offset: int
    length: int


@dataclass(frozen=True, slots=True)
class EntryFilters:
    """Allow-lists applied by format handlers at enumeration time."""

    types: tuple[str, ...] | None = None
    frameworks: tuple[str, ...] | None = None
    languages: tuple[str, ...] | None = None
    limit: int | None = None


@dataclass(frozen=True, slots=True)
class LinkMapping:
    """Output location of an entry, keyed by its source HTML filename."""

    output_path: str
    type: str
    name: str
