"""Domain errors raised across docset handling and conversion."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class DocsetError(Exception):
    """Base error for unreadable or unsupported docsets."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


class DocsetNotInitializedError(DocsetError):
    """A format handler was queried before `initialize` completed."""


class UnsupportedDocsetError(DocsetError):
    """No registered format handler recognized the docset layout."""


@dataclass(slots=True)
class SearchToolchainUnavailableError(Exception):
    """The external toolchain for the search binary is not installed."""

    tool: str
    remediation: str

    def __str__(self) -> str:
        return f"{self.tool} is not installed"
