"""Filesystem-safe path segments derived from entry names."""

from __future__ import annotations

import re


MAX_SEGMENT_LENGTH = 100
FALLBACK_SEGMENT = "unnamed"

_FORBIDDEN_RE = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE_RE = re.compile(r"\s+")
_UNDERSCORE_RUN_RE = re.compile(r"__+")


def _collapse_signature(name: str) -> str:
    # init(frame:) -> init_frame, perform(_:with:afterDelay:) -> perform_with_afterDelay
    head, _, params = name.partition("(")
    labels: list[str] = []
    for piece in params.replace("(", "").replace(")", "").split(":"):
        words = piece.split()
        label = words[-1] if words else ""
        if label and label != "_":
            labels.append(label)
    if labels:
        return f"{head}_{'_'.join(labels)}"
    return head


def sanitize(name: str) -> str:
    """Return a lower-case, non-empty segment of at most 100 safe characters."""

    value = _collapse_signature(name) if "(" in name else name
    value = _FORBIDDEN_RE.sub("_", value)
    value = _WHITESPACE_RE.sub("_", value)
    value = _UNDERSCORE_RUN_RE.sub("_", value).strip("_")
    # Truncation may expose a trailing underscore; strip again so the result is a fixed point.
    value = value.lower()[:MAX_SEGMENT_LENGTH].strip("_")
    return value or FALLBACK_SEGMENT
