"""Request-key helpers for Apple DocC cache lookups."""

from __future__ import annotations

import base64
import hashlib
import re


_FRAMEWORK_RE = re.compile(r"documentation/([^/]+)")
_LANGUAGE_PREFIXES = ("ls", "lc")


def generate_uuid(request_key: str) -> str:
    """Derive the cache uuid for a request key such as ``ls/documentation/uikit``.

    The uuid is the two-letter language prefix followed by the URL-safe,
    unpadded base64 encoding of the first six bytes of the SHA-1 digest of
    the canonical path (the key with its prefix replaced by ``/``).
    """

    prefix, separator, _rest = request_key.partition("/")
    if prefix not in _LANGUAGE_PREFIXES or not separator:
        raise ValueError(f"Invalid request key format: {request_key}")

    canonical_path = "/" + request_key[3:]
    digest = hashlib.sha1(canonical_path.encode("utf-8")).digest()
    suffix = base64.urlsafe_b64encode(digest[:6]).decode("ascii").rstrip("=")
    return prefix + suffix


def language_for_key(request_key: str) -> str:
    return "swift" if request_key.startswith("ls/") else "objc"


def framework_for_key(request_key: str) -> str | None:
    match = _FRAMEWORK_RE.search(request_key)
    return match.group(1) if match else None
