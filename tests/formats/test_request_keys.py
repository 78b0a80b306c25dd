from __future__ import annotations

import base64
import hashlib

import pytest

from docset2md.formats.request_keys import framework_for_key, generate_uuid, language_for_key


def test_generate_uuid_hashes_canonical_path() -> None:
    digest = hashlib.sha1(b"/documentation/uikit/uiview").digest()
    expected = "ls" + base64.urlsafe_b64encode(digest[:6]).decode("ascii").rstrip("=")

    assert generate_uuid("ls/documentation/uikit/uiview") == expected


def test_generate_uuid_keeps_language_prefix() -> None:
    swift = generate_uuid("ls/documentation/foundation/nsstring")
    objc = generate_uuid("lc/documentation/foundation/nsstring")

    assert swift.startswith("ls")
    assert objc.startswith("lc")
    assert swift[2:] == objc[2:]
    assert len(swift) == 10


@pytest.mark.parametrize("key", ["documentation/uikit", "lx/documentation/uikit", "ls", ""])
def test_generate_uuid_rejects_malformed_keys(key: str) -> None:
    with pytest.raises(ValueError, match="Invalid request key format"):
        generate_uuid(key)


def test_language_and_framework_for_key() -> None:
    assert language_for_key("ls/documentation/uikit") == "swift"
    assert language_for_key("lc/documentation/uikit") == "objc"
    assert framework_for_key("ls/documentation/uikit/uiview") == "uikit"
    assert framework_for_key("ls/other") is None
