from __future__ import annotations

import pytest

from docset2md.sanitize import FALLBACK_SEGMENT, MAX_SEGMENT_LENGTH, sanitize


_FORBIDDEN = set('<>:"/\\|?*')

_SAMPLES = [
    "init(frame:)",
    "perform(_:with:afterDelay:)",
    "array<int|string>",
    "DateTime",
    "  spaced   name  ",
    "a" * 250,
    "x" * 99 + " y",
    "___",
    "",
    "()",
    "path/to\\file?.md",
    "Straße",
    "İstanbul",
    "func(_:)",
    "tableView(_:cellForRowAt:)",
    "a:b:c",
]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("init(frame:)", "init_frame"),
        ("perform(_:with:afterDelay:)", "perform_with_afterdelay"),
        ("array<int|string>", "array_int_string"),
        ("DateTime", "datetime"),
        ("array_map", "array_map"),
        ("viewDidLoad()", "viewdidload"),
        ("hello world", "hello_world"),
    ],
)
def test_sanitize_examples(raw: str, expected: str) -> None:
    assert sanitize(raw) == expected


def test_sanitize_falls_back_for_empty_results() -> None:
    assert sanitize("") == FALLBACK_SEGMENT
    assert sanitize("***") == FALLBACK_SEGMENT
    assert sanitize("()") == FALLBACK_SEGMENT


def test_sanitize_truncates_to_max_length() -> None:
    assert sanitize("a" * 250) == "a" * MAX_SEGMENT_LENGTH


@pytest.mark.parametrize("raw", _SAMPLES)
def test_sanitize_output_is_safe_bounded_and_idempotent(raw: str) -> None:
    once = sanitize(raw)

    assert once
    assert len(once) <= MAX_SEGMENT_LENGTH
    assert not (_FORBIDDEN & set(once))
    assert sanitize(once) == once
