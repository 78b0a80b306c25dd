from __future__ import annotations

import logging
from pathlib import Path

import pytest

from docset2md.config import Settings


def test_from_env_uses_defaults() -> None:
    settings = Settings.from_env({})

    assert settings.output_dir == Path("./output")
    assert settings.log_level == "INFO"
    assert settings.log_level_value == logging.INFO
    assert settings.search_batch_size == 1000
    assert settings.build_timeout_seconds == 600.0
    assert settings.tarix_cache_size == 1000


def test_from_env_reads_overrides() -> None:
    settings = Settings.from_env(
        {
            "DOCSET2MD_OUTPUT_DIR": "/tmp/docs",
            "DOCSET2MD_LOG_LEVEL": "debug",
            "DOCSET2MD_SEARCH_BATCH_SIZE": "50",
            "DOCSET2MD_BUILD_TIMEOUT_SECONDS": "12.5",
            "DOCSET2MD_TARIX_CACHE_SIZE": "10",
        }
    )

    assert settings.output_dir == Path("/tmp/docs")
    assert settings.log_level == "DEBUG"
    assert settings.search_batch_size == 50
    assert settings.build_timeout_seconds == 12.5
    assert settings.tarix_cache_size == 10


@pytest.mark.parametrize(
    ("environ", "message"),
    [
        ({"DOCSET2MD_SEARCH_BATCH_SIZE": "0"}, "DOCSET2MD_SEARCH_BATCH_SIZE must be >= 1"),
        ({"DOCSET2MD_TARIX_CACHE_SIZE": "-3"}, "DOCSET2MD_TARIX_CACHE_SIZE must be >= 1"),
        ({"DOCSET2MD_BUILD_TIMEOUT_SECONDS": "0"}, "DOCSET2MD_BUILD_TIMEOUT_SECONDS must be >="),
        ({"DOCSET2MD_OUTPUT_DIR": "  "}, "DOCSET2MD_OUTPUT_DIR cannot be empty"),
        ({"DOCSET2MD_LOG_LEVEL": "chatty"}, "DOCSET2MD_LOG_LEVEL must be one of"),
        ({"DOCSET2MD_SEARCH_BATCH_SIZE": ""}, "DOCSET2MD_SEARCH_BATCH_SIZE cannot be empty"),
    ],
)
def test_from_env_rejects_invalid_values(environ: dict[str, str], message: str) -> None:
    with pytest.raises(ValueError, match=message):
        Settings.from_env(environ)
