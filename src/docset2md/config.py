"""Runtime configuration for conversion runs."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Mapping


DEFAULT_OUTPUT_DIR = "./output"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SEARCH_BATCH_SIZE = 1000
DEFAULT_BUILD_TIMEOUT_SECONDS = 600.0
DEFAULT_TARIX_CACHE_SIZE = 1000

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    value = int(raw_value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.001) -> float:
    value = float(raw_value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    """Validated converter settings sourced from the environment."""

    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    log_level: str = DEFAULT_LOG_LEVEL
    search_batch_size: int = DEFAULT_SEARCH_BATCH_SIZE
    build_timeout_seconds: float = DEFAULT_BUILD_TIMEOUT_SECONDS
    tarix_cache_size: int = DEFAULT_TARIX_CACHE_SIZE

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        output_dir_raw = source.get("DOCSET2MD_OUTPUT_DIR", DEFAULT_OUTPUT_DIR).strip()
        if not output_dir_raw:
            raise ValueError("DOCSET2MD_OUTPUT_DIR cannot be empty")

        log_level = source.get("DOCSET2MD_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if log_level not in _LOG_LEVELS:
            raise ValueError(f"DOCSET2MD_LOG_LEVEL must be one of: {', '.join(sorted(_LOG_LEVELS))}")

        batch_raw = source.get("DOCSET2MD_SEARCH_BATCH_SIZE", str(DEFAULT_SEARCH_BATCH_SIZE)).strip()
        timeout_raw = source.get("DOCSET2MD_BUILD_TIMEOUT_SECONDS", str(DEFAULT_BUILD_TIMEOUT_SECONDS)).strip()
        cache_raw = source.get("DOCSET2MD_TARIX_CACHE_SIZE", str(DEFAULT_TARIX_CACHE_SIZE)).strip()

        if not batch_raw:
            raise ValueError("DOCSET2MD_SEARCH_BATCH_SIZE cannot be empty")
        if not timeout_raw:
            raise ValueError("DOCSET2MD_BUILD_TIMEOUT_SECONDS cannot be empty")
        if not cache_raw:
            raise ValueError("DOCSET2MD_TARIX_CACHE_SIZE cannot be empty")

        return cls(
            output_dir=Path(output_dir_raw),
            log_level=log_level,
            search_batch_size=_parse_positive_int(name="DOCSET2MD_SEARCH_BATCH_SIZE", raw_value=batch_raw),
            build_timeout_seconds=_parse_positive_float(
                name="DOCSET2MD_BUILD_TIMEOUT_SECONDS",
                raw_value=timeout_raw,
            ),
            tarix_cache_size=_parse_positive_int(name="DOCSET2MD_TARIX_CACHE_SIZE", raw_value=cache_raw),
        )
