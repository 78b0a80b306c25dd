"""Docset format handlers and their shared contract."""

from .apple import AppleDocCFormat
from .base import DocsetFormat
from .cache_reader import CacheReader
from .coredata import CoreDataFormat
from .detector import FormatDetector, build_default_formats
from .standard import StandardDashFormat

__all__ = [
    "AppleDocCFormat",
    "CacheReader",
    "CoreDataFormat",
    "DocsetFormat",
    "FormatDetector",
    "StandardDashFormat",
    "build_default_formats",
]
