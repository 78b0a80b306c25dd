"""Pick the converter strategy for a detected docset format."""

from __future__ import annotations

from typing import Callable

from docset2md.converter.apple import AppleDocCConverter
from docset2md.converter.base import BaseConverter
from docset2md.converter.coredata import CoreDataConverter
from docset2md.converter.standard import StandardConverter
from docset2md.formats.base import DocsetFormat


ConverterFactory = Callable[[DocsetFormat, str], BaseConverter]

_CONVERTERS: dict[str, ConverterFactory] = {
    "Apple DocC": AppleDocCConverter,
    "CoreData": CoreDataConverter,
    "Standard Dash": StandardConverter,
}


def register_converter(format_name: str, factory: ConverterFactory) -> None:
    _CONVERTERS[format_name] = factory


def create_converter(docset_format: DocsetFormat, docset_name: str) -> BaseConverter:
    """Return the converter registered for ``docset_format.name``.

    Unknown format names fall back to `StandardConverter`.
    """

    factory = _CONVERTERS.get(docset_format.name, StandardConverter)
    return factory(docset_format, docset_name)


def registered_formats() -> list[str]:
    return sorted(_CONVERTERS)
