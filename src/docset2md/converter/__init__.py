"""Converter strategies that turn docset entries into a markdown tree."""

from .apple import AppleDocCConverter
from .base import BaseConverter, ConversionResult, ConverterOptions, ProgressCallback
from .coredata import CoreDataConverter
from .markdown import MarkdownGenerator
from .registry import create_converter, register_converter
from .standard import StandardConverter
from .writer import FileWriter, WriteStats

__all__ = [
    "AppleDocCConverter",
    "BaseConverter",
    "ConversionResult",
    "ConverterOptions",
    "CoreDataConverter",
    "FileWriter",
    "MarkdownGenerator",
    "ProgressCallback",
    "StandardConverter",
    "WriteStats",
    "create_converter",
    "register_converter",
]
