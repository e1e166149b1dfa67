"""Scribe - Convert documents between JSON, YAML, and TOML."""

__version__ = "0.1.0"

from .converter import DataConverter, convert
from .errors import (
    ConversionError,
    FileAccessError,
    ParseError,
    QueryError,
    UnrepresentableError,
    UnsupportedFeature,
    UnsupportedFormat,
)
from .formats import Format
from .value import Kind, Value

__all__ = [
    "ConversionError",
    "DataConverter",
    "FileAccessError",
    "Format",
    "Kind",
    "ParseError",
    "QueryError",
    "UnrepresentableError",
    "UnsupportedFeature",
    "UnsupportedFormat",
    "Value",
    "convert",
]
