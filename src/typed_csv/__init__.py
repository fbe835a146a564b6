"""Typed CSV - Bind delimited rows to tagged dataclass fields."""

from typed_csv.coercion import format_cell, parse_cell
from typed_csv.errors import (
    CoercionError,
    FieldNotFoundError,
    InvalidIndexError,
    MalformedTagError,
    MissingCustomSetterError,
    SetValueError,
    TagDefinitionError,
    TypedCsvError,
    UnexportedFieldError,
    UnsupportedDataTypeError,
)
from typed_csv.metadata import CustomSetter, FieldBinding, column, extract_bindings
from typed_csv.parsing import TagParser, parse_tag
from typed_csv.reader import ReaderOptions, ReaderState, RecordReader, resolve_columns
from typed_csv.types import PrimitiveType

__all__ = [
    # Main API
    "RecordReader",
    "ReaderOptions",
    "ReaderState",
    "column",
    "CustomSetter",
    # Metadata
    "FieldBinding",
    "extract_bindings",
    "resolve_columns",
    "TagParser",
    "parse_tag",
    # Coercion
    "PrimitiveType",
    "parse_cell",
    "format_cell",
    # Errors
    "TypedCsvError",
    "TagDefinitionError",
    "MalformedTagError",
    "InvalidIndexError",
    "UnexportedFieldError",
    "MissingCustomSetterError",
    "UnsupportedDataTypeError",
    "FieldNotFoundError",
    "SetValueError",
    "CoercionError",
]

__version__ = "0.1.0"
