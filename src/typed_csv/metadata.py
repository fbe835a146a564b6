"""Field bindings extracted from csv tags on dataclass fields."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Protocol, get_type_hints, runtime_checkable

from typed_csv.errors import (
    InvalidIndexError,
    InvalidIndexSyntax,
    MalformedTagError,
    MalformedTagSyntax,
    MissingCustomSetterError,
    TagDefinitionError,
    TagSyntaxError,
    UnexportedFieldError,
    UnsupportedDataTypeError,
)
from typed_csv.parsing.tag_parser import parse_tag
from typed_csv.types import PrimitiveType, resolve_primitive

logger = logging.getLogger("typed_csv.metadata")

# Dataclass field metadata key holding the tag
TAG_NAME = "csv"


@runtime_checkable
class CustomSetter(Protocol):
    """Optional hook a record type implements to decode cells itself.

    Return a falsy value (None, "", False) on success. A truthy return value,
    such as an error message, is reported as the failure for that cell, as is
    any exception the hook raises.
    """

    def custom_setter(self, field_name: str, value: str) -> Any: ...


@dataclass
class FieldBinding:
    """Resolved association of one record field to a column."""

    field_name: str
    header_name: str = ""
    has_header: bool = False
    column_index: int = 0
    use_custom_setter: bool = False
    kind: PrimitiveType | None = None  # None only when decoding via custom_setter


def column(tag: str, **kwargs: Any) -> Any:
    """Declare a dataclass field bound by a csv tag.

    Accepts the same keyword arguments as ``dataclasses.field``::

        @dataclass
        class Row:
            name: str = column("header:name", default="")
            age: uint8 = column("index:2", default=0)
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_NAME] = tag
    return dataclasses.field(metadata=metadata, **kwargs)


def supports_custom_setter(record: Any) -> bool:
    """Return whether the record's type implements CustomSetter."""
    return isinstance(record, CustomSetter)


def _field_hints(record_type: type, fields: tuple[dataclasses.Field, ...]) -> dict[str, Any]:
    try:
        return get_type_hints(record_type, include_extras=True)
    except NameError:
        # Unresolvable forward references; string annotations map to no kind
        return {f.name: f.type for f in fields}


def extract_bindings(record: Any) -> dict[str, FieldBinding]:
    """Build the binding table for a dataclass instance.

    Fields are visited in declaration order and the first invalid field
    aborts extraction. Fields without a csv tag are skipped.

    Raises:
        TypeError: If record is not a dataclass instance.
        TagDefinitionError: If a tag cannot be bound. The concrete subclass
            names the reason (MalformedTagError, InvalidIndexError,
            UnexportedFieldError, MissingCustomSetterError,
            UnsupportedDataTypeError).
    """
    if not dataclasses.is_dataclass(record) or isinstance(record, type):
        raise TypeError(f"expected a dataclass instance, got {type(record).__name__}")

    record_type = type(record)
    fields = dataclasses.fields(record)
    hints = _field_hints(record_type, fields)
    frozen = record_type.__dataclass_params__.frozen  # type: ignore[attr-defined]
    custom = supports_custom_setter(record)

    bindings: dict[str, FieldBinding] = {}
    for f in fields:
        tag = f.metadata.get(TAG_NAME)
        if not tag:
            continue

        if f.name.startswith("_") or frozen:
            raise UnexportedFieldError(tag, f.name)

        try:
            attrs = parse_tag(tag)
        except MalformedTagSyntax as err:
            raise MalformedTagError(tag, f.name, err) from err
        except InvalidIndexSyntax as err:
            raise InvalidIndexError(tag, f.name, err) from err
        except TagSyntaxError as err:
            raise TagDefinitionError(tag, f.name, err) from err

        if attrs.use_custom_setter and not custom:
            raise MissingCustomSetterError(tag, f.name)

        kind = resolve_primitive(hints.get(f.name))
        if kind is None and not custom:
            raise UnsupportedDataTypeError(tag, f.name)

        bindings[f.name] = FieldBinding(
            field_name=f.name,
            header_name=attrs.header_name,
            has_header=attrs.has_header,
            column_index=attrs.column_index,
            use_custom_setter=attrs.use_custom_setter,
            kind=kind,
        )

    logger.debug("extracted %d binding(s) for %s", len(bindings), record_type.__name__)
    return bindings
