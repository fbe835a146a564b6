"""typed_csv exception hierarchy.

Keep this module small and dependency-free: it is imported by every other
module and by tests.
"""

from __future__ import annotations


class TypedCsvError(Exception):
    """Base exception for all typed_csv errors."""


class TagSyntaxError(ValueError):
    """Raised by the tag parser for a tag that cannot be turned into a binding."""

    reason = "invalid csv tag"

    def __init__(self, tag: str, detail: str | None = None) -> None:
        self.tag = tag
        self.detail = detail
        super().__init__(detail or self.reason)


class MalformedTagSyntax(TagSyntaxError):
    reason = "you need to specify either the header or index"


class InvalidIndexSyntax(TagSyntaxError):
    reason = "index must be a non negative integer"


class CoercionError(ValueError):
    """Raised when a raw cell cannot be converted to a field's declared kind."""


class TagDefinitionError(TypedCsvError, ValueError):
    """A csv tag on a dataclass field is unusable.

    ``err`` is the underlying cause; for failures raised by the tag parser it
    is also chained as ``__cause__``.
    """

    reason = "invalid csv tag definition"

    def __init__(self, tag: str, field_name: str, err: BaseException | str | None = None) -> None:
        self.tag = tag
        self.field_name = field_name
        self.err = err if err is not None else self.reason
        super().__init__(
            f"problem with csv tag definition {tag} on field {field_name}: {self.err}"
        )


class MalformedTagError(TagDefinitionError):
    reason = MalformedTagSyntax.reason


class InvalidIndexError(TagDefinitionError):
    reason = InvalidIndexSyntax.reason


class UnexportedFieldError(TagDefinitionError):
    reason = "csv tags may not be set on unexported fields"


class MissingCustomSetterError(TagDefinitionError):
    reason = "cannot use custom data type without implementing CustomSetter interface"


class UnsupportedDataTypeError(TagDefinitionError):
    reason = "must implement CustomSetter interface when using unsupported data types"


class FieldNotFoundError(TypedCsvError, LookupError):
    """A header-addressed field's label is missing from the header row."""

    def __init__(self, field_name: str, header_name: str) -> None:
        self.field_name = field_name
        self.header_name = header_name
        super().__init__(f"field {field_name} not found in header with label {header_name}")


class SetValueError(TypedCsvError, ValueError):
    """A cell could not be applied to its field while reading a record."""

    def __init__(self, line: int, value: str | None, field_name: str, err: BaseException | str) -> None:
        self.line = line
        self.value = value
        self.field_name = field_name
        self.err = err
        super().__init__(
            f"record on line {line}: problem setting value {value} on field {field_name}: {err}"
        )
