"""Primitive kinds supported by the built-in cell coercion."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, get_args, get_origin


class PrimitiveType(Enum):
    """Built-in primitive kinds a bound field may be declared as."""

    STRING = "string"
    BOOL = "bool"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    INT128 = "int128"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    UINT128 = "uint128"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    COMPLEX64 = "complex64"
    COMPLEX128 = "complex128"

    @property
    def bits(self) -> int:
        """Return the bit width for numeric kinds (0 for string and bool)."""
        widths = {
            PrimitiveType.STRING: 0,
            PrimitiveType.BOOL: 0,
            PrimitiveType.INT8: 8,
            PrimitiveType.INT16: 16,
            PrimitiveType.INT32: 32,
            PrimitiveType.INT64: 64,
            PrimitiveType.INT128: 128,
            PrimitiveType.UINT8: 8,
            PrimitiveType.UINT16: 16,
            PrimitiveType.UINT32: 32,
            PrimitiveType.UINT64: 64,
            PrimitiveType.UINT128: 128,
            PrimitiveType.FLOAT32: 32,
            PrimitiveType.FLOAT64: 64,
            PrimitiveType.COMPLEX64: 64,
            PrimitiveType.COMPLEX128: 128,
        }
        return widths[self]

    @property
    def is_signed_int(self) -> bool:
        return self in _SIGNED_INTS

    @property
    def is_unsigned_int(self) -> bool:
        return self in _UNSIGNED_INTS

    @property
    def is_float(self) -> bool:
        return self in (PrimitiveType.FLOAT32, PrimitiveType.FLOAT64)

    @property
    def is_complex(self) -> bool:
        return self in (PrimitiveType.COMPLEX64, PrimitiveType.COMPLEX128)

    @property
    def int_range(self) -> tuple[int, int]:
        """Return the inclusive (min, max) range for integer kinds."""
        if self.is_signed_int:
            return -(1 << (self.bits - 1)), (1 << (self.bits - 1)) - 1
        if self.is_unsigned_int:
            return 0, (1 << self.bits) - 1
        raise TypeError(f"{self.value} is not an integer kind")


_SIGNED_INTS = frozenset({
    PrimitiveType.INT8,
    PrimitiveType.INT16,
    PrimitiveType.INT32,
    PrimitiveType.INT64,
    PrimitiveType.INT128,
})

_UNSIGNED_INTS = frozenset({
    PrimitiveType.UINT8,
    PrimitiveType.UINT16,
    PrimitiveType.UINT32,
    PrimitiveType.UINT64,
    PrimitiveType.UINT128,
})


# Mapping from kind name strings to PrimitiveType enum values
PRIMITIVE_TYPE_NAMES: dict[str, PrimitiveType] = {pt.value: pt for pt in PrimitiveType}

# Plain Python annotations and the kind they decode as
BUILTIN_KINDS: dict[Any, PrimitiveType] = {
    str: PrimitiveType.STRING,
    bool: PrimitiveType.BOOL,
    int: PrimitiveType.INT64,
    float: PrimitiveType.FLOAT64,
    complex: PrimitiveType.COMPLEX128,
}


# Sized annotations for dataclass fields, e.g. ``age: uint8 = column("index:2")``
int8 = Annotated[int, PrimitiveType.INT8]
int16 = Annotated[int, PrimitiveType.INT16]
int32 = Annotated[int, PrimitiveType.INT32]
int64 = Annotated[int, PrimitiveType.INT64]
int128 = Annotated[int, PrimitiveType.INT128]
uint = Annotated[int, PrimitiveType.UINT64]
uint8 = Annotated[int, PrimitiveType.UINT8]
uint16 = Annotated[int, PrimitiveType.UINT16]
uint32 = Annotated[int, PrimitiveType.UINT32]
uint64 = Annotated[int, PrimitiveType.UINT64]
uint128 = Annotated[int, PrimitiveType.UINT128]
float32 = Annotated[float, PrimitiveType.FLOAT32]
float64 = Annotated[float, PrimitiveType.FLOAT64]
complex64 = Annotated[complex, PrimitiveType.COMPLEX64]
complex128 = Annotated[complex, PrimitiveType.COMPLEX128]


def resolve_primitive(hint: Any) -> PrimitiveType | None:
    """Resolve a field's type hint to a supported kind, or None if unsupported.

    ``Annotated`` hints carrying a PrimitiveType marker use the marker; other
    ``Annotated`` hints fall back to their underlying type.
    """
    if get_origin(hint) is Annotated:
        base, *extras = get_args(hint)
        for extra in extras:
            if isinstance(extra, PrimitiveType):
                return extra
        return resolve_primitive(base)
    try:
        return BUILTIN_KINDS.get(hint)
    except TypeError:
        # Unhashable hints are never supported kinds
        return None
