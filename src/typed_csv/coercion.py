"""Conversion between raw cell text and primitive field values."""

from __future__ import annotations

import math
import re
import struct
from typing import Any

from typed_csv.errors import CoercionError
from typed_csv.types import PrimitiveType

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"[0-9]+")
_FORBIDDEN_FLOAT_CHARS = re.compile(r"[\s_jJ]")

TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def _invalid(kind: PrimitiveType, value: str) -> CoercionError:
    return CoercionError(f'parsing {value!r} as {kind.value}: invalid syntax')


def _out_of_range(kind: PrimitiveType, value: str) -> CoercionError:
    return CoercionError(f'parsing {value!r} as {kind.value}: value out of range')


def _to_float32(value: float) -> float:
    """Round a float to IEEE single precision."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _parse_int(kind: PrimitiveType, value: str) -> int:
    pattern = _SIGNED_RE if kind.is_signed_int else _UNSIGNED_RE
    if not pattern.fullmatch(value):
        raise _invalid(kind, value)
    result = int(value, 10)
    low, high = kind.int_range
    if result < low or result > high:
        raise _out_of_range(kind, value)
    return result


def _parse_float(kind: PrimitiveType, text: str, bits: int, cell: str | None = None) -> float:
    # cell is the whole raw value when text is one part of a complex literal
    cell = text if cell is None else cell
    if not text or _FORBIDDEN_FLOAT_CHARS.search(text):
        raise _invalid(kind, cell)
    try:
        result = float(text)
    except ValueError:
        raise _invalid(kind, cell) from None

    # float() saturates to inf on overflow; only an explicit literal may be infinite
    if math.isinf(result) and "inf" not in text.lower():
        raise _out_of_range(kind, cell)
    if bits == 32:
        try:
            result = _to_float32(result)
        except OverflowError:
            raise _out_of_range(kind, cell) from None
    return result


def _split_complex(value: str) -> tuple[str, str]:
    """Split ``a+bi`` style text into its real and imaginary literals."""
    text = value
    if text.startswith("(") and text.endswith(")"):
        text = text[1:-1]
    if not text.endswith("i") or text.lower().endswith("inf"):
        return text, "0"

    body = text[:-1]
    for pos in range(len(body) - 1, 0, -1):
        if body[pos] in "+-" and body[pos - 1] not in "eE":
            return body[:pos], body[pos:]
    return "0", body


def _parse_complex(kind: PrimitiveType, value: str) -> complex:
    part_bits = kind.bits // 2
    real_text, imag_text = _split_complex(value)
    real = _parse_float(kind, real_text, part_bits, cell=value)
    imag = _parse_float(kind, imag_text, part_bits, cell=value)
    return complex(real, imag)


def parse_cell(kind: PrimitiveType, value: str) -> Any:
    """Convert a raw cell to a Python value of the given kind.

    Strings are taken verbatim. Numeric text must be plain base-10 (no
    whitespace or digit separators) and fit the kind's bit width.

    Raises:
        CoercionError: If the text is not a valid literal for the kind.
    """
    if kind is PrimitiveType.STRING:
        return value
    if kind is PrimitiveType.BOOL:
        if value in TRUE_LITERALS:
            return True
        if value in FALSE_LITERALS:
            return False
        raise _invalid(kind, value)
    if kind.is_signed_int or kind.is_unsigned_int:
        return _parse_int(kind, value)
    if kind.is_float:
        return _parse_float(kind, value, kind.bits)
    if kind.is_complex:
        return _parse_complex(kind, value)
    raise CoercionError(f"unsupported kind {kind.value}")


def _format_float(value: float, bits: int) -> str:
    if math.isnan(value) or math.isinf(value):
        return repr(value)
    if bits == 64:
        return repr(value)
    # Shortest text that reads back as the same single-precision value
    for precision in range(1, 10):
        candidate = float(f"{value:.{precision}g}")
        if _to_float32(candidate) == value:
            return repr(candidate)
    return repr(value)


def format_cell(kind: PrimitiveType, value: Any) -> str:
    """Format a Python value as cell text that ``parse_cell`` reads back."""
    if kind is PrimitiveType.STRING:
        return value
    if kind is PrimitiveType.BOOL:
        return "true" if value else "false"
    if kind.is_signed_int or kind.is_unsigned_int:
        return str(int(value))
    if kind.is_float:
        return _format_float(float(value), kind.bits)
    if kind.is_complex:
        value = complex(value)
        part_bits = kind.bits // 2
        real = _format_float(value.real, part_bits)
        imag = _format_float(value.imag, part_bits)
        if not imag.startswith("-"):
            imag = "+" + imag
        return f"({real}{imag}i)"
    raise CoercionError(f"unsupported kind {kind.value}")
