"""Record reader binding csv rows to tagged dataclass instances."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterable, Iterator, Mapping, TypeVar

from typed_csv.coercion import parse_cell
from typed_csv.errors import CoercionError, FieldNotFoundError, SetValueError, UnsupportedDataTypeError
from typed_csv.metadata import FieldBinding, extract_bindings

logger = logging.getLogger("typed_csv.reader")

R = TypeVar("R")

DEFAULT_DELIMITER = ","

# Delimiters that cannot separate cells; the default is kept instead
ILLEGAL_DELIMITERS = frozenset({"", "\0", "\n", "\r"})


@dataclass
class ReaderOptions:
    """Construction-time options for a RecordReader."""

    delimiter: str = DEFAULT_DELIMITER
    comment_char: str = ""  # Records whose first line starts with this character are skipped
    reuse_record: bool = False  # Performance hint only; rows are never shared with callers


def legal_delimiter(delimiter: str | None) -> bool:
    """Return whether a delimiter may replace the default (a single character)."""
    return delimiter is not None and len(delimiter) == 1 and delimiter not in ILLEGAL_DELIMITERS


class ReaderState(Enum):
    """Lifecycle of a RecordReader."""

    UNINITIALIZED = "uninitialized"  # No binding table yet
    READY = "ready"  # Table built, no data row consumed
    READING = "reading"
    EXHAUSTED = "exhausted"  # The row source reported end of input


def resolve_columns(bindings: Mapping[str, FieldBinding], header: list[str]) -> None:
    """Rewrite column indexes of header-addressed bindings from a header row.

    The first header cell equal to the binding's label wins. Index-addressed
    bindings are left untouched.

    Raises:
        FieldNotFoundError: For the first binding whose label is not in the header.
    """
    for binding in bindings.values():
        if not binding.has_header:
            continue
        try:
            binding.column_index = header.index(binding.header_name)
        except ValueError:
            raise FieldNotFoundError(binding.field_name, binding.header_name) from None
        logger.debug(
            "field %s bound to column %d (%r)",
            binding.field_name,
            binding.column_index,
            binding.header_name,
        )


class RecordReader:
    """Reads rows from a text source into tagged dataclass instances.

    The binding table is built from the first record passed to
    ``parse_header`` or ``read_record`` and reused for every later row, so a
    reader must only be used with one record type. A reader is not safe for
    concurrent use.

    Example::

        reader = RecordReader(open("people.csv", newline=""))
        reader.parse_header(Person())
        person = Person()
        reader.read_record(person)
    """

    def __init__(self, source: Iterable[str], options: ReaderOptions | None = None) -> None:
        self.options = options or ReaderOptions()
        delimiter = self.options.delimiter if legal_delimiter(self.options.delimiter) else DEFAULT_DELIMITER
        self._rows = csv.reader(self._filter_comments(source), delimiter=delimiter)
        self._at_record_start = True
        self._bindings: dict[str, FieldBinding] = {}
        self._built = False
        self._headers_parsed = 0
        self._line = 0
        self._state = ReaderState.UNINITIALIZED

    def _filter_comments(self, source: Iterable[str]) -> Iterator[str]:
        # Only the first line of a record may be a comment; continuation
        # lines of a quoted cell are passed through untouched
        comment = self.options.comment_char
        for line in source:
            if self._at_record_start and comment and line.startswith(comment):
                continue
            self._at_record_start = False
            yield line

    @property
    def bindings(self) -> Mapping[str, FieldBinding]:
        """Read-only view of the binding table (empty until first use)."""
        return MappingProxyType(self._bindings)

    @property
    def line(self) -> int:
        """Number of data records read so far."""
        return self._line

    @property
    def state(self) -> ReaderState:
        return self._state

    def _ensure_bindings(self, record: Any) -> None:
        if self._built:
            return
        self._bindings = extract_bindings(record)
        self._built = True
        self._state = ReaderState.READY

    def _read_row(self) -> list[str]:
        """Return the next non-empty row, raising EOFError at end of input."""
        if self._state is ReaderState.EXHAUSTED:
            raise EOFError("end of input")
        while True:
            self._at_record_start = True
            try:
                row = next(self._rows)
            except StopIteration:
                self._state = ReaderState.EXHAUSTED
                raise EOFError("end of input") from None
            if row:
                return row

    def parse_header(self, record: Any) -> None:
        """Read one row as column labels and resolve header-addressed fields.

        Call at most once per source: every call consumes another row.

        Raises:
            TagDefinitionError: If the record's tags are invalid.
            FieldNotFoundError: If a header label is missing.
            EOFError: If the source is empty.
        """
        self._ensure_bindings(record)
        if self._headers_parsed:
            logger.warning("parse_header called again; consuming another row as header")
        header = self._read_row()
        self._headers_parsed += 1
        resolve_columns(self._bindings, header)

    def read_record(self, record: Any) -> None:
        """Read the next row and set each bound field on record in place.

        A failing cell aborts the row; fields set earlier in the row keep
        their new values. The reader stays usable for the following rows.

        Raises:
            TagDefinitionError: If the record's tags are invalid.
            SetValueError: If a cell is missing or cannot be applied.
            EOFError: At end of input, on this and every later call.
        """
        self._ensure_bindings(record)
        row = self._read_row()
        self._line += 1
        self._state = ReaderState.READING

        for field_name, binding in self._bindings.items():
            try:
                value = row[binding.column_index]
            except IndexError as err:
                raise SetValueError(self._line, None, field_name, err) from err
            self._set_field_value(record, binding, value)

    def _set_field_value(self, record: Any, binding: FieldBinding, value: str) -> None:
        field_name = binding.field_name

        if binding.use_custom_setter:
            try:
                out = record.custom_setter(field_name, value)
            except Exception as err:
                raise SetValueError(self._line, value, field_name, err) from err
            if out:
                raise SetValueError(self._line, value, field_name, out)
            return

        if binding.kind is None:
            raise SetValueError(self._line, value, field_name, UnsupportedDataTypeError.reason)

        try:
            parsed = parse_cell(binding.kind, value)
        except CoercionError as err:
            raise SetValueError(self._line, value, field_name, err) from err
        setattr(record, field_name, parsed)

    def iter_records(self, factory: Callable[[], R]) -> Iterator[R]:
        """Yield a freshly decoded record per row until end of input."""
        while True:
            record = factory()
            try:
                self.read_record(record)
            except EOFError:
                return
            yield record
