"""Decode a csv file through a tagged dataclass and print the records as JSON.

Usage:
    typed-csv mypkg.models:Person people.csv            # first row is a header
    typed-csv mypkg.models:Person data.tsv -d '\\t' --no-header
    typed-csv mypkg.models:Person people.csv -o people.jsonl
"""

from __future__ import annotations

import argparse
import dataclasses
import importlib
import json
import logging
import sys
from pathlib import Path
from typing import Any

from typed_csv.coercion import format_cell
from typed_csv.errors import TypedCsvError
from typed_csv.reader import ReaderOptions, RecordReader
from typed_csv.types import PrimitiveType


def load_record_type(target: str) -> type:
    """Import ``module:Class`` and return the dataclass it names."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"expected MODULE:CLASS, got {target!r}")
    record_type: Any = importlib.import_module(module_name)
    for part in attr.split("."):
        record_type = getattr(record_type, part)
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise ValueError(f"{target} is not a dataclass")
    return record_type


def _json_default(value: Any) -> str:
    if isinstance(value, complex):
        return format_cell(PrimitiveType.COMPLEX128, value)
    return str(value)


def _unescape_delimiter(text: str) -> str:
    return {"\\t": "\t", "tab": "\t"}.get(text, text)


def convert(reader: RecordReader, record_type: type, header: bool) -> list[str]:
    """Decode every row and return one JSON document per record."""
    if header:
        reader.parse_header(record_type())
    return [
        json.dumps(dataclasses.asdict(record), default=_json_default)
        for record in reader.iter_records(record_type)
    ]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Decode csv rows into a tagged dataclass and print them as JSON lines"
    )
    parser.add_argument("record_type", help="Dataclass to decode into, as MODULE:CLASS")
    parser.add_argument("file", type=Path, help="csv file to read")
    parser.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    parser.add_argument("-d", "--delimiter", default=",", help="Cell delimiter (default: ',')")
    parser.add_argument("--comment", default="", help="Skip records whose first line starts with this character")
    parser.add_argument(
        "--no-header",
        action="store_true",
        help="The file has no header row; every field must use index addressing",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log binding details")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.file.exists():
        print(f"Error: {args.file} not found", file=sys.stderr)
        return 1

    try:
        record_type = load_record_type(args.record_type)
    except (ImportError, AttributeError, ValueError) as e:
        print(f"Error: cannot load {args.record_type}: {e}", file=sys.stderr)
        return 1

    options = ReaderOptions(
        delimiter=_unescape_delimiter(args.delimiter),
        comment_char=args.comment,
    )
    with open(args.file, newline="") as f:
        reader = RecordReader(f, options)
        try:
            lines = convert(reader, record_type, header=not args.no_header)
        except EOFError:
            print(f"Error: {args.file} has no header row", file=sys.stderr)
            return 1
        except TypedCsvError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except TypeError as e:
            # record_type() needs defaults for every field
            print(f"Error: cannot create {args.record_type}: {e}", file=sys.stderr)
            return 1

    output = "\n".join(lines)
    if args.output:
        with open(args.output, "w") as f:
            f.write(output + "\n" if output else "")
        print(f"Wrote {len(lines)} record(s) to {args.output}", file=sys.stderr)
    elif output:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
