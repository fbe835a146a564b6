"""Parsing module for the csv tag grammar."""

from typed_csv.parsing.tag_lexer import TagLexer
from typed_csv.parsing.tag_parser import TagAttributes, TagParser, parse_tag

__all__ = [
    "TagAttributes",
    "TagLexer",
    "TagParser",
    "parse_tag",
]
