"""Parser for csv field tags."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import ply.yacc as yacc

from typed_csv.errors import InvalidIndexSyntax, MalformedTagSyntax, TagSyntaxError
from typed_csv.parsing.tag_lexer import TagLexer

HEADER_ATTR = "header"
INDEX_ATTR = "index"
USE_CUSTOM_SETTER_ATTR = "useCustomSetter"

_INDEX_RE = re.compile(r"[+-]?[0-9]+")


@dataclass
class TagAttributes:
    """Attributes declared by one field's tag, before column resolution."""

    header_name: str = ""
    has_header: bool = False
    column_index: int = 0
    has_index: bool = False
    use_custom_setter: bool = False


class TagParser:
    """Parser for the csv tag grammar.

    The grammar only splits the tag into clauses and clause parts; the
    meaning of each clause is applied afterwards in ``parse``.
    """

    tokens = TagLexer.tokens

    def __init__(self) -> None:
        self.lexer = TagLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_tag(self, p: yacc.YaccProduction) -> None:
        """tag : clause_list"""
        p[0] = p[1]

    def p_clause_list_single(self, p: yacc.YaccProduction) -> None:
        """clause_list : clause"""
        p[0] = [p[1]]

    def p_clause_list_multiple(self, p: yacc.YaccProduction) -> None:
        """clause_list : clause_list SEMI clause"""
        p[0] = p[1] + [p[3]]

    def p_clause_key(self, p: yacc.YaccProduction) -> None:
        """clause : opt_text"""
        p[0] = [p[1]]

    def p_clause_part(self, p: yacc.YaccProduction) -> None:
        """clause : clause COLON opt_text"""
        p[0] = p[1] + [p[3]]

    def p_opt_text(self, p: yacc.YaccProduction) -> None:
        """opt_text : TEXT"""
        p[0] = p[1]

    def p_opt_text_empty(self, p: yacc.YaccProduction) -> None:
        """opt_text : empty"""
        p[0] = ""

    def p_empty(self, p: yacc.YaccProduction) -> None:
        """empty :"""
        p[0] = None

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise TagSyntaxError("", f"Syntax error at '{p.value}' (position {p.lexpos})")
        raise TagSyntaxError("", "Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse_clauses(self, data: str) -> list[list[str]]:
        """Split a tag into clauses, each a list of ``:``-separated parts."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)
        if not data:
            return [[""]]
        return self.parser.parse(data, lexer=self.lexer.lexer)

    def parse(self, tag: str) -> TagAttributes:
        """Parse a tag into its attributes.

        Raises InvalidIndexSyntax for a non-integer or negative index and
        MalformedTagSyntax when neither header nor index is declared.
        Unknown keys are ignored.
        """
        attrs = TagAttributes()

        for parts in self.parse_clauses(tag):
            key = parts[0]
            value = parts[1] if len(parts) > 1 else ""

            if key == HEADER_ATTR:
                attrs.has_header = True
                attrs.header_name = value
            elif key == INDEX_ATTR:
                attrs.has_index = True
                if not _INDEX_RE.fullmatch(value):
                    raise InvalidIndexSyntax(tag)
                attrs.column_index = int(value)
                if attrs.column_index < 0:
                    raise InvalidIndexSyntax(tag)
            elif key == USE_CUSTOM_SETTER_ATTR:
                attrs.use_custom_setter = True

        if not attrs.has_header and not attrs.has_index:
            raise MalformedTagSyntax(tag)

        return attrs


_default_parser: TagParser | None = None


def parse_tag(tag: str) -> TagAttributes:
    """Parse a tag with a shared, lazily built TagParser."""
    global _default_parser
    if _default_parser is None:
        _default_parser = TagParser()
    return _default_parser.parse(tag)
