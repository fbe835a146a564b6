"""Lexer for csv field tags."""

import ply.lex as lex


class TagLexer:
    """Lexer for tokenizing ``attr[:value](;attr[:value])*`` tags.

    Every character belongs to some token, so the lexer has no error rule.
    """

    # Token list
    tokens = [
        "TEXT",
        "COLON",
        "SEMI",
    ]

    # Simple tokens
    t_COLON = r":"
    t_SEMI = r";"

    # Keys and values are taken verbatim, whitespace included
    t_TEXT = r"[^;:]+"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer; ply's missing-t_error warning is silenced."""
        kwargs.setdefault("errorlog", lex.NullLogger())
        self.lexer = lex.lex(module=self, **kwargs)

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize a tag and return all tokens."""
        self.lexer.input(data)
        return list(self.lexer)
