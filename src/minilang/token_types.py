"""
Token Types for the MiniLang Parser

Shared between lexer and parser to avoid circular dependencies.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - mirrors grammar terminals"""

    # Literals
    NUMBER = auto()
    IDENT = auto()

    # Keywords
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    FUNCTION = auto()
    END = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()

    # Assignment
    ASSIGN = auto()  # =

    # Punctuation
    LPAR = auto()
    RPAR = auto()
    COMMA = auto()  # parameter separator

    # Special
    EOF = auto()


@dataclass
class Tok:
    """Token with position info"""

    type: TT
    value: str
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"


# Source spelling of punctuation tokens (their value is empty)
PUNCT_SPELLING = {
    TT.PLUS: '+',
    TT.MINUS: '-',
    TT.STAR: '*',
    TT.SLASH: '/',
    TT.ASSIGN: '=',
    TT.LPAR: '(',
    TT.RPAR: ')',
    TT.COMMA: ',',
}


def describe(tok: Tok) -> str:
    """Human-readable token description for error messages."""
    if tok.type == TT.EOF:
        return "end of input"
    if tok.type in PUNCT_SPELLING:
        return f"'{PUNCT_SPELLING[tok.type]}'"
    return f"{tok.type.name} '{tok.value}'"
