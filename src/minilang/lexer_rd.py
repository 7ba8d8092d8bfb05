"""
Lexer for MiniLang - Recursive Descent Parser

Turns MiniLang source code into tokens, one per call.

Features:
- Pull-based: the parser asks for the next token on demand
- Position tracking (line, column)
- Idempotent EOF once the buffer is exhausted
"""

from typing import List, Optional

from .token_types import TT, Tok
from .types import MiniLangError

# ============================================================================
# Errors
# ============================================================================

class LexError(MiniLangError):
    """Lexical analysis error"""
    pass

class InvalidCharacter(LexError):
    """Character outside every token class"""

    def __init__(self, char: str, line: int, column: int):
        super().__init__(f"Invalid character {char!r}", line, column)
        self.char = char

# ============================================================================
# Lexer Implementation
# ============================================================================

WHITESPACE = (' ', '\t', '\r', '\n', '\f', '\v')

def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'

def is_ident_start(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'

def is_ident_char(ch: str) -> bool:
    return is_ident_start(ch) or is_digit(ch)


class Lexer:
    """
    MiniLang scanner.

    The cursor only moves forward. Whitespace separates lexemes and is
    otherwise ignored.
    """

    # Keyword mapping
    KEYWORDS = {
        'if': TT.IF,
        'else': TT.ELSE,
        'while': TT.WHILE,
        'function': TT.FUNCTION,
        'end': TT.END,
    }

    # Single-character punctuation
    OPERATORS = {
        '+': TT.PLUS,
        '-': TT.MINUS,
        '*': TT.STAR,
        '/': TT.SLASH,
        '(': TT.LPAR,
        ')': TT.RPAR,
        '=': TT.ASSIGN,
        ',': TT.COMMA,
    }

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def next_token(self) -> Tok:
        """Scan and return the next token, EOF forever once exhausted"""
        self.skip_whitespace()

        if self.pos >= len(self.source):
            return Tok(TT.EOF, '', self.line, self.column)

        ch = self.peek()

        if is_digit(ch):
            return self.scan_number()

        if is_ident_start(ch):
            return self.scan_identifier()

        return self.scan_operator()

    def tokenize(self) -> List[Tok]:
        """Tokenize the rest of the source, EOF included"""
        tokens = []

        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.type == TT.EOF:
                return tokens

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_number(self) -> Tok:
        """Scan integer literal"""
        line, column = self.line, self.column
        value = ''

        while is_digit(self.peek()):
            value += self.advance()

        return Tok(TT.NUMBER, value, line, column)

    def scan_identifier(self) -> Tok:
        """Scan identifier or keyword"""
        line, column = self.line, self.column
        value = ''

        while is_ident_char(self.peek()):
            value += self.advance()

        token_type = self.KEYWORDS.get(value, TT.IDENT)
        return Tok(token_type, value, line, column)

    def scan_operator(self) -> Tok:
        """Scan operators and punctuation"""
        ch = self.peek()
        op_type = self.OPERATORS.get(ch)

        if op_type is None:
            raise InvalidCharacter(ch, self.line, self.column)

        tok = Tok(op_type, '', self.line, self.column)
        self.advance()
        return tok

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self) -> str:
        """Consume one character, keeping line/column current"""
        ch = self.source[self.pos]
        self.pos += 1

        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        return ch

    def skip_whitespace(self) -> None:
        while self.pos < len(self.source) and self.peek() in WHITESPACE:
            self.advance()


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()


def try_tokenize(source: str) -> Optional[List[Tok]]:
    """Tokenize, or return None when the source holds an invalid character"""
    try:
        return tokenize(source)
    except LexError:
        return None
