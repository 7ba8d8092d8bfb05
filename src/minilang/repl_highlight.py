"""prompt_toolkit lexer for live MiniLang syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as MiniLexer, LexError
from .token_types import PUNCT_SPELLING, TT

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "number": "ansimagenta",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "error": "bold ansired",
}

# Token type → highlight group.
_TT_GROUP = {
    TT.IF: "keyword",
    TT.ELSE: "keyword",
    TT.WHILE: "keyword",
    TT.FUNCTION: "keyword",
    TT.END: "keyword",
    TT.NUMBER: "number",
    TT.IDENT: "identifier",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.ASSIGN: "operator",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.COMMA: "punctuation",
}


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Scan a single line and return styled fragments."""
    if not text:
        return [("", "")]

    lexer = MiniLexer(text)
    result: StyleAndTextTuples = []
    pos = 0
    prev_type = None

    while True:
        try:
            tok = lexer.next_token()
        except LexError:
            # Everything from the offending character on is marked as an error.
            start = lexer.pos
            if start > pos:
                result.append(("", text[pos:start]))
            result.append((GROUP_STYLE["error"], text[start:]))
            return result

        if tok.type == TT.EOF:
            break

        tok_text = tok.value or PUNCT_SPELLING.get(tok.type, "")
        idx = tok.column - 1

        # Unstyled gap before token.
        if idx > pos:
            result.append(("", text[pos:idx]))

        group = _TT_GROUP.get(tok.type, "")
        if tok.type == TT.IDENT and prev_type == TT.FUNCTION:
            group = "function"
        result.append((GROUP_STYLE.get(group, ""), tok_text))

        pos = idx + len(tok_text)
        prev_type = tok.type

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class MiniLangLexer(Lexer):
    """prompt_toolkit Lexer that highlights MiniLang source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights lazily, once per line.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
