"""
Recursive Descent Parser for MiniLang

Structure:
- Lexer: pulled one token at a time, never tokenized up front
- Parser: recursive descent, one statement tree per request
- AST: lark Tree/Token nodes, handed to the evaluator and then dropped

Statement trees:
- assignstmt: [IDENT, expr]
- exprstmt:   [expr]
- ifstmt:     [IF, cond, block, block?]
- whilestmt:  [WHILE, cond, block]
- fndef:      [IDENT, paramlist, expr]

Expressions are NUMBER/IDENT tokens or flat addexpr/mulexpr chains
of the form [operand, op, operand, op, operand, ...], folded left to right.
"""

from typing import Iterator, Optional

from lark import Token, Tree

from .lexer_rd import Lexer
from .token_types import PUNCT_SPELLING, TT, Tok, describe
from .tree import Node
from .types import MiniLangError

# ============================================================================
# Errors
# ============================================================================

class ParseError(MiniLangError):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.token = token
        if token is None:
            super().__init__(message)
        else:
            super().__init__(message, token.line, token.column)

class UnexpectedToken(ParseError):
    """Lookahead does not fit the rule being applied"""
    def __init__(self, token: Tok, expected: str):
        super().__init__(f"Unexpected token: expected {expected}, got {describe(token)}", token)
        self.expected = expected

# ============================================================================
# Parser
# ============================================================================

EXPR_START = (TT.NUMBER, TT.IDENT, TT.LPAR)

def to_lark_token(tok: Tok) -> Token:
    """Convert a scanner token into the lark Token stored in the tree"""
    value = tok.value or PUNCT_SPELLING.get(tok.type, '')
    return Token(tok.type.name, value, line=tok.line, column=tok.column)


class Parser:
    """
    Recursive descent parser for MiniLang.

    Expression precedence (lowest to highest):
    1. add (+, -)
    2. mul (*, /)
    3. primary (numbers, identifiers, parens)
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.current = lexer.next_token()
        self.lookahead: Optional[Tok] = None

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Tok:
        """Look ahead at token (offset 0 or 1)"""
        if offset == 0:
            return self.current
        if offset != 1:
            raise ValueError(f"peek() supports offsets 0 and 1, got {offset}")
        if self.lookahead is None:
            self.lookahead = self.lexer.next_token()
        return self.lookahead

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        if self.lookahead is not None:
            self.current = self.lookahead
            self.lookahead = None
        else:
            self.current = self.lexer.next_token()
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, expected: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise UnexpectedToken"""
        if not self.check(token_type):
            if expected is None:
                expected = f"'{PUNCT_SPELLING[token_type]}'" if token_type in PUNCT_SPELLING else token_type.name
            raise UnexpectedToken(self.current, expected)
        return self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def statements(self) -> Iterator[Tree]:
        """Yield statement trees until end of input"""
        while not self.check(TT.EOF):
            yield self.parse_statement()

    def parse(self) -> Tree:
        """Parse entire program"""
        return Tree('program', list(self.statements()))

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Tree:
        """
        Parse a single statement.

        IDENT starts both assignments and expression statements; the token
        after it decides.
        """
        if self.check(TT.IF):
            return self.parse_if_stmt()
        if self.check(TT.WHILE):
            return self.parse_while_stmt()
        if self.check(TT.FUNCTION):
            return self.parse_fn_stmt()

        if self.check(TT.IDENT) and self.peek(1).type == TT.ASSIGN:
            return self.parse_assign_stmt()

        if self.check(*EXPR_START):
            return Tree('exprstmt', [self.parse_expr()])

        raise UnexpectedToken(self.current, "statement")

    def parse_assign_stmt(self) -> Tree:
        """Parse assignment: IDENT = expr"""
        name = self.expect(TT.IDENT)
        self.expect(TT.ASSIGN)
        value = self.parse_expr()
        return Tree('assignstmt', [to_lark_token(name), value])

    def parse_if_stmt(self) -> Tree:
        """
        Parse if statement:
        if (expr) block [else block] end
        """
        if_tok = self.expect(TT.IF)
        cond = self.parse_guard()
        then_body = self.parse_block(TT.ELSE, TT.END)

        children = [to_lark_token(if_tok), cond, then_body]

        if self.match(TT.ELSE):
            children.append(self.parse_block(TT.END, TT.ELSE))

        self.close_block()
        return Tree('ifstmt', children)

    def parse_while_stmt(self) -> Tree:
        """Parse while loop: while (expr) block end"""
        while_tok = self.expect(TT.WHILE)
        cond = self.parse_guard()
        body = self.parse_block(TT.END)
        self.close_block()
        return Tree('whilestmt', [to_lark_token(while_tok), cond, body])

    def parse_fn_stmt(self) -> Tree:
        """
        Parse function definition:
        function name(params) expr
        """
        self.expect(TT.FUNCTION)
        name = self.expect(TT.IDENT, "function name")

        self.expect(TT.LPAR)
        params = self.parse_param_list()
        self.expect(TT.RPAR)

        body = self.parse_expr()
        return Tree('fndef', [to_lark_token(name), params, body])

    def parse_param_list(self) -> Tree:
        """Parse function parameter list"""
        params = []

        if self.check(TT.RPAR):
            return Tree('paramlist', params)

        params.append(to_lark_token(self.expect(TT.IDENT, "parameter name")))
        while self.match(TT.COMMA):
            params.append(to_lark_token(self.expect(TT.IDENT, "parameter name")))

        return Tree('paramlist', params)

    def parse_guard(self) -> Node:
        """Parse parenthesized condition: ( expr )"""
        self.expect(TT.LPAR)
        cond = self.parse_expr()
        self.expect(TT.RPAR)
        return cond

    def parse_block(self, *terminators: TT) -> Tree:
        """Collect statements until a terminator or EOF"""
        stmts = []
        while not self.check(TT.EOF, *terminators):
            stmts.append(self.parse_statement())
        return Tree('block', stmts)

    def close_block(self) -> None:
        """Consume a block's `end`; end of input closes it as well"""
        if self.check(TT.EOF):
            return
        self.expect(TT.END, "'end'")

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Node:
        """Parse expression (entry point)"""
        return self.parse_add_expr()

    def parse_add_expr(self) -> Node:
        """Parse addition/subtraction chain: term (+|- term)*"""
        first = self.parse_mul_expr()
        parts = [first]

        while self.check(TT.PLUS, TT.MINUS):
            op = self.advance()
            parts.append(Tree('addop', [to_lark_token(op)]))
            parts.append(self.parse_mul_expr())

        return Tree('addexpr', parts) if len(parts) > 1 else first

    def parse_mul_expr(self) -> Node:
        """Parse multiplication/division chain: primary (*|/ primary)*"""
        first = self.parse_primary_expr()
        parts = [first]

        while self.check(TT.STAR, TT.SLASH):
            op = self.advance()
            parts.append(Tree('mulop', [to_lark_token(op)]))
            parts.append(self.parse_primary_expr())

        return Tree('mulexpr', parts) if len(parts) > 1 else first

    def parse_primary_expr(self) -> Node:
        """
        Parse primary expressions:
        - Integer literals
        - Identifiers
        - Parenthesized expressions
        """
        if self.check(TT.NUMBER, TT.IDENT):
            return to_lark_token(self.advance())

        if self.match(TT.LPAR):
            expr = self.parse_expr()
            self.expect(TT.RPAR)
            return expr

        raise UnexpectedToken(self.current, "number, identifier or '('")


# ============================================================================
# Entry points
# ============================================================================

def parse_source(source: str) -> Tree:
    """
    Parse MiniLang source code to a program tree.

    Used for tree dumps and tests; `runner.run` evaluates statement by
    statement instead.
    """
    return Parser(Lexer(source)).parse()


def iter_statements(source: str) -> Iterator[Tree]:
    """Lazily parse source, one statement tree at a time"""
    return Parser(Lexer(source)).statements()
