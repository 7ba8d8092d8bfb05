"""Shared helpers for working with the lark Tree/Token nodes the parser builds."""
from __future__ import annotations
from typing import List, Optional, Union
from typing_extensions import TypeAlias, TypeGuard

from lark import Token, Tree


Node: TypeAlias = Union[Tree, Token]

KEYWORD_KINDS = {'IF', 'ELSE', 'WHILE', 'FUNCTION', 'END'}


def is_tree(node: Node) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Node) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Node) -> Optional[str]:
    return node.data if is_tree(node) else None

def token_kind(node: Node) -> Optional[str]:
    return str(node.type) if is_token(node) else None

def tree_children(node: Node) -> List[Node]:
    if not is_tree(node):
        return []

    return list(node.children)

def child_nodes(node: Node) -> List[Node]:
    """Children minus keyword tokens, for statement shapes like [IF, cond, body]."""
    return [ch for ch in tree_children(node) if token_kind(ch) not in KEYWORD_KINDS]

def node_position(node: Node) -> tuple[Optional[int], Optional[int]]:
    """Line/column of the first token under node."""
    if is_token(node):
        return getattr(node, "line", None), getattr(node, "column", None)

    for child in tree_children(node):
        line, column = node_position(child)
        if line is not None:
            return line, column

    return None, None

def render_expr(node: Node) -> str:
    """Render an expression tree back to source-like text."""
    if is_token(node):
        return str(node.value)

    label = tree_label(node)
    if label in ('addexpr', 'mulexpr'):
        parts = [render_expr(ch) if tree_label(ch) in ('addop', 'mulop') else _render_operand(ch, label)
                 for ch in tree_children(node)]
        return " ".join(parts)

    return " ".join(render_expr(ch) for ch in tree_children(node))

def _render_operand(node: Node, parent: str) -> str:
    text = render_expr(node)

    # Chains are flat, so a nested chain only comes from parens, except a
    # product sitting inside a sum.
    if tree_label(node) == 'addexpr' or (tree_label(node) == 'mulexpr' and parent == 'mulexpr'):
        return f"({text})"

    return text
