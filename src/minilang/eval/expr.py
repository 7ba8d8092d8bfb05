from __future__ import annotations

from typing import List

from lark import Token, Tree

from ..tree import Node
from ..types import DivisionByZero, Frame, MiniLangRuntimeError
from .helpers import EvalFunc, eval_int

def as_op(node: Node) -> Token:
    """Unwrap addop/mulop into the operator token."""
    if isinstance(node, Tree) and node.data in ('addop', 'mulop'):
        return node.children[0]

    if isinstance(node, Token):
        return node

    raise MiniLangRuntimeError(f"Malformed operator node {node!r}")

def truncating_div(lhs: int, rhs: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(lhs) // abs(rhs)
    return -q if (lhs < 0) != (rhs < 0) else q

def apply_binary_operator(op: Token, lhs: int, rhs: int) -> int:
    match op.type:
        case 'PLUS':
            return lhs + rhs
        case 'MINUS':
            return lhs - rhs
        case 'STAR':
            return lhs * rhs
        case 'SLASH':
            if rhs == 0:
                raise DivisionByZero(getattr(op, 'line', None), getattr(op, 'column', None))
            return truncating_div(lhs, rhs)
        case _:
            raise MiniLangRuntimeError(f"Unsupported operator {op.value!r}")

def eval_infix(children: List[Node], frame: Frame, eval_func: EvalFunc) -> int:
    """Fold [operand, op, operand, ...] left to right."""
    it = iter(children)
    acc = eval_int(next(it), frame, eval_func)

    for x in it:
        op = as_op(x)
        rhs = eval_int(next(it), frame, eval_func)
        acc = apply_binary_operator(op, acc, rhs)

    return acc
