from __future__ import annotations

from lark import Tree

from ..tree import child_nodes, node_position, render_expr
from ..types import Frame, LoopLimitExceeded, MiniLangRuntimeError
from .blocks import eval_program
from .helpers import EvalFunc, eval_guard

def eval_if_stmt(n: Tree, frame: Frame, eval_func: EvalFunc) -> None:
    nodes = child_nodes(n)

    if len(nodes) not in (2, 3):
        raise MiniLangRuntimeError("Malformed if statement")

    cond, then_body, *rest = nodes

    if eval_guard(cond, frame, eval_func):
        eval_program(then_body.children, frame, eval_func)
    elif rest:
        eval_program(rest[0].children, frame, eval_func)

def eval_while_stmt(n: Tree, frame: Frame, eval_func: EvalFunc) -> None:
    """Re-check the guard before each pass; run the body while it is non-zero."""
    nodes = child_nodes(n)

    if len(nodes) != 2:
        raise MiniLangRuntimeError("Malformed while statement")

    cond, body = nodes
    limit = frame.max_iterations
    iterations = 0

    while eval_guard(cond, frame, eval_func):
        if limit is not None and iterations >= limit:
            line, column = node_position(n)
            raise LoopLimitExceeded(limit, line, column, guard=render_expr(cond))

        eval_program(body.children, frame, eval_func)
        iterations += 1
