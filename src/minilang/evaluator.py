from __future__ import annotations

from typing import Callable, Dict, Optional

from lark import Token, Tree

from .tree import Node, is_token, node_position
from .types import Environment, Frame, MiniLangError, MiniLangRuntimeError, UndefinedVariable

from .eval.bind import eval_assign_stmt
from .eval.blocks import eval_program
from .eval.expr import eval_infix
from .eval.fn import eval_fn_def
from .eval.loops import eval_if_stmt, eval_while_stmt


def _maybe_attach_location(exc: MiniLangError, node: Node) -> None:
    if exc.line is not None:
        return

    line, column = node_position(node)
    if line is None:
        return

    exc.line = line
    exc.column = column

# ---------------- Public API ----------------

def eval_expr(ast: Node, frame: Optional[Frame]=None, env: Optional[Environment]=None) -> Optional[int]:
    """Evaluate one tree (statement, block, program or bare expression)."""
    if frame is None:
        frame = Frame(env=env)

    return eval_node(ast, frame)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, frame: Frame) -> Optional[int]:
    try:
        return _eval_node_inner(n, frame)
    except MiniLangRuntimeError as e:
        _maybe_attach_location(e, n)
        raise


def _eval_node_inner(n: Node, frame: Frame) -> Optional[int]:
    if is_token(n):
        return _eval_token(n, frame)

    handler = _NODE_DISPATCH.get(n.data)
    if handler is not None:
        return handler(n, frame)

    match n.data:
        case 'program' | 'block':
            return eval_program(n.children, frame, eval_node)
        case 'exprstmt':
            return eval_node(n.children[0], frame)
        case 'addexpr' | 'mulexpr':
            return eval_infix(n.children, frame, eval_node)
        case _:
            raise MiniLangRuntimeError(f"Unknown node type: {n.data}")


def _eval_token(t: Token, frame: Frame) -> int:
    match t.type:
        case 'NUMBER':
            return int(t.value)
        case 'IDENT':
            name = str(t.value)
            if name not in frame.env:
                raise UndefinedVariable(name, getattr(t, 'line', None), getattr(t, 'column', None))
            return frame.env.get(name)
        case _:
            raise MiniLangRuntimeError(f"Unhandled token {t.type}:{t.value}")


_NODE_DISPATCH: Dict[str, Callable[[Tree, Frame], Optional[int]]] = {
    'assignstmt': lambda n, frame: eval_assign_stmt(n, frame, eval_node),
    'fndef': lambda n, frame: eval_fn_def(n, frame, eval_node),
    'ifstmt': lambda n, frame: eval_if_stmt(n, frame, eval_node),
    'whilestmt': lambda n, frame: eval_while_stmt(n, frame, eval_node),
}
