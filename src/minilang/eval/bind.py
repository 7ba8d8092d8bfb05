from __future__ import annotations

from lark import Tree

from ..types import Frame
from .helpers import EvalFunc, eval_int

def assign_ident(name: str, value: int, frame: Frame) -> None:
    """Insert or overwrite a binding; no merge, no redefinition check."""
    frame.env.set(name, value)

def eval_assign_stmt(n: Tree, frame: Frame, eval_func: EvalFunc) -> None:
    name_tok, rhs = n.children
    value = eval_int(rhs, frame, eval_func)
    assign_ident(str(name_tok.value), value, frame)
