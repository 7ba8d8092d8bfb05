from __future__ import annotations

from lark import Tree

from ..types import Frame
from .bind import assign_ident
from .helpers import EvalFunc, eval_int

def eval_fn_def(n: Tree, frame: Frame, eval_func: EvalFunc) -> None:
    """Evaluate the body once, in the current environment, and bind the result
    under the function's name. Parameters are parsed but never bound."""
    name_tok, _params, body = n.children
    value = eval_int(body, frame, eval_func)
    assign_ident(str(name_tok.value), value, frame)
