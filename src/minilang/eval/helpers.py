from __future__ import annotations

from typing import Callable, Optional

from ..tree import Node
from ..types import Frame, MiniLangRuntimeError

EvalFunc = Callable[[Node, Frame], Optional[int]]

def is_truthy(val: int) -> bool:
    """Zero is false, every other integer is true."""
    return val != 0

def eval_guard(cond: Node, frame: Frame, eval_func: EvalFunc) -> bool:
    return is_truthy(eval_int(cond, frame, eval_func))

def eval_int(node: Node, frame: Frame, eval_func: EvalFunc) -> int:
    val = eval_func(node, frame)

    if val is None:
        raise MiniLangRuntimeError("Statement used where an expression was expected")

    return val
