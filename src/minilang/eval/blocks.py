from __future__ import annotations

from typing import Iterable, Optional

from ..tree import Node
from ..types import Frame
from .helpers import EvalFunc

def eval_program(children: Iterable[Node], frame: Frame, eval_func: EvalFunc) -> Optional[int]:
    """Run statements in order, returning the last expression statement's value."""
    result: Optional[int] = None

    for child in children:
        value = eval_func(child, frame)
        if value is not None:
            result = value

    return result
