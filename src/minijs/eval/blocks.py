from __future__ import annotations

from typing import Callable, Iterable

from ..runtime import Frame, JsNull, JsValue
from ..tree import Node

EvalFunc = Callable[[Node, Frame], JsValue]

def eval_program(statements: Iterable[Node], frame: Frame, eval_func: EvalFunc) -> JsValue:
    """Run a statement list in order, returning the last value (null when empty)."""
    result: JsValue = JsNull()

    for stmt in statements:
        result = eval_func(stmt, frame)

    return result
