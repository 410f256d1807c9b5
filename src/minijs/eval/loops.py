from __future__ import annotations

from typing import Callable

from ..runtime import Frame, JsNull, JsValue
from ..tree import If, Node, While
from .blocks import eval_program
from .helpers import is_truthy as _is_truthy

EvalFunc = Callable[[Node, Frame], JsValue]

# if/while bodies run in the enclosing frame; only calls open a new scope.

def eval_if_stmt(n: If, frame: Frame, eval_func: EvalFunc) -> JsValue:
    cond = eval_func(n.cond, frame)

    if _is_truthy(cond):
        return eval_program(n.then_branch.statements, frame, eval_func)

    if n.else_branch is not None:
        return eval_program(n.else_branch.statements, frame, eval_func)

    return JsNull()

def eval_while_stmt(n: While, frame: Frame, eval_func: EvalFunc) -> JsValue:
    while _is_truthy(eval_func(n.cond, frame)):
        eval_program(n.body.statements, frame, eval_func)

    return JsNull()
