from __future__ import annotations

from typing import Callable

from ..runtime import Frame, JsFunction, JsValue, call_value
from ..tree import Call, FunctionDecl, FunctionExpr, Node

EvalFunc = Callable[[Node, Frame], JsValue]

def eval_fn_decl(n: FunctionDecl, frame: Frame) -> JsFunction:
    fn_value = JsFunction(params=n.params, body=n.body, frame=frame, name=n.name)
    # Bound before the body can ever run, so the function sees itself.
    frame.define(n.name, fn_value)

    return fn_value

def eval_fn_expr(n: FunctionExpr, frame: Frame) -> JsFunction:
    return JsFunction(params=n.params, body=n.body, frame=frame)

def eval_call(n: Call, frame: Frame, eval_func: EvalFunc) -> JsValue:
    callee = frame.lookup(n.callee)
    args = [eval_func(arg, frame) for arg in n.args]

    return call_value(n.callee, callee, args, frame)
