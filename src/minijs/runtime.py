from __future__ import annotations

import importlib
from typing import List, Optional
from .types import (
    JsNull, JsNumber, JsString, JsBool, JsList, JsMap, JsFunction, JsNative,
    JsValue, NativeFn, Frame,
    MiniJsRuntimeError, MiniJsNameError, MiniJsInvocationError, MiniJsTypeError,
    MiniJsArityError, Builtins,
    is_js_value, ensure_js_value,
)

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_stdlib hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("minijs.stdlib")
    _STDLIB_INITIALIZED = True

def register_stdlib(name: str, *, arity: Optional[int] = None):
    def dec(fn: NativeFn):
        Builtins.stdlib_functions[name] = JsNative(name=name, fn=fn, arity=arity)
        return fn

    return dec

def call_native(native: JsNative, args: List[JsValue], frame: Frame) -> JsValue:
    if native.arity is not None and len(args) != native.arity:
        raise MiniJsArityError(f"{native.name} expects {native.arity} argument(s); got {len(args)}")

    return ensure_js_value(native.fn(frame, args))

def call_function(fn: JsFunction, positional: List[JsValue]) -> JsValue:
    """
    Call semantics:
    - the callee frame's parent is the closure frame, never the caller's
    - parameters bind positionally; extra args are dropped and missing params stay unbound
    - the result is the value of the body's last statement
    """
    from .evaluator import eval_node  # local import to avoid cycle

    callee_frame = Frame(parent=fn.frame)

    for name, val in zip(fn.params, positional):
        callee_frame.define(name, val)

    return ensure_js_value(eval_node(fn.body, callee_frame))

def call_value(callee: str, value: JsValue, args: List[JsValue], frame: Frame) -> JsValue:
    match value:
        case JsNative():
            return call_native(value, args, frame)
        case JsFunction():
            return call_function(value, args)
        case _:
            raise MiniJsInvocationError(callee, value)
