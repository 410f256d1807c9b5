"""Built-in host functions (print, setTimeout) registered via minijs.runtime."""

from __future__ import annotations

import math
from typing import List

from .runtime import register_stdlib, Frame, JsFunction, JsNull, JsNumber, JsValue, MiniJsRuntimeError
from .utils import render_value

@register_stdlib("print")
def std_print(_frame: Frame, args: List[JsValue]) -> JsNull:
    rendered = [render_value(arg) for arg in args]
    print(*rendered)
    return JsNull()

@register_stdlib("setTimeout")
def std_set_timeout(frame: Frame, args: List[JsValue]) -> JsNull:
    if not args or not isinstance(args[0], JsFunction):
        return JsNull()

    fn = args[0]
    delay = args[1] if len(args) > 1 else None
    # Non-numeric, NaN and infinite delays all mean "as soon as possible".
    delay_ms = delay.value if isinstance(delay, JsNumber) and math.isfinite(delay.value) else 0.0

    scheduler = frame.scheduler
    if scheduler is None:
        raise MiniJsRuntimeError("setTimeout requires a scheduler; run code through an Interpreter")

    def callback() -> None:
        from .evaluator import eval_expr  # local import to avoid cycle
        # Parameters are never bound for deferred calls.
        eval_expr(fn.body, Frame(parent=fn.frame))

    scheduler.schedule(delay_ms, callback, label=f"setTimeout({fn.name or 'anonymous'})")
    return JsNull()
