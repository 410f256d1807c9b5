from __future__ import annotations

import math
from typing import Callable

from ..runtime import (
    Frame,
    JsBool,
    JsNumber,
    JsString,
    JsValue,
    MiniJsRuntimeError,
    MiniJsTypeError,
)
from ..tree import BinaryOp, Node
from ..utils import js_equals, render_value

EvalFunc = Callable[[Node, Frame], JsValue]

def eval_binary(n: BinaryOp, frame: Frame, eval_func: EvalFunc) -> JsValue:
    # Both operands are always evaluated, left first; there is no short-circuiting.
    lhs = eval_func(n.left, frame)
    rhs = eval_func(n.right, frame)

    return apply_binary(n.op, lhs, rhs)

def apply_binary(op: str, lhs: JsValue, rhs: JsValue) -> JsValue:
    match op:
        case '+':
            return _add(lhs, rhs)
        case '-':
            a, b = _numeric_operands(op, lhs, rhs)
            return JsNumber(a - b)
        case '*':
            a, b = _numeric_operands(op, lhs, rhs)
            return JsNumber(a * b)
        case '/':
            a, b = _numeric_operands(op, lhs, rhs)
            return JsNumber(ieee_divide(a, b))
        case '<':
            a, b = _numeric_operands(op, lhs, rhs)
            return JsBool(a < b)
        case '>':
            a, b = _numeric_operands(op, lhs, rhs)
            return JsBool(a > b)
        case '==':
            return JsBool(js_equals(lhs, rhs))
        case _:
            raise MiniJsRuntimeError(f"Unsupported operator {op}")

def _add(lhs: JsValue, rhs: JsValue) -> JsValue:
    if isinstance(lhs, JsString) or isinstance(rhs, JsString):
        return JsString(render_value(lhs) + render_value(rhs))

    a, b = _numeric_operands('+', lhs, rhs)
    return JsNumber(a + b)

def _numeric_operands(op: str, lhs: JsValue, rhs: JsValue) -> tuple[float, float]:
    if isinstance(lhs, JsNumber) and isinstance(rhs, JsNumber):
        return lhs.value, rhs.value

    raise MiniJsTypeError(
        f"Operator '{op}' expects numbers; got {type(lhs).__name__} and {type(rhs).__name__}"
    )

def ieee_divide(a: float, b: float) -> float:
    """Float division that yields inf/nan for a zero divisor instead of raising."""
    if b != 0:
        return a / b

    if a == 0 or math.isnan(a):
        return math.nan

    # Signed zero decides the direction, as in IEEE-754.
    sign = math.copysign(1.0, a) * math.copysign(1.0, b)
    return math.inf if sign > 0 else -math.inf
