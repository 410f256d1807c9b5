from __future__ import annotations

import logging
import math
import os as _os
from typing import Optional

from .types import (
    JsValue,
    JsNull,
    JsNumber,
    JsString,
    JsBool,
    JsList,
    JsMap,
    JsFunction,
    JsNative,
)

DEBUG_PY_TRACE_ENV = "MINIJS_DEBUG_PY_TRACE"
LOG_LEVEL_ENV = "MINIJS_LOG_LEVEL"


def debug_py_trace_enabled() -> bool:
    """True when Python tracebacks should accompany reported errors."""
    return bool(_os.environ.get(DEBUG_PY_TRACE_ENV))


def configured_log_level(default: int = logging.WARNING) -> int:
    raw = _os.environ.get(LOG_LEVEL_ENV)
    if not raw:
        return default

    raw = raw.strip()
    if raw.isdigit():
        return int(raw)

    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


def format_number(num: float) -> str:
    """Six fixed decimals with trailing zeros (and a bare point) trimmed."""
    if math.isnan(num):
        return "NaN"
    if math.isinf(num):
        return "Infinity" if num > 0 else "-Infinity"

    text = f"{num:.6f}".rstrip("0").rstrip(".")
    if text == "-0":
        return "0"
    return text


def render_value(value: Optional[JsValue]) -> str:
    match value:
        case JsNumber(value=num):
            return format_number(num)
        case JsString(value=s):
            return s
        case JsBool(value=b):
            return "true" if b else "false"
        case JsNull() | None:
            return "null"
        case JsList():
            return "[Array]"
        case JsMap():
            return "[Object]"
        case JsFunction() | JsNative():
            return "[Function]"
        case _:
            return str(value)


def js_equals(lhs: JsValue, rhs: JsValue) -> bool:
    match (lhs, rhs):
        case (JsNumber(value=a), JsNumber(value=b)):
            return a == b
        case (JsString(value=a), JsString(value=b)):
            return a == b
        case (JsBool(value=a), JsBool(value=b)):
            return a == b
        case (JsNull(), JsNull()):
            return True
        case (
            (JsList(), JsList())
            | (JsMap(), JsMap())
            | (JsFunction(), JsFunction())
            | (JsNative(), JsNative())
        ):
            return lhs is rhs
        case _:
            return False
