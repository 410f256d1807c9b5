from __future__ import annotations

from ..runtime import JsBool, JsNumber, JsValue

def is_truthy(val: JsValue) -> bool:
    """Booleans are themselves and numbers are true when non-zero (NaN included).

    Every other kind is false.
    """
    match val:
        case JsBool(value=b):
            return b
        case JsNumber(value=num):
            return num != 0
        case _:
            return False
