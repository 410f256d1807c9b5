from __future__ import annotations

from typing import Callable, Dict

from ..runtime import Frame, JsList, JsMap, JsValue
from ..tree import ArrayLiteral, Node, ObjectLiteral

EvalFunc = Callable[[Node, Frame], JsValue]

def eval_array(n: ArrayLiteral, frame: Frame, eval_func: EvalFunc) -> JsList:
    return JsList([eval_func(el, frame) for el in n.elements])

def eval_object(n: ObjectLiteral, frame: Frame, eval_func: EvalFunc) -> JsMap:
    slots: Dict[str, JsValue] = {}

    # A repeated key keeps the last value.
    for key, value_node in n.entries:
        slots[key] = eval_func(value_node, frame)

    return JsMap(slots)
