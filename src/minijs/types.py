from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple
from typing_extensions import TypeAlias, TypeGuard
from .tree import Block

if TYPE_CHECKING:
    from .scheduler import Scheduler

# ---------- Value Model ----------

@dataclass
class JsNull:
    def __repr__(self) -> str:
        return "null"

@dataclass
class JsNumber:
    value: float
    def __repr__(self) -> str:
        v = self.value
        return str(int(v)) if v.is_integer() else str(v)

@dataclass
class JsString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass
class JsBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass
class JsList:
    items: List['JsValue']
    def __repr__(self) -> str:
        return "[" + ", ".join(repr(x) for x in self.items) + "]"

@dataclass
class JsMap:
    slots: Dict[str, 'JsValue']
    def __repr__(self) -> str:
        pairs = []

        for k, v in self.slots.items():
            pairs.append(f"{k}: {repr(v)}")

        return "{ " + ", ".join(pairs) + " }"

@dataclass(frozen=True, eq=False)
class JsFunction:
    params: Tuple[str, ...]
    body: Block                  # AST node
    frame: 'Frame'               # Closure frame
    name: Optional[str] = None
    def __repr__(self) -> str:
        label = self.name or "anonymous"
        param_desc = ", ".join(self.params) if self.params else "nullary"
        return f"<function {label} params={param_desc}>"

NativeFn = Callable[['Frame', List['JsValue']], 'JsValue']

@dataclass(frozen=True, eq=False)
class JsNative:
    name: str
    fn: NativeFn
    arity: Optional[int] = None
    def __repr__(self) -> str:
        return f"<native {self.name}>"

JsValue: TypeAlias = (
    JsNull
    | JsNumber
    | JsString
    | JsBool
    | JsList
    | JsMap
    | JsFunction
    | JsNative
)

class Frame:
    """One scope in the lexical chain.

    ``source`` and ``scheduler`` describe the current run and are inherited from
    the parent unless given explicitly.
    """

    def __init__(self, parent: Optional['Frame']=None, source: Optional[str]=None,
                 scheduler: Optional['Scheduler']=None):
        self.parent = parent
        self.vars: Dict[str, JsValue] = {}
        self.source: Optional[str]
        self.scheduler: Optional['Scheduler']

        if parent is None and Builtins.stdlib_functions:
            for name, native in Builtins.stdlib_functions.items():
                self.vars[name] = native

        if source is not None:
            self.source = source
        elif parent is not None:
            self.source = parent.source
        else:
            self.source = None

        if scheduler is not None:
            self.scheduler = scheduler
        elif parent is not None:
            self.scheduler = parent.scheduler
        else:
            self.scheduler = None

    def define(self, name: str, val: JsValue) -> None:
        self.vars[name] = val

    def lookup(self, name: str) -> JsValue:
        frame: Optional[Frame] = self

        while frame is not None:
            if name in frame.vars:
                return frame.vars[name]
            frame = frame.parent

        raise MiniJsNameError(name, f"Undefined variable: {name}")

    def assign(self, name: str, val: JsValue) -> None:
        frame: Optional[Frame] = self

        while frame is not None:
            if name in frame.vars:
                frame.vars[name] = val
                return
            frame = frame.parent

        raise MiniJsNameError(name, f"Cannot assign to undefined variable: {name}")

# ---------- Exceptions ----------

class MiniJsRuntimeError(Exception):
    line: Optional[int]
    column: Optional[int]

    def __init__(self, message: str):
        super().__init__(message)
        self.line = None
        self.column = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        msg = super().__str__()

        if self.line is None:
            return msg

        if self.column is None:
            return f"{msg} (line {self.line})"

        return f"{msg} (line {self.line}, col {self.column})"

class MiniJsNameError(MiniJsRuntimeError):
    def __init__(self, name: str, message: Optional[str] = None):
        super().__init__(message or f"Undefined variable: {name}")
        self.name = name

class MiniJsInvocationError(MiniJsRuntimeError):
    def __init__(self, callee: str, value: 'JsValue'):
        super().__init__(f"Not a function: {callee}")
        self.callee = callee
        self.value = value

class MiniJsTypeError(MiniJsRuntimeError):
    pass

class MiniJsArityError(MiniJsRuntimeError):
    pass

_JS_VALUE_TYPES: Tuple[type, ...] = (
    JsNull,
    JsNumber,
    JsString,
    JsBool,
    JsList,
    JsMap,
    JsFunction,
    JsNative,
)

def is_js_value(value: object) -> TypeGuard[JsValue]:
    return isinstance(value, _JS_VALUE_TYPES)

def ensure_js_value(value: object) -> JsValue:
    if value is None:
        return JsNull()
    if is_js_value(value):
        return value
    raise MiniJsTypeError(f"Unexpected value type {type(value).__name__}")

class Builtins:
    stdlib_functions: Dict[str, JsNative] = {}
