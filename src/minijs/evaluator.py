from __future__ import annotations

from typing import Optional

from .runtime import (
    Frame,
    JsNumber,
    JsString,
    JsValue,
    MiniJsRuntimeError,
    init_stdlib,
)
from .tree import (
    ArrayLiteral,
    Assign,
    BinaryOp,
    Block,
    Call,
    FunctionDecl,
    FunctionExpr,
    Identifier,
    If,
    Node,
    NumberLiteral,
    ObjectLiteral,
    Program,
    StringLiteral,
    VarDecl,
    While,
)

from .eval.blocks import eval_program
from .eval.expr import eval_binary
from .eval.fn import eval_call, eval_fn_decl, eval_fn_expr
from .eval.literals import eval_array, eval_object
from .eval.loops import eval_if_stmt, eval_while_stmt


MAX_DEPTH_MESSAGE = "Maximum call depth exceeded"


def _maybe_attach_location(exc: MiniJsRuntimeError, node: Node) -> None:
    # The innermost node that knows its position wins.
    if exc.line is not None or node.line is None:
        return

    exc.line = node.line
    exc.column = node.column

# ---------------- Public API ----------------

def eval_expr(ast: Node, frame: Optional[Frame]=None, source: Optional[str]=None) -> JsValue:
    init_stdlib()

    if frame is None:
        frame = Frame(source=source)
    elif source is not None:
        frame.source = source

    try:
        return eval_node(ast, frame)
    except RecursionError as exc:
        # Exhausted outside any call site; no position is meaningful here.
        raise MiniJsRuntimeError(MAX_DEPTH_MESSAGE) from exc

# ---------------- Core evaluator ----------------

def eval_node(n: Node, frame: Frame) -> JsValue:
    try:
        return _eval_node_inner(n, frame)
    except MiniJsRuntimeError as e:
        _maybe_attach_location(e, n)
        raise
    except RecursionError as exc:
        # Converted at the innermost call site with enough stack left to do so.
        if not isinstance(n, Call):
            raise
        err = MiniJsRuntimeError(MAX_DEPTH_MESSAGE)
        _maybe_attach_location(err, n)
        raise err from exc


def _eval_node_inner(n: Node, frame: Frame) -> JsValue:
    match n:
        case NumberLiteral(value=value):
            return JsNumber(value)
        case StringLiteral(value=value):
            return JsString(value)
        case Identifier(name=name):
            return frame.lookup(name)
        case ArrayLiteral():
            return eval_array(n, frame, eval_node)
        case ObjectLiteral():
            return eval_object(n, frame, eval_node)
        case BinaryOp():
            return eval_binary(n, frame, eval_node)
        case Call():
            return eval_call(n, frame, eval_node)
        case FunctionExpr():
            return eval_fn_expr(n, frame)
        case FunctionDecl():
            return eval_fn_decl(n, frame)
        case VarDecl(name=name, init=init):
            value = eval_node(init, frame)
            frame.define(name, value)
            return value
        case Assign(name=name, value=value_node):
            value = eval_node(value_node, frame)
            frame.assign(name, value)
            return value
        case If():
            return eval_if_stmt(n, frame, eval_node)
        case While():
            return eval_while_stmt(n, frame, eval_node)
        case Block(statements=stmts) | Program(statements=stmts):
            return eval_program(stmts, frame, eval_node)
        case _:
            raise MiniJsRuntimeError(f"Unknown node: {type(n).__name__}")
