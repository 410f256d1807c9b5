"""Lark front end built from grammar.lark.

Produces the same tree.py nodes as parser_rd, so either front end can feed
the evaluator. The runner selects it with ``parser="lark"``; the test-suite
uses it to cross-check the hand-written parser.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Tuple

from lark import Lark, Token, Transformer, UnexpectedInput, v_args

from .parser_rd import ParseError
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

GRAMMAR_PATH = Path(__file__).resolve().with_name("grammar.lark")


@lru_cache(maxsize=1)
def build_parser() -> Lark:
    return Lark(
        GRAMMAR_PATH.read_text(encoding="utf-8"),
        parser="lalr",
        lexer="basic",
        start="start",
        maybe_placeholders=False,
        propagate_positions=True,
    )


def _pos(tok: Token) -> dict:
    return {"line": tok.line, "column": tok.column}


def _meta_pos(meta) -> dict:
    # Rules whose tokens were all filtered out carry an empty meta.
    return {"line": getattr(meta, "line", None), "column": getattr(meta, "column", None)}


@v_args(meta=True)
class ToAst(Transformer):
    """Bottom-up conversion of the Lark parse tree into tree.py nodes."""

    def start(self, meta, children: List[Node]) -> Program:
        return Program(tuple(children), line=1, column=1)

    def var_decl(self, meta, children) -> VarDecl:
        name, init = children
        return VarDecl(str(name), init, **_meta_pos(meta))

    def assign(self, meta, children) -> Assign:
        name, value = children
        return Assign(str(name), value, **_pos(name))

    def fn_decl(self, meta, children) -> FunctionDecl:
        name, params, body = children
        return FunctionDecl(str(name), params, body, **_meta_pos(meta))

    def fn_expr(self, meta, children) -> FunctionExpr:
        params, body = children
        return FunctionExpr(params, body, **_meta_pos(meta))

    def if_stmt(self, meta, children) -> If:
        cond, then_branch, *rest = children
        else_branch = rest[0] if rest else None
        return If(cond, then_branch, else_branch, **_meta_pos(meta))

    def while_stmt(self, meta, children) -> While:
        cond, body = children
        return While(cond, body, **_meta_pos(meta))

    def params(self, meta, children) -> Tuple[str, ...]:
        return tuple(str(tok) for tok in children)

    def block(self, meta, children) -> Block:
        return Block(tuple(children), **_meta_pos(meta))

    def binop(self, meta, children) -> BinaryOp:
        left, op, right = children
        return BinaryOp(str(op), left, right, **_pos(op))

    def number(self, meta, children) -> NumberLiteral:
        (tok,) = children
        return NumberLiteral(float(tok), **_pos(tok))

    def string(self, meta, children) -> StringLiteral:
        (tok,) = children
        return StringLiteral(str(tok)[1:-1], **_pos(tok))

    def ident(self, meta, children) -> Identifier:
        (tok,) = children
        return Identifier(str(tok), **_pos(tok))

    def call(self, meta, children) -> Call:
        name, *args = children
        return Call(str(name), tuple(args), **_pos(name))

    def array(self, meta, children) -> ArrayLiteral:
        return ArrayLiteral(tuple(children), **_meta_pos(meta))

    def object(self, meta, children) -> ObjectLiteral:
        return ObjectLiteral(tuple(children), **_meta_pos(meta))

    def pair(self, meta, children) -> Tuple[str, Node]:
        key, value = children
        text = str(key)
        if key.type == "STRING":
            text = text[1:-1]
        return text, value


def parse_source(source: str) -> Program:
    try:
        tree = build_parser().parse(source)
    except UnexpectedInput as exc:
        line = exc.line if getattr(exc, "line", -1) and exc.line > 0 else None
        column = exc.column if line is not None else None
        raise ParseError(f"Unexpected input: {_describe(exc)}", line=line, column=column) from exc

    return ToAst().transform(tree)


def _describe(exc: UnexpectedInput) -> str:
    token = getattr(exc, "token", None)
    if token is not None:
        if getattr(token, "type", None) == "$END":
            return "end of input"
        return repr(str(token))

    char = getattr(exc, "char", None)
    if char is not None:
        return repr(char)

    return type(exc).__name__
