"""AST node classes shared by both parsers and the evaluator.

The node set is closed: every node the parsers can produce is listed in the
``Node`` alias below, and ``evaluator.eval_node`` matches on exactly these
classes. Positions are carried for error reporting only and never take part
in equality, so trees built by different front ends compare equal.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple, Union
from typing_extensions import TypeAlias


@dataclass(frozen=True, kw_only=True)
class _Positioned:
    line: Optional[int] = field(default=None, compare=False, repr=False)
    column: Optional[int] = field(default=None, compare=False, repr=False)


# ---------- Expressions ----------

@dataclass(frozen=True)
class NumberLiteral(_Positioned):
    value: float

@dataclass(frozen=True)
class StringLiteral(_Positioned):
    value: str

@dataclass(frozen=True)
class Identifier(_Positioned):
    name: str

@dataclass(frozen=True)
class ArrayLiteral(_Positioned):
    elements: Tuple['Node', ...]

@dataclass(frozen=True)
class ObjectLiteral(_Positioned):
    entries: Tuple[Tuple[str, 'Node'], ...]

@dataclass(frozen=True)
class BinaryOp(_Positioned):
    op: str
    left: 'Node'
    right: 'Node'

@dataclass(frozen=True)
class Call(_Positioned):
    callee: str
    args: Tuple['Node', ...]

@dataclass(frozen=True)
class FunctionExpr(_Positioned):
    params: Tuple[str, ...]
    body: 'Block'

# ---------- Statements ----------

@dataclass(frozen=True)
class Block(_Positioned):
    statements: Tuple['Node', ...]

@dataclass(frozen=True)
class VarDecl(_Positioned):
    name: str
    init: 'Node'

@dataclass(frozen=True)
class Assign(_Positioned):
    name: str
    value: 'Node'

@dataclass(frozen=True)
class If(_Positioned):
    cond: 'Node'
    then_branch: Block
    else_branch: Optional[Block] = None

@dataclass(frozen=True)
class While(_Positioned):
    cond: 'Node'
    body: Block

@dataclass(frozen=True)
class FunctionDecl(_Positioned):
    name: str
    params: Tuple[str, ...]
    body: Block

@dataclass(frozen=True)
class Program(_Positioned):
    statements: Tuple['Node', ...]


Node: TypeAlias = Union[
    NumberLiteral,
    StringLiteral,
    Identifier,
    ArrayLiteral,
    ObjectLiteral,
    BinaryOp,
    Call,
    FunctionExpr,
    Block,
    VarDecl,
    Assign,
    If,
    While,
    FunctionDecl,
    Program,
]


def iter_children(node: Node) -> Iterator[Node]:
    """Yield direct child nodes in source order."""
    match node:
        case ArrayLiteral(elements=items) | Call(args=items):
            yield from items
        case ObjectLiteral(entries=entries):
            for _, value in entries:
                yield value
        case BinaryOp(left=left, right=right):
            yield left
            yield right
        case Block(statements=stmts) | Program(statements=stmts):
            yield from stmts
        case VarDecl(init=child) | Assign(value=child):
            yield child
        case If(cond=cond, then_branch=then_branch, else_branch=else_branch):
            yield cond
            yield then_branch
            if else_branch is not None:
                yield else_branch
        case While(cond=cond, body=body):
            yield cond
            yield body
        case FunctionDecl(body=body) | FunctionExpr(body=body):
            yield body
        case _:
            return

def pretty(node: Node, indent: str = '  ') -> str:
    """Return pretty-printed tree representation."""
    def _pretty(n: Node, level: int) -> str:
        label = type(n).__name__
        match n:
            case NumberLiteral(value=v) | StringLiteral(value=v):
                label = f"{label}\t{v!r}"
            case Identifier(name=name) | VarDecl(name=name) | Assign(name=name):
                label = f"{label}\t{name}"
            case BinaryOp(op=op):
                label = f"{label}\t{op}"
            case Call(callee=callee):
                label = f"{label}\t{callee}"
            case FunctionDecl(name=name, params=params):
                label = f"{label}\t{name}({', '.join(params)})"
            case FunctionExpr(params=params):
                label = f"{label}\t({', '.join(params)})"
        lines = [f'{indent * level}{label}\n']
        for child in iter_children(n):
            lines.append(_pretty(child, level + 1))
        return ''.join(lines)
    return _pretty(node, 0)
