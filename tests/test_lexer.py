from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import pytest

from minijs.lexer_rd import LexError, TT, tokenize


@dataclass(frozen=True)
class Case:
    """Unified lexer case payload."""

    name: str
    source: str
    expected: Optional[Tuple[Tuple[TT, object], ...]] = None
    expected_types: Optional[Tuple[TT, ...]] = None
    msg: Optional[str] = None
    err_line: Optional[int] = None
    err_col: Optional[int] = None


BASIC_TOKEN_CASES: List[Case] = [
    Case("number-int", "123", expected=((TT.NUMBER, "123"),)),
    Case("number-float", "3.14", expected=((TT.NUMBER, "3.14"),)),
    Case("ident-single", "x", expected=((TT.IDENT, "x"),)),
    Case("ident-snake", "foo_bar1", expected=((TT.IDENT, "foo_bar1"),)),
    Case("ident-leading-underscore", "_tmp", expected=((TT.IDENT, "_tmp"),)),
    Case("string-double", '"hello"', expected=((TT.STRING, "hello"),)),
    Case("string-empty", '""', expected=((TT.STRING, ""),)),
    Case("string-keeps-backslash", '"a\\n"', expected=((TT.STRING, "a\\n"),)),
    Case("keyword-var", "var", expected=((TT.VAR, "var"),)),
    Case("keyword-function", "function", expected=((TT.FUNCTION, "function"),)),
    Case("keyword-prefix-is-ident", "variable", expected=((TT.IDENT, "variable"),)),
    Case("return-is-ident", "return", expected=((TT.IDENT, "return"),)),
    Case("true-is-ident", "true", expected=((TT.IDENT, "true"),)),
]

OPERATOR_CASES: List[Case] = [
    Case("plus", "+", expected_types=(TT.PLUS,)),
    Case("minus", "-", expected_types=(TT.MINUS,)),
    Case("star", "*", expected_types=(TT.STAR,)),
    Case("slash", "/", expected_types=(TT.SLASH,)),
    Case("eq", "==", expected_types=(TT.EQ,)),
    Case("assign", "=", expected_types=(TT.ASSIGN,)),
    Case("eq-then-assign", "===", expected_types=(TT.EQ, TT.ASSIGN)),
    Case("lt-gt", "< >", expected_types=(TT.LT, TT.GT)),
    Case(
        "punctuation",
        "()[]{},:;",
        expected_types=(
            TT.LPAR,
            TT.RPAR,
            TT.LSQB,
            TT.RSQB,
            TT.LBRACE,
            TT.RBRACE,
            TT.COMMA,
            TT.COLON,
            TT.SEMI,
        ),
    ),
]

STREAM_CASES: List[Case] = [
    Case(
        "var-decl",
        "var x = 1;",
        expected_types=(TT.VAR, TT.IDENT, TT.ASSIGN, TT.NUMBER, TT.SEMI),
    ),
    Case(
        "comment-skipped",
        "a // the rest is ignored ;;\nb",
        expected_types=(TT.IDENT, TT.IDENT),
    ),
    Case(
        "division-not-comment",
        "a / b",
        expected_types=(TT.IDENT, TT.SLASH, TT.IDENT),
    ),
    Case(
        "number-then-call",
        "f(1.5,2)",
        expected_types=(TT.IDENT, TT.LPAR, TT.NUMBER, TT.COMMA, TT.NUMBER, TT.RPAR),
    ),
    Case(
        "newlines-are-whitespace",
        "x\n=\n\t2\n;",
        expected_types=(TT.IDENT, TT.ASSIGN, TT.NUMBER, TT.SEMI),
    ),
]

ERROR_CASES: List[Case] = [
    Case("unterminated-string", 'x = "abc', msg="Unterminated string", err_line=1, err_col=5),
    Case("stray-char", "a = 1 % 2;", msg="Unexpected character '%'", err_line=1, err_col=7),
    Case("superscript-digit", "var x = 1²;", msg="Unexpected character '²'", err_line=1, err_col=10),
    Case("non-ascii-ident", "var é = 1;", msg="Unexpected character 'é'", err_line=1, err_col=5),
    Case("arabic-indic-digit", "\u0662;", msg="Unexpected character '\u0662'", err_line=1, err_col=1),
    Case("no-break-space", "a\u00a0b", msg="Unexpected character '\u00a0'", err_line=1, err_col=2),
    Case("trailing-dot", "1.", msg="Unexpected character '.'", err_line=1, err_col=2),
    Case("bang", "\n  !x", msg="Unexpected character '!'", err_line=2, err_col=3),
]


def _significant(source: str):
    return [tok for tok in tokenize(source) if tok.type != TT.EOF]


@pytest.mark.parametrize("case", [pytest.param(c, id=c.name) for c in BASIC_TOKEN_CASES])
def test_basic_tokens(case: Case) -> None:
    toks = _significant(case.source)
    assert tuple((tok.type, tok.value) for tok in toks) == case.expected


@pytest.mark.parametrize("case", [pytest.param(c, id=c.name) for c in OPERATOR_CASES + STREAM_CASES])
def test_token_types(case: Case) -> None:
    toks = _significant(case.source)
    assert tuple(tok.type for tok in toks) == case.expected_types


@pytest.mark.parametrize("case", [pytest.param(c, id=c.name) for c in ERROR_CASES])
def test_lex_errors(case: Case) -> None:
    with pytest.raises(LexError) as exc_info:
        tokenize(case.source)

    err = exc_info.value
    assert err.message == case.msg
    assert (err.line, err.column) == (case.err_line, case.err_col)


def test_stream_ends_with_eof() -> None:
    toks = tokenize("")
    assert [tok.type for tok in toks] == [TT.EOF]


def test_positions_track_lines_and_columns() -> None:
    toks = tokenize('var a = 1;\n  print("x");')
    positions = {(tok.value, tok.line, tok.column) for tok in toks if tok.type != TT.EOF}

    assert ("var", 1, 1) in positions
    assert ("a", 1, 5) in positions
    assert ("print", 2, 3) in positions
    assert ("x", 2, 9) in positions
