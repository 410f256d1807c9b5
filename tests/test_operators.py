from __future__ import annotations

import math
from typing import Optional

import pytest

from tests.support.harness import (
    MiniJsTypeError,
    RuntimeExpectation,
    run_program,
    run_runtime_case,
)
from minijs.eval.expr import ieee_divide
from minijs.utils import format_number


@pytest.mark.parametrize(
    "source, expectation, expected_exc",
    [
        pytest.param("1 + 2;", ("number", 3), None, id="add-numbers"),
        pytest.param("7 - 10;", ("number", -3), None, id="sub-negative"),
        pytest.param("2.5 * 4;", ("number", 10), None, id="mul"),
        pytest.param("7 / 2;", ("number", 3.5), None, id="div"),
        pytest.param("2 + 3 * 4;", ("number", 14), None, id="precedence"),
        pytest.param("(2 + 3) * 4;", ("number", 20), None, id="parens"),
        pytest.param("10 - 4 - 3;", ("number", 3), None, id="left-assoc"),
        pytest.param('"a" + 1;', ("string", "a1"), None, id="concat-string-number"),
        pytest.param('1 + "a";', ("string", "1a"), None, id="concat-number-string"),
        pytest.param('"x" + 0.5;', ("string", "x0.5"), None, id="concat-fraction"),
        pytest.param('"n" + [1];', ("string", "n[Array]"), None, id="concat-array"),
        pytest.param('"o" + {a: 1};', ("string", "o[Object]"), None, id="concat-object"),
        pytest.param('"f" + print;', ("string", "f[Function]"), None, id="concat-native"),
        pytest.param('"v" + (1 == 1);', ("string", "vtrue"), None, id="concat-bool"),
        pytest.param('"a" + "b";', ("string", "ab"), None, id="concat-strings"),
        pytest.param("1 < 2;", ("bool", True), None, id="lt"),
        pytest.param("2 > 3;", ("bool", False), None, id="gt"),
        pytest.param("2 == 2;", ("bool", True), None, id="eq-numbers"),
        pytest.param('"a" == "a";', ("bool", True), None, id="eq-strings"),
        pytest.param('1 == "1";', ("bool", False), None, id="eq-mixed-kinds"),
        pytest.param("(1 < 2) == (3 > 2);", ("bool", True), None, id="eq-bools"),
        pytest.param("[1] == [1];", ("bool", False), None, id="eq-arrays-by-identity"),
        pytest.param("var a = [1]; a == a;", ("bool", True), None, id="eq-same-array"),
        pytest.param("print == print;", ("bool", True), None, id="eq-same-native"),
        pytest.param("var n = print(); n == print();", ("bool", True), None, id="eq-nulls"),
        pytest.param('"a" - 1;', None, MiniJsTypeError, id="sub-string"),
        pytest.param("[1] + 1;", None, MiniJsTypeError, id="add-array-number"),
        pytest.param('"a" < "b";', None, MiniJsTypeError, id="lt-strings"),
        pytest.param("print * 2;", None, MiniJsTypeError, id="mul-function"),
    ],
)
def test_binary_operators(
    source: str,
    expectation: RuntimeExpectation,
    expected_exc: Optional[type],
) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_division_by_zero_is_not_an_error() -> None:
    result = run_program("1 / 0;")
    assert result.value == math.inf

    result = run_program("0 - 1 / 0;")
    assert result.value == -math.inf

    result = run_program("0 / 0;")
    assert math.isnan(result.value)


def test_nan_is_not_equal_to_itself() -> None:
    result = run_program("var n = 0 / 0; n == n;")
    assert result.value is False


@pytest.mark.parametrize(
    "a, b, expected",
    [
        pytest.param(1.0, 0.0, math.inf, id="pos-over-zero"),
        pytest.param(-1.0, 0.0, -math.inf, id="neg-over-zero"),
        pytest.param(1.0, -0.0, -math.inf, id="pos-over-neg-zero"),
        pytest.param(6.0, 3.0, 2.0, id="ordinary"),
    ],
)
def test_ieee_divide(a: float, b: float, expected: float) -> None:
    assert ieee_divide(a, b) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        pytest.param(3.0, "3", id="integral"),
        pytest.param(0.5, "0.5", id="fraction"),
        pytest.param(2.25, "2.25", id="two-places"),
        pytest.param(1 / 3, "0.333333", id="six-places"),
        pytest.param(-4.0, "-4", id="negative"),
        pytest.param(-0.0, "0", id="negative-zero"),
        pytest.param(1e-9, "0", id="below-precision"),
        pytest.param(math.inf, "Infinity", id="infinity"),
        pytest.param(-math.inf, "-Infinity", id="negative-infinity"),
        pytest.param(math.nan, "NaN", id="nan"),
    ],
)
def test_format_number(value: float, expected: str) -> None:
    assert format_number(value) == expected


def test_type_error_carries_location() -> None:
    with pytest.raises(MiniJsTypeError) as exc_info:
        run_program('var a = 1;\nvar b = "x" - a;')

    err = exc_info.value
    assert err.line == 2
    assert err.column == 13
    assert "Operator '-' expects numbers" in str(err)
