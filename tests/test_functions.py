from __future__ import annotations

from typing import Optional

import pytest

from tests.support.harness import (
    Interpreter,
    JsNumber,
    MiniJsArityError,
    MiniJsInvocationError,
    MiniJsNameError,
    MiniJsRuntimeError,
    RuntimeExpectation,
    run_program,
    run_runtime_case,
)


@pytest.mark.parametrize(
    "source, expectation, expected_exc",
    [
        pytest.param(
            "function f() { 1; } f();",
            ("number", 1),
            None,
            id="implicit-result",
        ),
        pytest.param(
            "function add(a, b) { a + b; } add(2, 3);",
            ("number", 5),
            None,
            id="two-params",
        ),
        pytest.param(
            "function f() { } f();",
            ("null", None),
            None,
            id="empty-body-null",
        ),
        pytest.param(
            "function first(a) { a; } first(1, 2, 3);",
            ("number", 1),
            None,
            id="extra-args-dropped",
        ),
        pytest.param(
            "function second(a, b) { b; } second(1);",
            None,
            MiniJsNameError,
            id="missing-param-unbound",
        ),
        pytest.param(
            "function fact(n) { if (n < 2) { 1; } else { n * fact(n - 1); } } fact(5);",
            ("number", 120),
            None,
            id="recursion-by-name",
        ),
        pytest.param(
            "function fib(n) { if (n < 2) { n; } else { fib(n - 1) + fib(n - 2); } } fib(10);",
            ("number", 55),
            None,
            id="fib",
        ),
        pytest.param(
            "var sq = function(x) { x * x; }; sq(7);",
            ("number", 49),
            None,
            id="function-expression",
        ),
        pytest.param(
            "function outer() { var y = 2; function inner() { y * 10; } inner(); } outer();",
            ("number", 20),
            None,
            id="nested-declaration",
        ),
        pytest.param(
            "function make() { var n = 41; function get() { n + 1; } get; } var g = make(); g();",
            ("number", 42),
            None,
            id="closure-outlives-call",
        ),
        pytest.param(
            "function counter() { var c = 0; function inc() { c = c + 1; c; } inc; }"
            " var k = counter(); k(); k(); k();",
            ("number", 3),
            None,
            id="closure-shared-state",
        ),
        pytest.param(
            "var f = function() { 1; }; var g = f; g == f;",
            ("bool", True),
            None,
            id="function-identity",
        ),
        pytest.param(
            "function f() { 1; } f;",
            ("function", None),
            None,
            id="declaration-value",
        ),
        pytest.param(
            "var x = 1; x();",
            None,
            MiniJsInvocationError,
            id="call-number",
        ),
        pytest.param(
            "nope();",
            None,
            MiniJsNameError,
            id="call-undefined",
        ),
        pytest.param(
            "function loop() { loop(); } loop();",
            None,
            MiniJsRuntimeError,
            id="runaway-recursion",
        ),
    ],
)
def test_function_calls(
    source: str,
    expectation: RuntimeExpectation,
    expected_exc: Optional[type],
) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_callee_does_not_see_caller_locals() -> None:
    source = """
    function peek() { hidden; }
    function caller() { var hidden = 1; peek(); }
    caller();
    """
    with pytest.raises(MiniJsNameError) as exc_info:
        run_program(source)

    assert exc_info.value.name == "hidden"


def test_closure_reads_defining_scope_not_copy() -> None:
    source = """
    var x = 1;
    function readX() { x; }
    x = 5;
    readX();
    """
    assert run_program(source) == JsNumber(5)


def test_local_var_shadows_global() -> None:
    source = """
    var x = 1;
    function f() { var x = 2; x; }
    f() + x;
    """
    assert run_program(source) == JsNumber(3)


def test_invocation_error_names_callee() -> None:
    with pytest.raises(MiniJsInvocationError) as exc_info:
        run_program('var s = "str";\ns(1);')

    err = exc_info.value
    assert err.callee == "s"
    assert str(err) == "Not a function: s (line 2, col 1)"


def test_runaway_recursion_reports_depth() -> None:
    source = """function down(n) {
        down(n + 1);
    }
    down(0);"""
    with pytest.raises(MiniJsRuntimeError) as exc_info:
        run_program(source)

    err = exc_info.value
    assert str(err).startswith("Maximum call depth exceeded")
    # Located at the recursive call inside the body, not the program start.
    assert err.line == 2


@pytest.mark.parametrize("depth", [pytest.param(d, id=f"depth-{d}") for d in (80, 500, 1000, 2000)])
def test_deep_recursion_completes(depth: int) -> None:
    source = (
        "function count(n) { if (n > 0) { 1 + count(n - 1); } else { 0; } }"
        f" count({depth});"
    )
    assert run_program(source) == JsNumber(depth)


def test_define_native_is_callable() -> None:
    interp = Interpreter()
    seen = []

    def record(frame, args):
        seen.extend(arg.value for arg in args)
        return JsNumber(len(args))

    interp.define_native("record", record)
    result = interp.run("record(1, 2) + record(3);")

    assert result == JsNumber(3)
    assert seen == [1, 2, 3]


def test_native_arity_is_enforced() -> None:
    interp = Interpreter()
    interp.define_native("one", lambda frame, args: args[0], arity=1)

    assert interp.run("one(4);") == JsNumber(4)
    with pytest.raises(MiniJsArityError):
        interp.run("one(1, 2);")


def test_native_returning_none_gives_null() -> None:
    interp = Interpreter()
    interp.define_native("nothing", lambda frame, args: None)

    assert interp.run('"v" + nothing();').value == "vnull"
