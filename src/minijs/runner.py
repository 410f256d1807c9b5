from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import Optional

from .evaluator import eval_expr
from .lexer_rd import LexError
from .parser_rd import ParseError, parse_source as parse_rd
from .runtime import Frame, JsNative, JsNull, JsValue, MiniJsRuntimeError, NativeFn, init_stdlib
from .scheduler import Scheduler
from .tree import Program, pretty
from .utils import configured_log_level, debug_py_trace_enabled, render_value

logger = logging.getLogger(__name__)

PARSERS = ("rd", "lark")

# Each script-level call costs about a dozen Python frames.
RECURSION_LIMIT = 60_000


def parse(src: str, parser: str = "rd") -> Program:
    if parser == "rd":
        return parse_rd(src)

    if parser == "lark":
        from .parse_lark import parse_source as parse_lark  # lark is only loaded on demand
        return parse_lark(src)

    raise ValueError(f"Unknown parser: {parser!r} (expected one of {', '.join(PARSERS)})")


class Interpreter:
    """A session: one global frame and one scheduler shared by every ``run``.

    Definitions and queued tasks survive between runs, including runs that
    ended in an error.
    """

    def __init__(self, parser: str = "rd", scheduler: Optional[Scheduler] = None):
        if parser not in PARSERS:
            raise ValueError(f"Unknown parser: {parser!r} (expected one of {', '.join(PARSERS)})")

        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)

        init_stdlib()
        self.parser = parser
        self.scheduler = scheduler or Scheduler()
        self.globals = Frame(source="", scheduler=self.scheduler)

    def define_native(self, name: str, fn: NativeFn, arity: Optional[int] = None) -> JsNative:
        native = JsNative(name=name, fn=fn, arity=arity)
        self.globals.define(name, native)
        return native

    def execute(self, src: str) -> JsValue:
        """Parse and evaluate ``src`` without draining the task queue."""
        program = parse(src, self.parser)
        logger.debug("executing %d top-level statement(s)", len(program.statements))

        return eval_expr(program, self.globals, source=src)

    def pending(self) -> int:
        return self.scheduler.pending()

    def drain(self) -> int:
        ran = self.scheduler.run_until_idle()
        if ran:
            logger.debug("event loop ran %d task(s)", ran)
        return ran

    def run(self, src: str) -> JsValue:
        result = self.execute(src)
        self.drain()
        return result


def run(src: str, parser: str = "rd") -> JsValue:
    return Interpreter(parser=parser).run(src)


def report_error(exc: BaseException, prefix: str = "Error") -> None:
    print(f"{prefix}: {exc}", file=sys.stderr)

    if debug_py_trace_enabled():
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_exception(exc)), file=sys.stderr, end="")


def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.is_file():
        return candidate.read_text(encoding="utf-8")

    return arg


def main() -> None:
    logging.basicConfig(level=configured_log_level(), format="%(levelname)s %(name)s: %(message)s")

    parser = "rd"
    want_repl = False
    dump_ast = False
    arg = None
    it = iter(sys.argv[1:])

    for token in it:
        if token == "--repl":
            want_repl = True
            continue

        if token == "--ast":
            dump_ast = True
            continue

        if token.startswith("--parser="):
            parser = token.split("=", 1)[1]
            continue

        if token == "--parser":
            try:
                parser = next(it)
            except StopIteration:
                raise SystemExit("--parser flag requires a value") from None
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if parser not in PARSERS:
        raise SystemExit(f"Unknown parser: {parser} (expected one of {', '.join(PARSERS)})")

    if want_repl:
        from .repl import repl
        repl(parser=parser)
        return

    source = _load_source(arg or "-")

    if dump_ast:
        try:
            print(pretty(parse(source, parser)), end="")
        except (LexError, ParseError) as exc:
            report_error(exc)
            sys.exit(1)
        return

    try:
        result = Interpreter(parser=parser).run(source)
    except (LexError, ParseError, MiniJsRuntimeError) as exc:
        report_error(exc)
        sys.exit(1)

    if not isinstance(result, JsNull):
        print(render_value(result))


if __name__ == "__main__":
    main()
