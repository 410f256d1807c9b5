"""Interactive REPL for minijs, powered by prompt_toolkit.

Lines are collected into a pending batch. Typing ``run`` on its own line
executes the batch against the session's globals and drains the event loop;
``exit`` (or Ctrl-D) leaves.
"""

from __future__ import annotations

import os
import re
import sys
from typing import List

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear

from .lexer_rd import LexError
from .parser_rd import ParseError
from .repl_highlight import MiniJsLexer
from .runner import Interpreter, report_error
from .types import MiniJsRuntimeError
from .utils import DEBUG_PY_TRACE_ENV, debug_py_trace_enabled

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

EVENT_LOOP_BANNER = "[Event Loop] Processing async tasks..."

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/discard": ("Drop the lines collected so far", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


class ReplSession:
    """Line-driven session state, independent of the terminal front end."""

    def __init__(self, parser: str = "rd"):
        self.parser = parser
        self.interp = Interpreter(parser=parser)
        self.lines: List[str] = []

    def feed(self, line: str) -> bool:
        """Consume one input line. Returns False once the session should end."""
        line = _normalize(line)
        stripped = line.strip()

        if stripped == "exit":
            return False

        if stripped == "run":
            self.run_batch()
            return True

        if stripped.startswith("/"):
            self.handle_slash(stripped)
            return True

        self.lines.append(line)
        return True

    def run_batch(self) -> None:
        source = "\n".join(self.lines)
        self.lines = []

        try:
            self.interp.execute(source)
            if self.interp.pending():
                print(EVENT_LOOP_BANNER)
                self.interp.drain()
        except (LexError, ParseError, MiniJsRuntimeError) as exc:
            report_error(exc, prefix="Runtime Error")

        print("Ready.")

    def handle_slash(self, stripped: str) -> None:
        parts = stripped.split(None, 1)
        cmd = parts[0]
        arg = parts[1] if len(parts) > 1 else ""

        if cmd == "/clear":
            clear()
            return

        if cmd == "/discard":
            self.lines = []
            print("Input discarded.")
            return

        if cmd == "/py-traceback":
            if arg.lower() in ("on", "1", "true", "yes"):
                os.environ[DEBUG_PY_TRACE_ENV] = "1"
            elif arg.lower() in ("off", "0", "false", "no"):
                os.environ.pop(DEBUG_PY_TRACE_ENV, None)
            elif arg == "":
                # Toggle.
                if debug_py_trace_enabled():
                    os.environ.pop(DEBUG_PY_TRACE_ENV, None)
                else:
                    os.environ[DEBUG_PY_TRACE_ENV] = "1"
            else:
                print("Usage: /py-traceback [on|off]", file=sys.stderr)
                return

            state = "on" if debug_py_trace_enabled() else "off"
            print(f"Python traceback: {state}")
            return

        if cmd == "/reset":
            self.interp = Interpreter(parser=self.parser)
            self.lines = []
            print("Environment reset.")
            return

        print(f"Unknown command: {cmd}", file=sys.stderr)


def repl(parser: str = "rd") -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    session_state = ReplSession(parser=parser)

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=MiniJsLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
    )

    print("minijs repl: type code, 'run' to execute, 'exit' to quit, / for commands")

    while True:
        prompt = "... " if session_state.lines else ">>> "
        try:
            text = session.prompt(prompt)
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            session_state.lines = []
            print("KeyboardInterrupt")
            continue

        if not session_state.feed(text):
            break
