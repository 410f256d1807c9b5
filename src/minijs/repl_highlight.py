"""prompt_toolkit lexer for live minijs syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as JsLexer, LexError
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

_TT_GROUP = {
    TT.VAR: "keyword",
    TT.FUNCTION: "keyword",
    TT.IF: "keyword",
    TT.ELSE: "keyword",
    TT.WHILE: "keyword",
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.EQ: "operator",
    TT.LT: "operator",
    TT.GT: "operator",
    TT.ASSIGN: "operator",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.LSQB: "punctuation",
    TT.RSQB: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.COMMA: "punctuation",
    TT.COLON: "punctuation",
    TT.SEMI: "punctuation",
}


def _token_width(tok: Tok) -> int:
    # String tokens store their contents without the quotes.
    if tok.type == TT.STRING:
        return len(tok.value) + 2
    return len(str(tok.value))


def _gap(text: str) -> StyleAndTextTuples:
    """Unstyled text between tokens; a ``//`` comment can only live here."""
    idx = text.find("//")
    if idx < 0:
        return [("", text)]

    spans: StyleAndTextTuples = []
    if idx > 0:
        spans.append(("", text[:idx]))
    spans.append((GROUP_STYLE["comment"], text[idx:]))
    return spans


def _group_for(tokens: list[Tok], idx: int) -> str:
    tok = tokens[idx]
    group = _TT_GROUP.get(tok.type, "")

    # Callee names read better when they stand out from plain identifiers.
    if tok.type == TT.IDENT and idx + 1 < len(tokens) and tokens[idx + 1].type == TT.LPAR:
        group = "function"

    return group


def highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    try:
        tokens = JsLexer(text).tokenize()
    except LexError as exc:
        # Keep what precedes the bad character readable, flag the rest.
        cut = max(exc.column - 1, 0)
        spans = highlight_line(text[:cut]) if cut else []
        return [s for s in spans if s[1]] + [(GROUP_STYLE["error"], text[cut:])]

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        if tok.type == TT.EOF:
            continue

        start = tok.column - 1
        end = start + _token_width(tok)

        if start > pos:
            result.extend(_gap(text[pos:start]))

        style = GROUP_STYLE.get(_group_for(tokens, i), "")
        result.append((style, text[start:end]))
        pos = end

    if pos < len(text):
        result.extend(_gap(text[pos:]))

    return result if result else [("", text)]


class MiniJsLexer(Lexer):
    """prompt_toolkit Lexer that highlights minijs source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
