"""
Lexer for minijs - Recursive Descent Parser

Tokenizes minijs source code into a stream of tokens.

Features:
- Single-pass tokenization
- Position tracking (line, column)
- `//` line comments
- String literals without escape sequences
"""

from typing import List

from .token_types import TT, Tok

# Character classes are ASCII-only, matching grammar.lark's NAME/NUMBER/WS.
WHITESPACE = frozenset(' \t\f\r\n')


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def _is_ident_start(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'


def _is_ident_char(ch: str) -> bool:
    return _is_ident_start(ch) or _is_digit(ch)

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """minijs lexer. Whitespace, including newlines, only separates tokens."""

    # Keyword mapping
    KEYWORDS = {
        'var': TT.VAR,
        'function': TT.FUNCTION,
        'if': TT.IF,
        'else': TT.ELSE,
        'while': TT.WHILE,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('==', TT.EQ),

        # Single-character operators
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('<', TT.LT),
        ('>', TT.GT),
        ('=', TT.ASSIGN),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('[', TT.LSQB),
        (']', TT.RSQB),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        (',', TT.COMMA),
        (':', TT.COLON),
        (';', TT.SEMI),
    ]

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        self.emit(TT.EOF, None, self.line, self.column)
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        if self.skip_whitespace():
            return

        # Comments
        if self.peek() == '/' and self.peek(1) == '/':
            self.skip_comment()
            return

        if self.peek() == '"':
            self.scan_string()
            return

        if _is_digit(self.peek()):
            self.scan_number()
            return

        # Identifiers and keywords
        if _is_ident_start(self.peek()):
            self.scan_identifier()
            return

        self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self):
        """Scan string literal: "..." (no escapes)"""
        line, column = self.line, self.column
        self.advance()  # opening quote
        value = ''

        while self.pos < len(self.source) and self.peek() != '"':
            value += self.advance()

        if self.pos >= len(self.source):
            raise LexError("Unterminated string", line, column)

        self.advance()  # Closing quote
        self.emit(TT.STRING, value, line, column)

    def scan_number(self):
        """Scan number literal with at most one embedded decimal point"""
        line, column = self.line, self.column
        value = ''

        # Integer part
        while _is_digit(self.peek()):
            value += self.advance()

        # Decimal part
        if self.peek() == '.' and _is_digit(self.peek(1)):
            value += self.advance()  # .
            while _is_digit(self.peek()):
                value += self.advance()

        self.emit(TT.NUMBER, value, line, column)

    def scan_identifier(self):
        """Scan identifier or keyword"""
        line, column = self.line, self.column
        value = ''

        while _is_ident_char(self.peek()):
            value += self.advance()

        token_type = self.KEYWORDS.get(value, TT.IDENT)
        self.emit(token_type, value, line, column)

    def scan_operator(self):
        """Scan operators and punctuation"""
        line, column = self.line, self.column

        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                self.emit(op_type, op_str, line, column)
                return

        ch = self.peek()
        raise LexError(f"Unexpected character '{ch}'", self.line, self.column)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        result = ''
        for _ in range(n):
            ch = self.source[self.pos] if self.pos < len(self.source) else '\0'
            result += ch
            self.pos += 1

            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return result

    def skip_whitespace(self) -> bool:
        """Skip whitespace including newlines, return True if any skipped"""
        skipped = False
        while self.pos < len(self.source) and self.peek() in WHITESPACE:
            self.advance()
            skipped = True
        return skipped

    def skip_comment(self):
        """Skip comment until end of line"""
        while self.peek() not in ('\n', '\0'):
            self.advance()

    def emit(self, token_type: TT, value, line: int, column: int):
        """Emit a token"""
        self.tokens.append(Tok(type=token_type, value=value, line=line, column=column))

class LexError(Exception):
    """Lexical analysis error"""
    def __init__(self, message: str, line: int, column: int):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}, col {column}")


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()
