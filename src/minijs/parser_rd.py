"""
Recursive Descent Parser for minijs

This serves as:
1. The default front end used by the runner
2. A faster alternative to the Lark reference grammar (grammar.lark)

Structure:
- Lexer: Token stream from source
- Parser: Recursive descent, one method per precedence tier
- AST: tree.py nodes, identical to what parse_lark builds
"""

from typing import List, Optional, Tuple

from .lexer_rd import tokenize
from .token_types import TT, Tok
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

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None,
                 line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.token = token
        self.line = token.line if token is not None else line
        self.column = token.column if token is not None else column
        if self.line is not None:
            super().__init__(f"{message} at line {self.line}, col {self.column}")
        else:
            super().__init__(message)

class Parser:
    """
    Recursive descent parser for minijs.

    Expression precedence (lowest to highest):
    1. compare (==, <, >), non-associative
    2. add (+, -)
    3. mul (*, /)
    4. primary (literals, identifiers, calls, parens, function expressions)
    """

    COMPARE_OPS = {TT.EQ: '==', TT.LT: '<', TT.GT: '>'}
    ADD_OPS = {TT.PLUS: '+', TT.MINUS: '-'}
    MUL_OPS = {TT.STAR: '*', TT.SLASH: '/'}

    def __init__(self, tokens: List[Tok]):
        self.tokens = tokens
        self.pos = 0
        self.current = tokens[0] if tokens else Tok(TT.EOF, None, 0, 0)

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Tok:
        """Look ahead at token"""
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self.tokens[-1] if self.tokens else Tok(TT.EOF, None, 0, 0)

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
            self.current = self.tokens[self.pos]
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            msg = message or f"Expected {token_type.name}, got {self.current.type.name}"
            raise ParseError(msg, self.current)
        return self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Program:
        """Parse entire program"""
        stmts = []

        while not self.check(TT.EOF):
            # Empty statements
            if self.match(TT.SEMI):
                continue
            stmts.append(self.parse_statement())

        return Program(tuple(stmts), line=1, column=1)

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Node:
        """
        Parse a single statement.

        Statements include:
        - Declarations (var, function)
        - Control flow (if, while)
        - Assignment (name = expr;)
        - Expressions (expr;)
        """
        if self.check(TT.VAR):
            return self.parse_var_decl()
        if self.check(TT.FUNCTION) and self.peek(1).type == TT.IDENT:
            return self.parse_function_decl()
        if self.check(TT.IF):
            return self.parse_if_stmt()
        if self.check(TT.WHILE):
            return self.parse_while_stmt()

        if self.check(TT.IDENT) and self.peek(1).type == TT.ASSIGN:
            name_tok = self.advance()
            self.advance()  # =
            value = self.parse_expr()
            self.expect(TT.SEMI, "Expected ';' after assignment")
            return Assign(name_tok.value, value, line=name_tok.line, column=name_tok.column)

        expr = self.parse_expr()
        self.expect(TT.SEMI, "Expected ';' after expression")
        return expr

    def parse_var_decl(self) -> VarDecl:
        """Parse: var NAME = expr;"""
        var_tok = self.expect(TT.VAR)
        name = self.expect(TT.IDENT, "Expected variable name after 'var'")
        self.expect(TT.ASSIGN, "Expected '=' in variable declaration")
        init = self.parse_expr()
        self.expect(TT.SEMI, "Expected ';' after variable declaration")
        return VarDecl(name.value, init, line=var_tok.line, column=var_tok.column)

    def parse_function_decl(self) -> FunctionDecl:
        """Parse: function NAME(params) { ... }"""
        fn_tok = self.expect(TT.FUNCTION)
        name = self.expect(TT.IDENT, "Expected function name")
        params = self.parse_param_list()
        body = self.parse_block()
        return FunctionDecl(name.value, params, body, line=fn_tok.line, column=fn_tok.column)

    def parse_if_stmt(self) -> If:
        """
        Parse if statement:
        if (expr) { ... } [else { ... }]
        """
        if_tok = self.expect(TT.IF)
        self.expect(TT.LPAR, "Expected '(' after 'if'")
        cond = self.parse_expr()
        self.expect(TT.RPAR, "Expected ')' after if condition")
        then_body = self.parse_block()

        else_body = None
        if self.match(TT.ELSE):
            else_body = self.parse_block()

        return If(cond, then_body, else_body, line=if_tok.line, column=if_tok.column)

    def parse_while_stmt(self) -> While:
        """Parse while loop: while (expr) { ... }"""
        while_tok = self.expect(TT.WHILE)
        self.expect(TT.LPAR, "Expected '(' after 'while'")
        cond = self.parse_expr()
        self.expect(TT.RPAR, "Expected ')' after while condition")
        body = self.parse_block()
        return While(cond, body, line=while_tok.line, column=while_tok.column)

    def parse_block(self) -> Block:
        """Parse a braced statement list"""
        lbrace = self.expect(TT.LBRACE, "Expected '{'")
        stmts = []

        while not self.check(TT.RBRACE, TT.EOF):
            if self.match(TT.SEMI):
                continue
            stmts.append(self.parse_statement())

        self.expect(TT.RBRACE, "Expected '}'")
        return Block(tuple(stmts), line=lbrace.line, column=lbrace.column)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Node:
        return self.parse_compare_expr()

    def parse_compare_expr(self) -> Node:
        left = self.parse_add_expr()

        if self.current.type in self.COMPARE_OPS:
            op = self.advance()
            right = self.parse_add_expr()
            return BinaryOp(self.COMPARE_OPS[op.type], left, right, line=op.line, column=op.column)

        return left

    def parse_add_expr(self) -> Node:
        left = self.parse_mul_expr()

        while self.current.type in self.ADD_OPS:
            op = self.advance()
            right = self.parse_mul_expr()
            left = BinaryOp(self.ADD_OPS[op.type], left, right, line=op.line, column=op.column)

        return left

    def parse_mul_expr(self) -> Node:
        left = self.parse_primary_expr()

        while self.current.type in self.MUL_OPS:
            op = self.advance()
            right = self.parse_primary_expr()
            left = BinaryOp(self.MUL_OPS[op.type], left, right, line=op.line, column=op.column)

        return left

    def parse_primary_expr(self) -> Node:
        tok = self.current

        if self.match(TT.NUMBER):
            return NumberLiteral(float(tok.value), line=tok.line, column=tok.column)

        if self.match(TT.STRING):
            return StringLiteral(tok.value, line=tok.line, column=tok.column)

        if self.match(TT.IDENT):
            if self.match(TT.LPAR):
                args = self.parse_arg_list()
                return Call(tok.value, args, line=tok.line, column=tok.column)
            return Identifier(tok.value, line=tok.line, column=tok.column)

        if self.match(TT.LPAR):
            expr = self.parse_expr()
            self.expect(TT.RPAR, "Expected ')'")
            return expr

        if self.match(TT.LSQB):
            items = []
            if not self.check(TT.RSQB):
                items.append(self.parse_expr())
                while self.match(TT.COMMA):
                    items.append(self.parse_expr())
            self.expect(TT.RSQB, "Expected ']' after array elements")
            return ArrayLiteral(tuple(items), line=tok.line, column=tok.column)

        if self.match(TT.LBRACE):
            entries = []
            if not self.check(TT.RBRACE):
                entries.append(self.parse_object_item())
                while self.match(TT.COMMA):
                    entries.append(self.parse_object_item())
            self.expect(TT.RBRACE, "Expected '}' after object entries")
            return ObjectLiteral(tuple(entries), line=tok.line, column=tok.column)

        # Anonymous function literal (expression form)
        if self.match(TT.FUNCTION):
            params = self.parse_param_list()
            body = self.parse_block()
            return FunctionExpr(params, body, line=tok.line, column=tok.column)

        raise ParseError(f"Unexpected token in expression: {tok.type.name}", tok)

    # ========================================================================
    # Helper Parsers
    # ========================================================================

    def parse_param_list(self) -> Tuple[str, ...]:
        """Parse (a, b, c) including the parentheses"""
        self.expect(TT.LPAR, "Expected '(' before parameter list")
        params = []

        if not self.check(TT.RPAR):
            params.append(self.expect(TT.IDENT, "Expected parameter name").value)
            while self.match(TT.COMMA):
                params.append(self.expect(TT.IDENT, "Expected parameter name").value)

        self.expect(TT.RPAR, "Expected ')' after parameters")
        return tuple(params)

    def parse_arg_list(self) -> Tuple[Node, ...]:
        """Parse call arguments after the opening paren, consuming the closing one"""
        args = []

        if not self.check(TT.RPAR):
            args.append(self.parse_expr())
            while self.match(TT.COMMA):
                args.append(self.parse_expr())

        self.expect(TT.RPAR, "Expected ')' after arguments")
        return tuple(args)

    def parse_object_item(self) -> Tuple[str, Node]:
        key = self.current
        if not self.match(TT.IDENT, TT.STRING):
            raise ParseError("Expected object key", key)
        self.expect(TT.COLON, "Expected ':' after object key")
        return key.value, self.parse_expr()


def parse_source(source: str) -> Program:
    """Tokenize and parse a complete program"""
    return Parser(tokenize(source)).parse()
