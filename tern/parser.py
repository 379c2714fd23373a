"""Recursive-descent parser for the Tern language.

The parser consumes the token list produced by `tokenize` from front to
back and builds a `Program`. Expression precedence, loosest first:

1. assignment       ``target = expression``
2. relational       ``< <= > >= == !=`` (one level, left-associative)
3. additive         ``+ -``
4. multiplicative   ``* / %``
5. member / index   ``a.b``, ``a[i]``, call ``f(x)``
6. conversion       ``expr as type`` / ``expr to type``
7. primary          literals, identifiers, ``[..]``, ``(..)``, unary ``+ - !``

A relational chain such as ``a < b < c`` parses as ``(a < b) < c``.
Any token that does not fit the grammar raises a `ParseError` carrying
the token's position.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Program, Block, Literal, ArrayLit, TupleLit, Ident, CompareOp, BinaryOp,
    UnaryOp, Assign, Member, Index, Conversion, Call, VarDecl, FuncParam,
    FuncDecl, IfStmt, CaseArm, CaseStmt, Node,
)
from .errors import ParseError
from .lexer import (
    Token, tokenize,
    INTEGER, REAL, STRING, IDENT, KEYWORD, BINARY_OP, ASSIGN, NOT, COMMA, DOT,
    COLON, SEMICOLON, LPAREN, RPAREN, LBRACE, RBRACE, LBRACKET, RBRACKET, EOF,
    RELATIONAL_KINDS,
)

INT64_MAX = 2 ** 63 - 1

# Deepest nesting of blocks, brackets and unary operators
MAX_NESTING = 64


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    def enter(self, token: Token):
        self.depth += 1
        if self.depth > MAX_NESTING:
            raise self.error(f"nesting deeper than {MAX_NESTING} levels", token)

    def leave(self):
        self.depth -= 1

    def peek(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        last = self.tokens[-1] if self.tokens else None
        return Token(EOF, '', last.line if last else 0, last.column if last else 0)

    def match(self, kind: str, value: Optional[str] = None) -> bool:
        token = self.peek()
        if token.kind != kind:
            return False
        return value is None or token.value == value

    def match_keyword(self, *words: str) -> bool:
        token = self.peek()
        return token.kind == KEYWORD and token.value in words

    def advance(self) -> Token:
        token = self.peek()
        if token.kind != EOF:
            self.pos += 1
        return token

    def consume(self, kind: str, value: Optional[str] = None) -> Token:
        token = self.peek()
        if not self.match(kind, value):
            expected = repr(value) if value is not None else kind
            raise self.error(f"expected {expected}, got {token.describe()}", token)
        return self.advance()

    def error(self, message: str, token: Optional[Token] = None) -> ParseError:
        token = token or self.peek()
        return ParseError(message, token.line, token.column)

    # Statements

    def parse_program(self) -> Program:
        statements: List[Node] = []
        while not self.match(EOF):
            if self.match(SEMICOLON):
                self.advance()
                continue
            statements.append(self.parse_statement())
        return Program(statements, line=1, column=1)

    def parse_statement(self) -> Node:
        token = self.peek()
        if token.kind == KEYWORD:
            if token.value == 'let':
                return self.parse_var_decl()
            if token.value == 'if':
                return self.parse_if_stmt()
            if token.value == 'case':
                return self.parse_case_stmt()
            if token.value == 'func':
                return self.parse_func_decl()
            raise self.error(f"unexpected keyword {token.value!r}", token)
        if token.kind == LBRACE:
            return self.parse_block()
        expr = self.parse_expression()
        if isinstance(expr, Assign):
            self.consume(SEMICOLON)
        elif self.match(SEMICOLON):
            self.advance()
        return expr

    def parse_block(self) -> Block:
        start = self.consume(LBRACE)
        statements: List[Node] = []
        self.enter(start)
        try:
            while not self.match(RBRACE):
                if self.match(SEMICOLON):
                    self.advance()
                    continue
                statements.append(self.parse_statement())
            self.consume(RBRACE)
        finally:
            self.leave()
        return Block(statements, line=start.line, column=start.column)

    def parse_var_decl(self) -> VarDecl:
        start = self.consume(KEYWORD, 'let')
        token = self.peek()
        if token.kind == IDENT:
            self.advance()
            target: Node = Ident(token.value, line=token.line, column=token.column)
        elif token.kind == LPAREN:
            target = self.parse_primary()
            self.check_target(target, token)
        else:
            raise self.error(f"expected an identifier, got {token.describe()}", token)
        expr = None
        if self.match(ASSIGN):
            self.advance()
            expr = self.parse_expression()
        self.consume(SEMICOLON)
        return VarDecl(target, expr, line=start.line, column=start.column)

    def parse_if_stmt(self) -> IfStmt:
        start = self.consume(KEYWORD, 'if')
        condition = self.parse_relational()
        then_block = self.parse_block()
        else_block = None
        if self.match_keyword('else'):
            self.advance()
            else_block = self.parse_block()
        return IfStmt(condition, then_block, else_block, line=start.line, column=start.column)

    def parse_case_stmt(self) -> CaseStmt:
        start = self.consume(KEYWORD, 'case')
        scrutinee = self.parse_expression()
        self.consume(KEYWORD, 'of')
        self.consume(LBRACE)
        arms: List[CaseArm] = []
        while not self.match(RBRACE):
            arms.append(self.parse_case_arm())
        self.consume(RBRACE)
        self.consume(SEMICOLON)
        return CaseStmt(scrutinee, arms, line=start.line, column=start.column)

    def parse_case_arm(self) -> CaseArm:
        start = self.peek()
        if self.match_keyword('default'):
            self.advance()
            label: Node = Literal(None, 'Null', line=start.line, column=start.column)
        else:
            label = self.parse_expression()
        self.consume(COLON)
        body = self.parse_block()
        self.consume(SEMICOLON)
        return CaseArm(label, body, line=start.line, column=start.column)

    def parse_func_decl(self) -> FuncDecl:
        start = self.consume(KEYWORD, 'func')
        name = self.consume(IDENT)
        self.consume(LPAREN)
        params: List[FuncParam] = []
        while not self.match(RPAREN):
            token = self.peek()
            if token.kind != IDENT:
                raise self.error(f"expected a parameter name, got {token.describe()}", token)
            self.advance()
            type_expr = None
            if self.match(COLON):
                self.advance()
                type_expr = self.parse_relational()
            params.append(FuncParam(token.value, type_expr, line=token.line, column=token.column))
            if self.match(COMMA):
                self.advance()
            elif not self.match(RPAREN):
                raise self.error(f"expected ',' or ')', got {self.peek().describe()}")
        self.consume(RPAREN)
        return_type = None
        if self.match(COLON):
            self.advance()
            return_type = self.parse_relational()
        body = self.parse_block()
        return FuncDecl(name.value, params, return_type, body, line=start.line, column=start.column)

    # Expressions

    def parse_expression(self) -> Node:
        return self.parse_assignment()

    def parse_assignment(self) -> Node:
        start = self.peek()
        left = self.parse_relational()
        if self.match(ASSIGN):
            self.check_target(left, start)
            self.advance()
            value = self.parse_assignment()
            return Assign(left, value, line=start.line, column=start.column)
        return left

    def check_target(self, target: Node, token: Token):
        """Only identifiers and (nested) tuples of identifiers can be bound."""
        if isinstance(target, Ident):
            return
        if isinstance(target, TupleLit):
            for element in target.elements:
                self.check_target(element, token)
            return
        raise self.error("invalid assignment target", token)

    def parse_relational(self) -> Node:
        node = self.parse_additive()
        while self.peek().kind in RELATIONAL_KINDS:
            op_token = self.advance()
            right = self.parse_additive()
            node = CompareOp(op_token.value, node, right, line=op_token.line, column=op_token.column)
        return node

    def parse_additive(self) -> Node:
        node = self.parse_multiplicative()
        while self.match(BINARY_OP) and self.peek().value in ('+', '-'):
            op_token = self.advance()
            right = self.parse_multiplicative()
            node = BinaryOp(op_token.value, node, right, line=op_token.line, column=op_token.column)
        return node

    def parse_multiplicative(self) -> Node:
        node = self.parse_member()
        while self.match(BINARY_OP) and self.peek().value in ('*', '/', '%'):
            op_token = self.advance()
            right = self.parse_member()
            node = BinaryOp(op_token.value, node, right, line=op_token.line, column=op_token.column)
        return node

    def parse_member(self) -> Node:
        node = self.parse_conversion()
        while True:
            token = self.peek()
            if token.kind == DOT:
                self.advance()
                prop = self.parse_conversion()
                node = Member(node, prop, line=token.line, column=token.column)
                continue
            if token.kind == LBRACKET:
                self.advance()
                index = self.parse_expression()
                self.consume(RBRACKET)
                node = Index(node, index, line=token.line, column=token.column)
                continue
            if token.kind == LPAREN:
                args = self.parse_arguments()
                node = Call(node, args, line=token.line, column=token.column)
                continue
            if self.match_keyword('as', 'to'):
                self.advance()
                node = Conversion(node, self.parse_primary(), line=token.line, column=token.column)
                continue
            break
        return node

    def parse_arguments(self) -> List[Node]:
        self.consume(LPAREN)
        args: List[Node] = []
        while not self.match(RPAREN):
            args.append(self.parse_expression())
            if self.match(COMMA):
                self.advance()
            elif not self.match(RPAREN):
                raise self.error(f"expected ',' or ')', got {self.peek().describe()}")
        self.consume(RPAREN)
        return args

    def parse_conversion(self) -> Node:
        node = self.parse_primary()
        if self.match_keyword('as', 'to'):
            token = self.advance()
            node = Conversion(node, self.parse_primary(), line=token.line, column=token.column)
        return node

    def parse_primary(self) -> Node:
        token = self.peek()
        pos = dict(line=token.line, column=token.column)
        if token.kind == IDENT:
            self.advance()
            return Ident(token.value, **pos)
        if token.kind == INTEGER:
            self.advance()
            value = int(token.value)
            if value > INT64_MAX:
                raise self.error(f"integer literal {token.value} out of range", token)
            return Literal(value, 'Integer', **pos)
        if token.kind == REAL:
            self.advance()
            return Literal(float(token.value), 'Real', **pos)
        if token.kind == STRING:
            self.advance()
            return Literal(token.value, 'String', **pos)
        if (token.kind == BINARY_OP and token.value in ('+', '-')) or token.kind in (NOT, LBRACKET, LPAREN):
            self.enter(token)
            try:
                return self.parse_nested(token)
            finally:
                self.leave()
        if token.kind == EOF:
            raise self.error("unexpected end of input in expression", token)
        raise self.error(f"unexpected token {token.describe()}", token)

    def parse_nested(self, token: Token) -> Node:
        """Unary operators, array literals and parenthesized expressions."""
        pos = dict(line=token.line, column=token.column)
        self.advance()
        if token.kind == LBRACKET:
            elements: List[Node] = []
            while not self.match(RBRACKET):
                elements.append(self.parse_expression())
                if self.match(COMMA):
                    self.advance()
                else:
                    break
            self.consume(RBRACKET)
            return ArrayLit(elements, **pos)
        if token.kind == LPAREN:
            if self.match(RPAREN):
                self.advance()
                return Literal(None, 'Null', **pos)
            node = self.parse_expression()
            if self.match(COMMA):
                elements = [node]
                while self.match(COMMA):
                    self.advance()
                    if self.match(RPAREN):
                        break
                    elements.append(self.parse_expression())
                node = TupleLit(elements, **pos)
            self.consume(RPAREN)
            return node
        return UnaryOp(token.value, self.parse_primary(), **pos)


def parse_program(source: str) -> Program:
    """Parse the given source code into a Program AST."""
    tokens = tokenize(source)
    parser = Parser(tokens)
    try:
        return parser.parse_program()
    except RecursionError:
        raise parser.error("program nests too deeply") from None
