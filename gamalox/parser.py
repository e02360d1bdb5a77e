"""Recursive-descent parser for the Lox language.

The parser consumes the token list produced by `scan_tokens` and builds a
list of statement nodes. Each precedence level is one method, from
`comma` (lowest) down to `primary`. Syntax errors are reported and
unwound to the enclosing declaration, after which `synchronize` skips
ahead to the next statement boundary.

In REPL mode the whole input is first tried as a single bare expression;
if that succeeds it is wrapped in a print statement, otherwise the attempt
is thrown away and the input is parsed as ordinary statements.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Assign, Binary, Call, Get, Grouping, Literal, Logical, Set, Super,
    This, Unary, Ternary, Variable, AnonFunction, Expr,
    Block, ClassDecl, ExprStmt, FuncDecl, IfStmt, PrintStmt, ReturnStmt,
    VarDecl, WhileStmt, BreakStmt, Stmt,
)
from .errors import ErrorReporter, ParseError
from .scanner import Token, scan_tokens

MAX_ARGUMENTS = 255

# Tokens that start a new declaration or statement; recovery stops before them.
STATEMENT_STARTS = {'CLASS', 'FUN', 'VAR', 'FOR', 'IF', 'WHILE', 'PRINT', 'RETURN', 'BREAK'}


class Parser:
    def __init__(self, tokens: List[Token], reporter: ErrorReporter, repl: bool = False):
        self.tokens = tokens
        self.reporter = reporter
        self.repl = repl
        self.silent = False
        self.silent_failed = False
        self.pos = 0

    def parse(self) -> List[Stmt]:
        try:
            return self.parse_source()
        except RecursionError:
            self.reporter.token_error(self.peek(), 'Expression nested too deeply.')
            return []

    def parse_source(self) -> List[Stmt]:
        if self.repl:
            statement = self.try_bare_expression()
            if statement is not None:
                return [statement]
        statements: List[Stmt] = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def try_bare_expression(self) -> Optional[Stmt]:
        self.silent = True
        self.silent_failed = False
        try:
            expr = self.expression()
            if self.is_at_end() and not self.silent_failed:
                return PrintStmt(expr)
        except ParseError:
            pass
        finally:
            self.silent = False
        self.pos = 0
        return None

    # Declarations

    def declaration(self) -> Optional[Stmt]:
        try:
            if self.match('CLASS'):
                return self.class_declaration()
            if self.check('FUN') and self.peek_next().kind != 'LEFT_PAREN':
                self.advance()
                return self.function('function')
            if self.match('VAR'):
                return self.var_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def class_declaration(self) -> ClassDecl:
        name = self.consume('IDENTIFIER', 'Expected class name.')
        superclass: Optional[Variable] = None
        if self.match('LESS'):
            superclass = Variable(self.consume('IDENTIFIER', 'Expected superclass name.'))
        self.consume('LEFT_BRACE', "Expected '{' before class body.")

        methods: List[FuncDecl] = []
        getters: List[FuncDecl] = []
        static_methods: List[FuncDecl] = []
        while not self.check('RIGHT_BRACE') and not self.is_at_end():
            if self.match('CLASS'):
                static_methods.append(self.function('static method'))
            elif self.check('IDENTIFIER') and self.peek_next().kind == 'LEFT_BRACE':
                getter_name = self.advance()
                getters.append(FuncDecl(getter_name, [], self.function_body('getter')))
            else:
                methods.append(self.function('method'))

        self.consume('RIGHT_BRACE', "Expected '}' after class body.")
        return ClassDecl(name, superclass, methods, getters, static_methods)

    def function(self, kind: str) -> FuncDecl:
        name = self.consume('IDENTIFIER', f"Expected {kind} name.")
        params = self.parameters(kind)
        body = self.function_body(kind)
        return FuncDecl(name, params, body)

    def parameters(self, kind: str) -> List[Token]:
        self.consume('LEFT_PAREN', f"Expected '(' before {kind} parameters.")
        params: List[Token] = []
        if not self.check('RIGHT_PAREN'):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"Cannot have more than {MAX_ARGUMENTS} parameters.")
                params.append(self.consume('IDENTIFIER', 'Expected parameter name.'))
                if not self.match('COMMA'):
                    break
        self.consume('RIGHT_PAREN', "Expected ')' after parameters.")
        return params

    def function_body(self, kind: str) -> List[Stmt]:
        self.consume('LEFT_BRACE', f"Expected '{{' before {kind} body.")
        return self.block()

    def var_declaration(self) -> VarDecl:
        name = self.consume('IDENTIFIER', 'Expected variable name.')
        initializer: Optional[Expr] = None
        if self.match('EQUAL'):
            initializer = self.expression()
        self.consume('SEMICOLON', "Expected ';' after variable declaration.")
        return VarDecl(name, initializer)

    # Statements

    def statement(self) -> Stmt:
        if self.match('IF'):
            return self.if_statement()
        if self.match('WHILE'):
            return self.while_statement()
        if self.match('FOR'):
            return self.for_statement()
        if self.match('PRINT'):
            return self.print_statement()
        if self.match('RETURN'):
            return self.return_statement()
        if self.match('BREAK'):
            return self.break_statement()
        if self.match('LEFT_BRACE'):
            return Block(self.block())
        return self.expression_statement()

    def if_statement(self) -> IfStmt:
        self.consume('LEFT_PAREN', "Expected '(' before condition.")
        condition = self.expression()
        self.consume('RIGHT_PAREN', "Expected ')' after condition.")
        then_branch = self.statement()
        else_branch = None
        if self.match('ELSE'):
            else_branch = self.statement()
        return IfStmt(condition, then_branch, else_branch)

    def while_statement(self) -> WhileStmt:
        self.consume('LEFT_PAREN', "Expected '(' before condition.")
        condition = self.expression()
        self.consume('RIGHT_PAREN', "Expected ')' after condition.")
        body = self.statement()
        return WhileStmt(condition, body)

    def for_statement(self) -> Stmt:
        # for (init; cond; incr) body  =>  { init; while (cond) { body; incr; } }
        self.consume('LEFT_PAREN', "Expected '(' after for.")

        initializer: Optional[Stmt]
        if self.match('SEMICOLON'):
            initializer = None
        elif self.match('VAR'):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition: Optional[Expr] = None
        if not self.check('SEMICOLON'):
            condition = self.expression()
        self.consume('SEMICOLON', "Expected ';' after loop condition.")

        increment: Optional[Expr] = None
        if not self.check('RIGHT_PAREN'):
            increment = self.expression()
        self.consume('RIGHT_PAREN', "Expected ')' after for clauses.")

        body = self.statement()
        if increment is not None:
            body = Block([body, ExprStmt(increment)])
        if condition is None:
            condition = Literal(True)
        loop: Stmt = WhileStmt(condition, body)
        if initializer is not None:
            loop = Block([initializer, loop])
        return loop

    def print_statement(self) -> PrintStmt:
        value = self.expression()
        self.consume('SEMICOLON', "Expected ';' after value.")
        return PrintStmt(value)

    def return_statement(self) -> ReturnStmt:
        keyword = self.previous()
        value: Optional[Expr] = None
        if not self.check('SEMICOLON'):
            value = self.expression()
        self.consume('SEMICOLON', "Expected ';' after return value.")
        return ReturnStmt(keyword, value)

    def break_statement(self) -> BreakStmt:
        keyword = self.previous()
        self.consume('SEMICOLON', "Expected ';' after break.")
        return BreakStmt(keyword)

    def block(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.check('RIGHT_BRACE') and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume('RIGHT_BRACE', "Expected '}' after block.")
        return statements

    def expression_statement(self) -> ExprStmt:
        expr = self.expression()
        self.consume('SEMICOLON', "Expected ';' after expression.")
        return ExprStmt(expr)

    # Expressions, lowest precedence first

    def expression(self) -> Expr:
        return self.comma()

    def comma(self) -> Expr:
        expr = self.conditional()
        while self.match('COMMA'):
            operator = self.previous()
            right = self.conditional()
            expr = Binary(expr, operator, right)
        return expr

    def conditional(self) -> Expr:
        expr = self.assignment()
        if self.match('QUESTION_MARK'):
            then_branch = self.conditional()
            self.consume('COLON', "Expected ':' in conditional expression.")
            else_branch = self.conditional()
            expr = Ternary(expr, then_branch, else_branch)
        return expr

    def assignment(self) -> Expr:
        expr = self.logic_or()
        if self.match('EQUAL'):
            equals = self.previous()
            value = self.assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            if isinstance(expr, Get):
                return Set(expr.object, expr.name, value)
            # Reported but not thrown: the parser is not confused.
            self.error(equals, 'Invalid assignment target.')
        return expr

    def logic_or(self) -> Expr:
        expr = self.logic_and()
        while self.match('OR'):
            operator = self.previous()
            right = self.logic_and()
            expr = Logical(expr, operator, right)
        return expr

    def logic_and(self) -> Expr:
        expr = self.equality()
        while self.match('AND'):
            operator = self.previous()
            right = self.equality()
            expr = Logical(expr, operator, right)
        return expr

    def equality(self) -> Expr:
        return self.binary_level(self.comparison, 'BANG_EQUAL', 'EQUAL_EQUAL')

    def comparison(self) -> Expr:
        return self.binary_level(self.term, 'GREATER', 'GREATER_EQUAL', 'LESS', 'LESS_EQUAL')

    def term(self) -> Expr:
        return self.binary_level(self.factor, 'MINUS', 'PLUS')

    def factor(self) -> Expr:
        return self.binary_level(self.unary, 'SLASH', 'STAR')

    def binary_level(self, operand, *kinds: str) -> Expr:
        # Left-associative chain of one precedence level.
        expr = operand()
        while self.match(*kinds):
            operator = self.previous()
            right = operand()
            expr = Binary(expr, operator, right)
        return expr

    def unary(self) -> Expr:
        if self.match('BANG', 'MINUS'):
            operator = self.previous()
            right = self.unary()
            return Unary(operator, right)
        return self.call()

    def call(self) -> Expr:
        expr = self.primary()
        while True:
            if self.match('LEFT_PAREN'):
                expr = self.finish_call(expr)
            elif self.match('DOT'):
                name = self.consume('IDENTIFIER', "Expected property name after '.'.")
                expr = Get(expr, name)
            else:
                break
        return expr

    def finish_call(self, callee: Expr) -> Call:
        arguments: List[Expr] = []
        if not self.check('RIGHT_PAREN'):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"Cannot have more than {MAX_ARGUMENTS} arguments.")
                arguments.append(self.conditional())
                if not self.match('COMMA'):
                    break
        paren = self.consume('RIGHT_PAREN', "Expected ')' after arguments.")
        return Call(callee, paren, arguments)

    def primary(self) -> Expr:
        if self.match('FALSE'):
            return Literal(False)
        if self.match('TRUE'):
            return Literal(True)
        if self.match('NIL'):
            return Literal(None)
        if self.match('NUMBER', 'STRING'):
            return Literal(self.previous().literal)
        if self.match('SUPER'):
            keyword = self.previous()
            self.consume('DOT', "Expected '.' after 'super'.")
            method = self.consume('IDENTIFIER', 'Expected superclass method name.')
            return Super(keyword, method)
        if self.match('THIS'):
            return This(self.previous())
        if self.match('IDENTIFIER'):
            return Variable(self.previous())
        if self.match('FUN'):
            keyword = self.previous()
            params = self.parameters('anonymous function')
            body = self.function_body('anonymous function')
            return AnonFunction(keyword, params, body)
        if self.match('LEFT_PAREN'):
            expr = self.expression()
            self.consume('RIGHT_PAREN', "Expected ')' after expression.")
            return Grouping(expr)
        raise self.error(self.peek(), 'Expected an expression.')

    # Token helpers

    def synchronize(self):
        self.advance()
        while not self.is_at_end():
            if self.previous().kind == 'SEMICOLON':
                return
            if self.peek().kind in STATEMENT_STARTS:
                return
            self.advance()

    def match(self, *kinds: str) -> bool:
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def check(self, kind: str) -> bool:
        if self.is_at_end():
            return False
        return self.peek().kind == kind

    def consume(self, kind: str, message: str) -> Token:
        if self.check(kind):
            return self.advance()
        raise self.error(self.peek(), message)

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().kind == 'EOF'

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def peek_next(self) -> Token:
        if self.pos + 1 < len(self.tokens):
            return self.tokens[self.pos + 1]
        return self.tokens[-1]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def error(self, token: Token, message: str) -> ParseError:
        if self.silent:
            self.silent_failed = True
        else:
            self.reporter.token_error(token, message)
        return ParseError(message)


def parse_program(source: str, reporter: Optional[ErrorReporter] = None, repl: bool = False) -> List[Stmt]:
    """Scan and parse Lox source code into a list of statements.

    Problems are reported to `reporter`; check `reporter.had_error` before
    resolving or running the result.
    """
    if reporter is None:
        reporter = ErrorReporter()
    tokens = scan_tokens(source, reporter)
    return Parser(tokens, reporter, repl=repl).parse()
