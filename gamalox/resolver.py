"""Static scope resolution for Lox programs.

The resolver walks the statement list once before execution. For every
variable, `this` and `super` reference that binds to a local scope it
records how many scopes separate the use from the declaration; references
it cannot find are left out of the map and are looked up in the global
scope at run time. Along the way it reports scope-discipline errors
(duplicate locals, self-referencing initializers, misplaced `return`,
`break`, `this` and `super`) and warns about locals that are never read.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, List, Optional

from .ast import (
    Assign, Binary, Call, Get, Grouping, Literal, Logical, Set, Super,
    This, Unary, Ternary, Variable, AnonFunction, Expr,
    Block, ClassDecl, ExprStmt, FuncDecl, IfStmt, PrintStmt, ReturnStmt,
    VarDecl, WhileStmt, BreakStmt, Stmt,
)
from .errors import ErrorReporter
from .scanner import Token


class FunctionType(enum.Enum):
    NONE = 'none'
    FUNCTION = 'function'
    INITIALIZER = 'initializer'
    METHOD = 'method'
    STATIC_METHOD = 'static method'


class ClassType(enum.Enum):
    NONE = 'none'
    CLASS = 'class'
    SUBCLASS = 'subclass'


@dataclass
class VarInfo:
    token: Token
    initialized: bool = False
    used: bool = False


class Resolver:
    def __init__(self, reporter: ErrorReporter):
        self.reporter = reporter
        self.scopes: List[Dict[str, VarInfo]] = []
        self.locals: Dict[Expr, int] = {}
        self.current_function = FunctionType.NONE
        # Innermost method kind; survives nested functions so `this` works in closures.
        self.current_method = FunctionType.NONE
        self.current_class = ClassType.NONE
        self.in_loop = False
        # Most recent name seen; locates errors that have no node of their own.
        self.last_name: Optional[Token] = None

    def resolve(self, statements: List[Stmt]) -> Dict[Expr, int]:
        """Resolve a program and return its distance map."""
        try:
            for stmt in statements:
                self.resolve_stmt(stmt)
        except RecursionError:
            line = self.last_name.line if self.last_name is not None else 1
            self.reporter.error(line, 'Expression nested too deeply.')
        return self.locals

    # Statements

    def resolve_stmt(self, node: Stmt):
        if isinstance(node, Block):
            self.begin_scope()
            for stmt in node.statements:
                self.resolve_stmt(stmt)
            self.end_scope()
            return
        if isinstance(node, VarDecl):
            self.declare(node.name)
            if node.initializer is not None:
                self.resolve_expr(node.initializer)
            self.define(node.name)
            return
        if isinstance(node, FuncDecl):
            # Defined before the body so the function can recurse.
            self.declare(node.name)
            self.define(node.name)
            self.resolve_function(node.params, node.body, FunctionType.FUNCTION)
            return
        if isinstance(node, ClassDecl):
            self.resolve_class(node)
            return
        if isinstance(node, ExprStmt):
            self.resolve_expr(node.expression)
            return
        if isinstance(node, IfStmt):
            self.resolve_expr(node.condition)
            self.resolve_stmt(node.then_branch)
            if node.else_branch is not None:
                self.resolve_stmt(node.else_branch)
            return
        if isinstance(node, PrintStmt):
            self.resolve_expr(node.expression)
            return
        if isinstance(node, ReturnStmt):
            if self.current_function == FunctionType.NONE:
                self.reporter.token_error(node.keyword, 'Cannot return from top-level code.')
            if node.value is not None:
                if self.current_function == FunctionType.INITIALIZER:
                    self.reporter.token_error(node.keyword, 'Cannot return a value from an initializer.')
                self.resolve_expr(node.value)
            return
        if isinstance(node, WhileStmt):
            self.resolve_expr(node.condition)
            enclosing_loop = self.in_loop
            self.in_loop = True
            self.resolve_stmt(node.body)
            self.in_loop = enclosing_loop
            return
        if isinstance(node, BreakStmt):
            if not self.in_loop:
                self.reporter.token_error(node.keyword, 'Cannot break when not in a loop.')
            return
        raise NotImplementedError(f"resolve: unexpected node type {type(node)}")

    def resolve_class(self, node: ClassDecl):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS
        self.declare(node.name)
        self.define(node.name)

        if node.superclass is not None:
            if node.superclass.name.lexeme == node.name.lexeme:
                self.reporter.token_error(node.superclass.name, "A class can't inherit from itself.")
            self.current_class = ClassType.SUBCLASS
            self.resolve_expr(node.superclass)
            self.begin_scope()
            self.scopes[-1]['super'] = VarInfo(node.name, initialized=True, used=True)

        self.begin_scope()
        self.scopes[-1]['this'] = VarInfo(node.name, initialized=True, used=True)
        for method in node.methods:
            kind = FunctionType.INITIALIZER if method.name.lexeme == 'init' else FunctionType.METHOD
            self.resolve_function(method.params, method.body, kind)
        for getter in node.getters:
            self.resolve_function(getter.params, getter.body, FunctionType.METHOD)
        for static_method in node.static_methods:
            self.resolve_function(static_method.params, static_method.body, FunctionType.STATIC_METHOD)
        self.end_scope()

        if node.superclass is not None:
            self.end_scope()
        self.current_class = enclosing_class

    def resolve_function(self, params: List[Token], body: List[Stmt], kind: FunctionType):
        enclosing_function = self.current_function
        enclosing_method = self.current_method
        enclosing_loop = self.in_loop
        self.current_function = kind
        if kind != FunctionType.FUNCTION:
            self.current_method = kind
        self.in_loop = False

        self.begin_scope()
        for param in params:
            self.declare(param)
            self.define(param)
        for stmt in body:
            self.resolve_stmt(stmt)
        self.end_scope()

        self.current_function = enclosing_function
        self.current_method = enclosing_method
        self.in_loop = enclosing_loop

    # Expressions

    def resolve_expr(self, node: Expr):
        if isinstance(node, Variable):
            if self.scopes:
                info = self.scopes[-1].get(node.name.lexeme)
                if info is not None and not info.initialized:
                    self.reporter.token_error(node.name, 'Cannot read local variable in its own initializer.')
            self.resolve_local(node, node.name)
            return
        if isinstance(node, Assign):
            self.resolve_expr(node.value)
            self.resolve_local(node, node.name)
            return
        if isinstance(node, (Binary, Logical)):
            self.resolve_expr(node.left)
            self.resolve_expr(node.right)
            return
        if isinstance(node, Unary):
            self.resolve_expr(node.right)
            return
        if isinstance(node, Ternary):
            self.resolve_expr(node.condition)
            self.resolve_expr(node.then_branch)
            self.resolve_expr(node.else_branch)
            return
        if isinstance(node, Grouping):
            self.resolve_expr(node.expression)
            return
        if isinstance(node, Literal):
            return
        if isinstance(node, Call):
            self.resolve_expr(node.callee)
            for argument in node.arguments:
                self.resolve_expr(argument)
            return
        if isinstance(node, Get):
            self.resolve_expr(node.object)
            return
        if isinstance(node, Set):
            self.resolve_expr(node.value)
            self.resolve_expr(node.object)
            return
        if isinstance(node, This):
            if self.current_class == ClassType.NONE or \
                    self.current_method not in (FunctionType.METHOD, FunctionType.INITIALIZER):
                self.reporter.token_error(node.keyword, "Can only use 'this' in instance methods.")
                return
            self.resolve_local(node, node.keyword)
            return
        if isinstance(node, Super):
            if self.current_class == ClassType.NONE:
                self.reporter.token_error(node.keyword, "Can't use 'super' outside of a class.")
                return
            if self.current_class != ClassType.SUBCLASS:
                self.reporter.token_error(node.keyword, "Can't use 'super' in a class with no superclass.")
                return
            if self.current_method == FunctionType.STATIC_METHOD:
                self.reporter.token_error(node.keyword, "Can't use 'super' in a static method.")
                return
            self.resolve_local(node, node.keyword)
            return
        if isinstance(node, AnonFunction):
            self.resolve_function(node.params, node.body, FunctionType.FUNCTION)
            return
        raise NotImplementedError(f"resolve: unexpected node type {type(node)}")

    # Scopes

    def resolve_local(self, expr: Expr, name: Token):
        self.last_name = name
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                scope[name.lexeme].used = True
                self.locals[expr] = depth
                return
        # Not found: global.

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        scope = self.scopes.pop()
        for info in scope.values():
            if not info.used:
                self.reporter.warning(info.token, 'This variable is unused.')

    def declare(self, name: Token):
        self.last_name = name
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.reporter.token_error(name, 'Variable with this name already declared in this scope.')
        scope[name.lexeme] = VarInfo(name)

    def define(self, name: Token):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme].initialized = True
