"""Abstract Syntax Tree (AST) definitions for the Lox language.

The node classes form two closed sets, expressions and statements. Every
pass (resolver, interpreter, printer) dispatches over them with an
`isinstance` chain. Nodes compare and hash by identity so that an
expression node can key the resolver's distance map.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Any

from .scanner import Token


@dataclass(eq=False)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(eq=False)
class Expr(Node):
    pass


@dataclass(eq=False)
class Stmt(Node):
    pass


# Expressions

@dataclass(eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(eq=False)
class Binary(Expr):
    left: Expr
    operator: Token  # includes COMMA for the sequencing operator
    right: Expr


@dataclass(eq=False)
class Call(Expr):
    callee: Expr
    paren: Token
    arguments: List[Expr]


@dataclass(eq=False)
class Get(Expr):
    object: Expr
    name: Token


@dataclass(eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(eq=False)
class Literal(Expr):
    value: Any  # None, bool, float or str


@dataclass(eq=False)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(eq=False)
class Set(Expr):
    object: Expr
    name: Token
    value: Expr


@dataclass(eq=False)
class Super(Expr):
    keyword: Token
    method: Token


@dataclass(eq=False)
class This(Expr):
    keyword: Token


@dataclass(eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(eq=False)
class Ternary(Expr):
    condition: Expr
    then_branch: Expr
    else_branch: Expr


@dataclass(eq=False)
class Variable(Expr):
    name: Token


@dataclass(eq=False)
class AnonFunction(Expr):
    keyword: Token
    params: List[Token]
    body: List[Stmt]


# Statements

@dataclass(eq=False)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(eq=False)
class FuncDecl(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]


@dataclass(eq=False)
class ClassDecl(Stmt):
    name: Token
    superclass: Optional[Variable]
    methods: List[FuncDecl]
    getters: List[FuncDecl]  # always zero parameters
    static_methods: List[FuncDecl]


@dataclass(eq=False)
class ExprStmt(Stmt):
    expression: Expr


@dataclass(eq=False)
class IfStmt(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(eq=False)
class PrintStmt(Stmt):
    expression: Expr


@dataclass(eq=False)
class ReturnStmt(Stmt):
    keyword: Token
    value: Optional[Expr]


@dataclass(eq=False)
class VarDecl(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass(eq=False)
class WhileStmt(Stmt):
    condition: Expr
    body: Stmt


@dataclass(eq=False)
class BreakStmt(Stmt):
    keyword: Token
