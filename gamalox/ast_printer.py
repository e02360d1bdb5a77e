"""Debug rendering of Lox syntax trees.

`AstPrinter` walks the same node classes as the resolver and interpreter
and renders them as parenthesised prefix text, e.g. `1 + 2 * 3` becomes
`(+ 1 (* 2 3))`. It has no effect on execution.
"""

from __future__ import annotations

from typing import List

from .ast import (
    Assign, Binary, Call, Get, Grouping, Literal, Logical, Set, Super,
    This, Unary, Ternary, Variable, AnonFunction, Node,
    Block, ClassDecl, ExprStmt, FuncDecl, IfStmt, PrintStmt, ReturnStmt,
    VarDecl, WhileStmt, BreakStmt,
)
from .types import stringify


class AstPrinter:
    def print(self, node: Node) -> str:
        # Expressions
        if isinstance(node, Literal):
            if isinstance(node.value, str):
                return f'"{node.value}"'
            return stringify(node.value)
        if isinstance(node, Grouping):
            return self.parenthesize('group', node.expression)
        if isinstance(node, Variable):
            return node.name.lexeme
        if isinstance(node, Assign):
            return self.parenthesize(f"= {node.name.lexeme}", node.value)
        if isinstance(node, (Binary, Logical)):
            return self.parenthesize(node.operator.lexeme, node.left, node.right)
        if isinstance(node, Unary):
            return self.parenthesize(node.operator.lexeme, node.right)
        if isinstance(node, Ternary):
            return self.parenthesize('?', node.condition, node.then_branch, node.else_branch)
        if isinstance(node, Call):
            return self.parenthesize('call', node.callee, *node.arguments)
        if isinstance(node, Get):
            return self.parenthesize(f". {node.name.lexeme}", node.object)
        if isinstance(node, Set):
            return self.parenthesize(f"= . {node.name.lexeme}", node.object, node.value)
        if isinstance(node, This):
            return 'this'
        if isinstance(node, Super):
            return f"(super {node.method.lexeme})"
        if isinstance(node, AnonFunction):
            return f"(fun ({self.names(node.params)}) {self.body(node.body)})"
        # Statements
        if isinstance(node, ExprStmt):
            return self.parenthesize(';', node.expression)
        if isinstance(node, PrintStmt):
            return self.parenthesize('print', node.expression)
        if isinstance(node, VarDecl):
            if node.initializer is None:
                return f"(var {node.name.lexeme})"
            return self.parenthesize(f"var {node.name.lexeme}", node.initializer)
        if isinstance(node, Block):
            return self.body(node.statements)
        if isinstance(node, IfStmt):
            if node.else_branch is None:
                return self.parenthesize('if', node.condition, node.then_branch)
            return self.parenthesize('if-else', node.condition, node.then_branch, node.else_branch)
        if isinstance(node, WhileStmt):
            return self.parenthesize('while', node.condition, node.body)
        if isinstance(node, ReturnStmt):
            if node.value is None:
                return '(return)'
            return self.parenthesize('return', node.value)
        if isinstance(node, BreakStmt):
            return '(break)'
        if isinstance(node, FuncDecl):
            return self.function('fun', node)
        if isinstance(node, ClassDecl):
            parts = [f"class {node.name.lexeme}"]
            if node.superclass is not None:
                parts.append(f"< {node.superclass.name.lexeme}")
            parts.extend(self.function('method', m) for m in node.methods)
            parts.extend(self.function('getter', g) for g in node.getters)
            parts.extend(self.function('static', s) for s in node.static_methods)
            return f"({' '.join(parts)})"
        raise NotImplementedError(f"print: unexpected node type {type(node)}")

    def parenthesize(self, name: str, *nodes: Node) -> str:
        parts = [name] + [self.print(node) for node in nodes]
        return f"({' '.join(parts)})"

    def function(self, kind: str, node: FuncDecl) -> str:
        return f"({kind} {node.name.lexeme} ({self.names(node.params)}) {self.body(node.body)})"

    def body(self, statements: List[Node]) -> str:
        return f"{{{' '.join(self.print(stmt) for stmt in statements)}}}"

    @staticmethod
    def names(tokens) -> str:
        return ' '.join(token.lexeme for token in tokens)
