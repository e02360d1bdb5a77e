"""Tree-walking evaluator for the Lox language.

`Interpreter.execute` runs one statement and returns its outcome: None for
normal completion, a `ReturnSignal` carrying a value, or `BREAK`. Blocks,
loops and calls inspect the outcome and either consume it or hand it
outward. `Interpreter.evaluate` computes the value of an expression.

Variable references are looked up through the distance map produced by
the resolver. An expression without an entry refers to a global.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, TextIO

from .ast import (
    Assign, Binary, Call, Get, Grouping, Literal, Logical, Set, Super,
    This, Unary, Ternary, Variable, AnonFunction, Expr,
    Block, ClassDecl, ExprStmt, FuncDecl, IfStmt, PrintStmt, ReturnStmt,
    VarDecl, WhileStmt, BreakStmt, Stmt,
)
from .environment import Environment
from .errors import BREAK, BreakSignal, ErrorReporter, LoxRuntimeError, ReturnSignal
from .scanner import Token
from .std import populate_global_environment
from .types import (
    LoxCallable, LoxFunction, LoxInstance, LoxRegularClass,
    is_equal, is_number, is_truthy, stringify, type_name,
)


class Interpreter:
    """Core interpreter that executes resolved Lox statements."""
    def __init__(self, reporter: Optional[ErrorReporter] = None,
                 debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.globals = populate_global_environment(Environment())
        self.environment = self.globals
        self.locals: Dict[Expr, int] = {}
        self.debug_level = debug_level
        self.debug_fp: Optional[TextIO] = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()

    def close(self):
        if self.debug_fp is not None:
            self.debug_fp.close()
            self.debug_fp = None

    def add_locals(self, distances: Dict[Expr, int]):
        self.locals.update(distances)

    # Public API
    def interpret(self, statements: List[Stmt]) -> bool:
        """Run a resolved program; returns False if a runtime error stopped it."""
        self.debug(f"run {len(statements)} statement(s)")
        try:
            for stmt in statements:
                self.execute(stmt)
        except LoxRuntimeError as ex:
            self.debug(f"runtime error: {ex.message}")
            self.reporter.runtime_error(ex)
            return False
        return True

    def execute_block(self, statements: List[Stmt], env: Environment) -> Any:
        previous = self.environment
        try:
            self.environment = env
            for stmt in statements:
                outcome = self.execute(stmt)
                if outcome is not None:
                    return outcome
            return None
        finally:
            self.environment = previous

    def execute(self, node: Stmt) -> Any:
        if isinstance(node, ExprStmt):
            self.evaluate(node.expression)
            return None
        if isinstance(node, PrintStmt):
            value = self.evaluate(node.expression)
            print(stringify(value))
            return None
        if isinstance(node, VarDecl):
            value = self.evaluate(node.initializer) if node.initializer is not None else None
            self.environment.define(node.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name.lexeme}: {type_name(value)} = {stringify(value)}")
            return None
        if isinstance(node, Block):
            return self.execute_block(node.statements, Environment(self.environment))
        if isinstance(node, IfStmt):
            if is_truthy(self.evaluate(node.condition)):
                return self.execute(node.then_branch)
            if node.else_branch is not None:
                return self.execute(node.else_branch)
            return None
        if isinstance(node, WhileStmt):
            while is_truthy(self.evaluate(node.condition)):
                outcome = self.execute(node.body)
                if isinstance(outcome, BreakSignal):
                    break
                if isinstance(outcome, ReturnSignal):
                    return outcome
            return None
        if isinstance(node, BreakStmt):
            return BREAK
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value) if node.value is not None else None
            return ReturnSignal(value)
        if isinstance(node, FuncDecl):
            function = LoxFunction(node.name.lexeme, node.params, node.body, self.environment)
            self.environment.define(node.name.lexeme, function)
            if self.debug_level >= 2:
                self.debug(f"define function {node.name.lexeme}/{function.arity()}")
            return None
        if isinstance(node, ClassDecl):
            self.execute_class(node)
            return None
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_class(self, node: ClassDecl):
        superclass = None
        if node.superclass is not None:
            superclass = self.evaluate(node.superclass)
            if not isinstance(superclass, LoxRegularClass):
                raise LoxRuntimeError(node.superclass.name, 'Superclass must be a class.')

        self.environment.define(node.name.lexeme, None)

        if superclass is not None:
            self.environment = Environment(self.environment)
            self.environment.define('super', superclass)

        methods = {
            method.name.lexeme: LoxFunction(method.name.lexeme, method.params, method.body,
                                            self.environment, method.name.lexeme == 'init')
            for method in node.methods
        }
        getters = {
            getter.name.lexeme: LoxFunction(getter.name.lexeme, [], getter.body, self.environment)
            for getter in node.getters
        }
        static_methods = {
            method.name.lexeme: LoxFunction(method.name.lexeme, method.params, method.body, self.environment)
            for method in node.static_methods
        }
        klass = LoxRegularClass(node.name.lexeme, superclass, methods, getters, static_methods)

        if superclass is not None:
            self.environment = self.environment.enclosing

        self.environment.assign(node.name, klass)
        if self.debug_level >= 2:
            parent = f" < {superclass.name}" if superclass is not None else ''
            self.debug(f"define class {klass.name}{parent}: {len(methods)} method(s), "
                       f"{len(getters)} getter(s), {len(static_methods)} static method(s)")

    def evaluate(self, node: Expr) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression)
        if isinstance(node, Variable):
            return self.look_up_variable(node.name, node)
        if isinstance(node, Assign):
            value = self.evaluate(node.value)
            distance = self.locals.get(node)
            if distance is not None:
                self.environment.assign_at(distance, node.name, value)
            else:
                self.globals.assign(node.name, value)
            return value
        if isinstance(node, Unary):
            right = self.evaluate(node.right)
            if node.operator.kind == 'MINUS':
                self.check_number_operand(node.operator, right)
                return -right
            if node.operator.kind == 'BANG':
                return not is_truthy(right)
            raise LoxRuntimeError(node.operator, 'Unknown operator.')
        if isinstance(node, Binary):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, Logical):
            # Short-circuit; yields the operand itself, not a boolean.
            left = self.evaluate(node.left)
            if node.operator.kind == 'OR':
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(node.right)
        if isinstance(node, Ternary):
            if is_truthy(self.evaluate(node.condition)):
                return self.evaluate(node.then_branch)
            return self.evaluate(node.else_branch)
        if isinstance(node, Call):
            callee = self.evaluate(node.callee)
            arguments = [self.evaluate(argument) for argument in node.arguments]
            return self.call_function(callee, arguments, node.paren)
        if isinstance(node, Get):
            obj = self.evaluate(node.object)
            if isinstance(obj, LoxInstance):
                return obj.get(node.name, self)
            raise LoxRuntimeError(node.name, 'Only instances have properties.')
        if isinstance(node, Set):
            obj = self.evaluate(node.object)
            if not isinstance(obj, LoxInstance):
                raise LoxRuntimeError(node.name, 'Only instances have fields.')
            value = self.evaluate(node.value)
            obj.set(node.name, value)
            return value
        if isinstance(node, This):
            return self.look_up_variable(node.keyword, node)
        if isinstance(node, Super):
            return self.evaluate_super(node)
        if isinstance(node, AnonFunction):
            return LoxFunction('anonymous function', node.params, node.body, self.environment)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def evaluate_super(self, node: Super) -> Any:
        distance = self.locals[node]
        superclass = self.environment.get_at(distance, 'super')
        # `this` always lives in the scope just inside the one holding `super`.
        instance = self.environment.get_at(distance - 1, 'this')
        method = superclass.find_method(node.method.lexeme)
        if method is not None:
            return method.bind(instance)
        getter = superclass.find_getter(node.method.lexeme)
        if getter is not None:
            return getter.bind(instance).call(self, [])
        raise LoxRuntimeError(node.method, f"Undefined property '{node.method.lexeme}'.")

    def look_up_variable(self, name: Token, expr: Expr) -> Any:
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def call_function(self, callee: Any, arguments: List[Any], paren: Token) -> Any:
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(paren, 'Can only call functions and classes.')
        if len(arguments) != callee.arity():
            raise LoxRuntimeError(paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")
        if self.debug_level >= 3:
            self.debug(f"call {callee} with ({', '.join(stringify(a) for a in arguments)})")
        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError(paren, 'Stack overflow.') from None

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        op = operator.kind
        if op == 'COMMA':
            return b
        if op == 'PLUS':
            if is_number(a) and is_number(b):
                return a + b
            if isinstance(a, str) or isinstance(b, str):
                return stringify(a) + stringify(b)
            raise LoxRuntimeError(operator, 'Operands must be two numbers or two strings.')
        if op == 'EQUAL_EQUAL':
            return is_equal(a, b)
        if op == 'BANG_EQUAL':
            return not is_equal(a, b)
        self.check_number_operands(operator, a, b)
        if op == 'MINUS':
            return a - b
        if op == 'STAR':
            return a * b
        if op == 'SLASH':
            if b == 0:
                raise LoxRuntimeError(operator, 'Division by zero is not allowed.')
            return a / b
        if op == 'GREATER':
            return a > b
        if op == 'GREATER_EQUAL':
            return a >= b
        if op == 'LESS':
            return a < b
        if op == 'LESS_EQUAL':
            return a <= b
        raise LoxRuntimeError(operator, 'Unknown operator.')

    def check_number_operand(self, operator: Token, operand: Any):
        if is_number(operand):
            return
        raise LoxRuntimeError(operator, 'Operand must be a number.')

    def check_number_operands(self, operator: Token, left: Any, right: Any):
        if is_number(left) and is_number(right):
            return
        raise LoxRuntimeError(operator, 'Operands must be numbers.')
