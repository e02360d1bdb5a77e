"""Runtime object model for Lox.

Lox values map onto Python values: `nil` is None, booleans are `bool`,
numbers are `float` and strings are `str`. Everything else is one of the
classes below.

A regular class is itself an instance of a synthetic metaclass that holds
its static methods, so `Klass.make()` and `obj.method()` both go through
`LoxInstance.get`.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from .environment import Environment
from .errors import LoxRuntimeError, ReturnSignal
from .scanner import Token

if TYPE_CHECKING:
    from .ast import Stmt
    from .interpreter import Interpreter


class LoxCallable(ABC):
    @abstractmethod
    def arity(self) -> int:
        ...

    @abstractmethod
    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        ...


class LoxFunction(LoxCallable):
    """A user-defined function, method, getter or anonymous function."""
    def __init__(self, name: str, params: List[Token], body: List['Stmt'],
                 closure: Environment, is_initializer: bool = False):
        self.name = name
        self.params = params
        self.body = body
        self.closure = closure
        self.is_initializer = is_initializer

    def arity(self) -> int:
        return len(self.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        env = Environment(self.closure)
        for param, argument in zip(self.params, arguments):
            env.define(param.lexeme, argument)
        outcome = interpreter.execute_block(self.body, env)
        if self.is_initializer:
            # init() always yields the instance, even after a bare `return;`
            return self.closure.get_at(0, 'this')
        if isinstance(outcome, ReturnSignal):
            return outcome.value
        return None

    def bind(self, instance: 'LoxInstance') -> 'LoxFunction':
        env = Environment(self.closure)
        env.define('this', instance)
        return LoxFunction(self.name, self.params, self.body, env, self.is_initializer)

    def __str__(self) -> str:
        return f"<fn {self.name}>"


class LoxClass(ABC):
    """Anything methods and getters can be looked up on."""
    name: str

    @abstractmethod
    def find_method(self, name: str) -> Optional[LoxFunction]:
        ...

    @abstractmethod
    def find_getter(self, name: str) -> Optional[LoxFunction]:
        ...


class LoxInstance:
    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: Dict[str, Any] = {}

    def get(self, name: Token, interpreter: 'Interpreter') -> Any:
        # Fields shadow getters, getters shadow methods.
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]
        getter = self.klass.find_getter(name.lexeme)
        if getter is not None:
            return getter.bind(self).call(interpreter, [])
        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)
        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: Token, value: Any):
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return f"{self.klass.name} instance"


class LoxMetaClass(LoxClass):
    """The class of a class: holds static methods only."""
    def __init__(self, name: str, methods: Dict[str, LoxFunction]):
        self.name = name
        self.methods = methods

    def find_method(self, name: str) -> Optional[LoxFunction]:
        return self.methods.get(name)

    def find_getter(self, name: str) -> Optional[LoxFunction]:
        return None

    def __str__(self) -> str:
        return f"<metaclass {self.name}>"


class LoxRegularClass(LoxInstance, LoxCallable, LoxClass):
    def __init__(self, name: str, superclass: Optional[LoxClass],
                 methods: Dict[str, LoxFunction],
                 getters: Dict[str, LoxFunction],
                 static_methods: Dict[str, LoxFunction]):
        super().__init__(LoxMetaClass(name, static_methods))
        self.name = name
        self.superclass = superclass
        self.methods = methods
        self.getters = getters

    def find_method(self, name: str) -> Optional[LoxFunction]:
        if name in self.methods:
            return self.methods[name]
        if self.superclass is not None:
            return self.superclass.find_method(name)
        return None

    def find_getter(self, name: str) -> Optional[LoxFunction]:
        if name in self.getters:
            return self.getters[name]
        if self.superclass is not None:
            return self.superclass.find_getter(name)
        return None

    def arity(self) -> int:
        initializer = self.find_method('init')
        return initializer.arity() if initializer is not None else 0

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        instance = LoxInstance(self)
        initializer = self.find_method('init')
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self) -> str:
        return self.name


def is_truthy(value: Any) -> bool:
    # Only nil and false are falsy.
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    # Keeps 1 == true false even though Python says otherwise.
    if type(a) is not type(b):
        return False
    return a == b


def is_number(value: Any) -> bool:
    return isinstance(value, float)


def stringify(value: Any) -> str:
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        text = format_number(value)
        if text.endswith('.0'):
            text = text[:-2]
        return text
    return str(value)


def format_number(value: float) -> str:
    """Decimal text for magnitudes in [1e-3, 1e7), otherwise scientific
    `d.dddE<exp>` such as `1.0E22` or `1.5E-5`.
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if value == 0 or 1e-3 <= abs(value) < 1e7:
        return repr(value)
    mantissa, _, exponent = repr(abs(value)).partition('e')
    whole, _, fraction = mantissa.partition('.')
    digits = (whole + fraction).lstrip('0')
    power = len(digits) - 1 + int(exponent or 0) - len(fraction)
    digits = digits.rstrip('0')
    sign = '-' if value < 0 else ''
    return f"{sign}{digits[0]}.{digits[1:] or '0'}E{power}"


def type_name(value: Any) -> str:
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, LoxRegularClass):
        return 'class'
    if isinstance(value, LoxCallable):
        return 'function'
    if isinstance(value, LoxInstance):
        return 'instance'
    return type(value).__name__
