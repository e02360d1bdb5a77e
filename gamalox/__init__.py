# Gamalox language package
# This package provides a tree-walking interpreter for the Lox language.
from .errors import ErrorReporter, LoxRuntimeError
from .interpreter import Interpreter
from .parser import parse_program
from .session import Session, run_program

__all__ = [
    'ErrorReporter',
    'Interpreter',
    'LoxRuntimeError',
    'Session',
    'parse_program',
    'run_program',
]
