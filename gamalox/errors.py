"""Diagnostics and error types shared by every stage of the pipeline."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, List, Optional, TextIO

from gamalox.scanner import Token


@dataclass
class Diagnostic:
    severity: str  # 'Error' or 'Warning'
    line: int
    where: str
    message: str

    def __str__(self) -> str:
        return f"[line {self.line}] {self.severity}{self.where}: {self.message}"


class ErrorReporter:
    """Collects lexical, syntax and resolution problems and runtime errors.

    Every problem is printed to `stream` (stderr unless given) as soon as it
    is reported and kept in `diagnostics`. Warnings never set `had_error`.
    """
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.diagnostics: List[Diagnostic] = []
        self.runtime_errors: List[LoxRuntimeError] = []
        self.had_error = False
        self.had_runtime_error = False

    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stderr

    def error(self, line: int, message: str):
        self.report(Diagnostic('Error', line, '', message))

    def token_error(self, token: Token, message: str):
        self.report(Diagnostic('Error', token.line, where_of(token), message))

    def warning(self, token: Token, message: str):
        self.report(Diagnostic('Warning', token.line, where_of(token), message))

    def report(self, diagnostic: Diagnostic):
        self.diagnostics.append(diagnostic)
        print(str(diagnostic), file=self._out())
        if diagnostic.severity == 'Error':
            self.had_error = True

    def runtime_error(self, error: 'LoxRuntimeError'):
        self.runtime_errors.append(error)
        print(f"{error.message}\n[line {error.token.line}]", file=self._out())
        self.had_runtime_error = True

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == 'Error']

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == 'Warning']

    def reset(self):
        # Static errors are per REPL line; a runtime error stays recorded.
        self.had_error = False
        self.diagnostics.clear()
        self.runtime_errors.clear()


def where_of(token: Token) -> str:
    if token.kind == 'EOF':
        return ' at end'
    return f" at '{token.lexeme}'"


class LoxRuntimeError(Exception):
    """Exception type used to propagate runtime errors out of evaluation."""
    def __init__(self, token: Token, message: str):
        super().__init__(f"{message} [line {token.line}]")
        self.token = token
        self.message = message


class ParseError(Exception):
    """Internal to the parser; unwinds to the enclosing declaration."""
    pass


class ReturnSignal:
    """Outcome of a `return` statement, carried back to the call boundary."""
    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"


class BreakSignal:
    """Outcome of a `break` statement, carried back to the nearest loop."""
    def __repr__(self) -> str:
        return 'BREAK'


BREAK = BreakSignal()
