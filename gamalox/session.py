"""Pipeline driver: scan, parse, resolve, then interpret.

A `Session` owns one interpreter (global scope plus distance map) and one
error reporter. Running several sources through the same session is how
the REPL keeps earlier definitions alive between lines.
"""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .ast import Stmt
from .errors import ErrorReporter
from .interpreter import Interpreter
from .parser import Parser
from .resolver import Resolver
from .scanner import scan_tokens

# One Lox call costs about six Python frames.
RECURSION_LIMIT = 10000


class Session:
    def __init__(self, reporter: Optional[ErrorReporter] = None, debug_level: int = 0,
                 debug_file: str = 'debug.txt', stream: Optional[TextIO] = None):
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)
        self.reporter = reporter if reporter is not None else ErrorReporter(stream)
        self.interpreter = Interpreter(self.reporter, debug_level=debug_level, debug_file=debug_file)

    @property
    def had_error(self) -> bool:
        return self.reporter.had_error

    @property
    def had_runtime_error(self) -> bool:
        return self.reporter.had_runtime_error

    def parse(self, source: str, repl: bool = False) -> List[Stmt]:
        tokens = scan_tokens(source, self.reporter)
        self.interpreter.debug(f"scanned {len(tokens)} token(s)")
        return Parser(tokens, self.reporter, repl=repl).parse()

    def run(self, source: str, repl: bool = False) -> bool:
        """Run one source text; returns True if it ran to completion.

        Nothing executes when a lexical, syntax or resolution error was
        reported.
        """
        statements = self.parse(source, repl=repl)
        if self.reporter.had_error:
            return False
        distances = Resolver(self.reporter).resolve(statements)
        if self.reporter.had_error:
            return False
        self.interpreter.add_locals(distances)
        return self.interpreter.interpret(statements)

    def run_line(self, line: str) -> bool:
        """Run one REPL line; static errors from earlier lines are forgotten."""
        self.reporter.reset()
        return self.run(line, repl=True)

    def close(self):
        self.interpreter.close()


def run_program(source: str, debug_level: int = 0) -> Session:
    """Convenience function to run a Lox program from a source string."""
    session = Session(debug_level=debug_level)
    try:
        session.run(source)
    finally:
        session.close()
    return session
