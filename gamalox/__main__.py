"""CLI entry point for the Lox interpreter.

Usage:
    python -m gamalox [-v|-vv|-vvv]                 start an interactive prompt
    python -m gamalox [-v...] <script>              run a script
    python -m gamalox --print-ast <script>          print the parsed syntax tree

Options:
  -v            Increase debug verbosity (can be repeated)
  --print-ast   Parse the given script and print its AST instead of running it

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.

Exit codes: 64 bad usage, 65 lexical/syntax/resolution error, 70 runtime
error, 1 missing script file, 0 otherwise.
"""

import argparse
import sys
from pathlib import Path

from .ast_printer import AstPrinter
from .session import Session

EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70
EX_NOINPUT = 1
USAGE = 'Usage: gamalox [script]'


def run_prompt(session: Session) -> None:
    while True:
        try:
            line = input('> ')
        except EOFError:
            print()
            return
        session.run_line(line)


def run_file(session: Session, program_file: Path) -> int:
    with open(program_file, 'r', encoding='utf-8') as f:
        source = f.read()
    session.run(source)
    if session.had_error:
        return EX_DATAERR
    if session.had_runtime_error:
        return EX_SOFTWARE
    return 0


def print_ast(session: Session, program_file: Path) -> int:
    with open(program_file, 'r', encoding='utf-8') as f:
        source = f.read()
    statements = session.parse(source)
    if session.had_error:
        return EX_DATAERR
    printer = AstPrinter()
    for stmt in statements:
        print(printer.print(stmt))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog='gamalox', description='Lox language interpreter')
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--print-ast', action='store_true', help='print the AST of the script instead of running it')
    parser.add_argument('script', nargs='*', help='Lox script to execute; omit for an interactive prompt')
    args = parser.parse_args(argv)

    if len(args.script) > 1:
        print(USAGE)
        return EX_USAGE

    session = Session(debug_level=args.v)
    try:
        if not args.script:
            if args.print_ast:
                parser.error('--print-ast needs a script')
            run_prompt(session)
            return 0
        program_file = Path(args.script[0])
        if not program_file.exists():
            print(f"Error: file {program_file} not found", file=sys.stderr)
            return EX_NOINPUT
        if args.print_ast:
            return print_ast(session, program_file)
        return run_file(session, program_file)
    finally:
        session.close()


if __name__ == '__main__':
    sys.exit(main())
