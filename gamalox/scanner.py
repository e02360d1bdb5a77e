"""Scanner for the Lox language.

The lexicon is written as a lark grammar made only of named terminals and
tokenised with lark's basic lexer. Lark stops at the first character no
terminal matches; `scan_tokens` reports that character and restarts the
lexer right after it, so a single pass can surface several lexical errors.

Unterminated strings and block comments are ordinary (lower priority)
terminals so they can be reported with the line they end on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, TYPE_CHECKING

from lark import Lark
from lark.exceptions import UnexpectedCharacters

if TYPE_CHECKING:
    from gamalox.errors import ErrorReporter


@dataclass(frozen=True)
class Token:
    kind: str
    lexeme: str
    literal: Any
    line: int

    def __str__(self) -> str:
        return f"{self.kind} {self.lexeme} {self.literal}"


KEYWORDS = (
    'and', 'break', 'class', 'else', 'false', 'for', 'fun', 'if', 'nil',
    'or', 'print', 'return', 'super', 'this', 'true', 'var', 'while',
)

LOX_LEXICON = r"""
    start: token*

    ?token: LEFT_PAREN | RIGHT_PAREN | LEFT_BRACE | RIGHT_BRACE
          | COMMA | DOT | MINUS | PLUS | SEMICOLON | SLASH | STAR
          | QUESTION_MARK | COLON
          | BANG | BANG_EQUAL | EQUAL | EQUAL_EQUAL
          | GREATER | GREATER_EQUAL | LESS | LESS_EQUAL
          | IDENTIFIER | STRING | NUMBER
          | AND | BREAK | CLASS | ELSE | FALSE | FOR | FUN | IF | NIL
          | OR | PRINT | RETURN | SUPER | THIS | TRUE | VAR | WHILE
          | UNTERMINATED_STRING | UNTERMINATED_COMMENT

    LEFT_PAREN: "("
    RIGHT_PAREN: ")"
    LEFT_BRACE: "{"
    RIGHT_BRACE: "}"
    COMMA: ","
    DOT: "."
    MINUS: "-"
    PLUS: "+"
    SEMICOLON: ";"
    SLASH: "/"
    STAR: "*"
    QUESTION_MARK: "?"
    COLON: ":"
    BANG: "!"
    BANG_EQUAL: "!="
    EQUAL: "="
    EQUAL_EQUAL: "=="
    GREATER: ">"
    GREATER_EQUAL: ">="
    LESS: "<"
    LESS_EQUAL: "<="

    AND: "and"
    BREAK: "break"
    CLASS: "class"
    ELSE: "else"
    FALSE: "false"
    FOR: "for"
    FUN: "fun"
    IF: "if"
    NIL: "nil"
    OR: "or"
    PRINT: "print"
    RETURN: "return"
    SUPER: "super"
    THIS: "this"
    TRUE: "true"
    VAR: "var"
    WHILE: "while"

    IDENTIFIER: /[A-Za-z_][A-Za-z0-9_]*/
    NUMBER: /[0-9]+(?:\.[0-9]+)?/
    STRING.2: /"[^"]*"/
    UNTERMINATED_STRING.1: /"[^"]*/

    WS: /[ \t\r\n]+/
    LINE_COMMENT.3: /\/\/[^\n]*/
    BLOCK_COMMENT.3: /\/\*[\s\S]*?\*\//
    UNTERMINATED_COMMENT.2: /\/\*[\s\S]*/

    %ignore WS
    %ignore LINE_COMMENT
    %ignore BLOCK_COMMENT
"""


LOX_LEXER = Lark(
    LOX_LEXICON,
    parser='lalr',
    lexer='basic',
)


def scan_tokens(source: str, reporter: 'ErrorReporter') -> List[Token]:
    """Convert source text into tokens terminated by an EOF token.

    Lexical errors go to `reporter`; scanning always runs to the end of the
    input.
    """
    tokens: List[Token] = []
    offset = 0
    line_offset = 0
    while True:
        try:
            for raw in LOX_LEXER.lex(source[offset:]):
                token = _convert(raw, line_offset, reporter)
                if token is not None:
                    tokens.append(token)
            break
        except UnexpectedCharacters as e:
            reporter.error(e.line + line_offset, f"Unexpected character: {e.char}")
            resume = offset + e.pos_in_stream + 1
            line_offset += source.count('\n', offset, resume)
            offset = resume
    tokens.append(Token('EOF', '', None, source.count('\n') + 1))
    return tokens


def _convert(raw, line_offset: int, reporter: 'ErrorReporter'):
    line = raw.end_line + line_offset
    kind = raw.type
    lexeme = str(raw)
    if kind == 'UNTERMINATED_STRING':
        reporter.error(line, 'Unterminated string.')
        return None
    if kind == 'UNTERMINATED_COMMENT':
        reporter.error(line, 'Multiline comment is not properly closed.')
        return None
    literal: Any = None
    if kind == 'NUMBER':
        literal = float(lexeme)
    elif kind == 'STRING':
        literal = lexeme[1:-1]
    return Token(kind, lexeme, literal, line)
