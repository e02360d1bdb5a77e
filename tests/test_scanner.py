import io

from gamalox.errors import ErrorReporter
from gamalox.scanner import scan_tokens


def scan(source):
    reporter = ErrorReporter(io.StringIO())
    return scan_tokens(source, reporter), reporter


def kinds(tokens):
    return [t.kind for t in tokens]


def test_operators_prefer_two_character_forms():
    tokens, reporter = scan('! != = == < <= > >= ? :')
    assert kinds(tokens) == [
        'BANG', 'BANG_EQUAL', 'EQUAL', 'EQUAL_EQUAL', 'LESS', 'LESS_EQUAL',
        'GREATER', 'GREATER_EQUAL', 'QUESTION_MARK', 'COLON', 'EOF',
    ]
    assert not reporter.had_error


def test_keywords_and_identifiers():
    tokens, _ = scan('class classy fun _fun9 nil break')
    assert kinds(tokens) == ['CLASS', 'IDENTIFIER', 'FUN', 'IDENTIFIER', 'NIL', 'BREAK', 'EOF']
    assert tokens[1].lexeme == 'classy'


def test_literals():
    tokens, _ = scan('12 3.25 "hi there"')
    assert tokens[0].literal == 12.0
    assert tokens[1].literal == 3.25
    assert tokens[2].kind == 'STRING'
    assert tokens[2].literal == 'hi there'
    assert tokens[2].lexeme == '"hi there"'


def test_number_does_not_swallow_trailing_dot():
    tokens, _ = scan('1.')
    assert kinds(tokens) == ['NUMBER', 'DOT', 'EOF']


def test_comments_are_skipped_and_lines_counted():
    source = '// first\n/* block\ncomment */ a\nb'
    tokens, reporter = scan(source)
    assert kinds(tokens) == ['IDENTIFIER', 'IDENTIFIER', 'EOF']
    assert [t.line for t in tokens] == [3, 4, 4]
    assert not reporter.had_error


def test_multiline_string_reports_closing_line():
    tokens, _ = scan('"a\nb"')
    assert tokens[0].literal == 'a\nb'
    assert tokens[0].line == 2


def test_unexpected_characters_do_not_stop_scanning():
    tokens, reporter = scan('a @\nb # c')
    assert kinds(tokens) == ['IDENTIFIER', 'IDENTIFIER', 'IDENTIFIER', 'EOF']
    assert [str(d) for d in reporter.errors] == [
        '[line 1] Error: Unexpected character: @',
        '[line 2] Error: Unexpected character: #',
    ]
    assert tokens[2].line == 2


def test_unterminated_string():
    tokens, reporter = scan('print "oops\n')
    assert kinds(tokens) == ['PRINT', 'EOF']
    assert [d.message for d in reporter.errors] == ['Unterminated string.']


def test_unterminated_block_comment():
    tokens, reporter = scan('a /* never\nclosed')
    assert kinds(tokens) == ['IDENTIFIER', 'EOF']
    assert reporter.errors[0].message == 'Multiline comment is not properly closed.'
    assert reporter.errors[0].line == 2


def test_eof_token_is_on_last_line():
    tokens, _ = scan('a\n\n')
    assert tokens[-1].kind == 'EOF'
    assert tokens[-1].line == 3
