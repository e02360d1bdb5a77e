import io

from gamalox.ast import AnonFunction, Block, ClassDecl, PrintStmt, WhileStmt
from gamalox.ast_printer import AstPrinter
from gamalox.errors import ErrorReporter
from gamalox.parser import parse_program


def parse(source, repl=False):
    reporter = ErrorReporter(io.StringIO())
    statements = parse_program(source, reporter, repl=repl)
    return statements, reporter


def render(source):
    statements, reporter = parse(source)
    assert not reporter.had_error, [str(d) for d in reporter.diagnostics]
    printer = AstPrinter()
    return [printer.print(stmt) for stmt in statements]


def test_precedence_and_associativity():
    assert render('1 + 2 * 3 - 4;') == ['(; (- (+ 1 (* 2 3)) 4))']
    assert render('!-a == b < c;') == ['(; (== (! (- a)) (< b c)))']
    assert render('a = b = 3;') == ['(; (= a (= b 3)))']


def test_comma_is_lowest_and_ternary_is_right_associative():
    assert render('a, b ? c : d ? e : f;') == ['(; (, a (? b c (? d e f))))']


def test_call_arguments_are_not_comma_expressions():
    assert render('f(a, b)(c).x;') == ['(; (. x (call (call f a b) c)))']


def test_grouped_comma_is_one_argument():
    statements, _ = parse('f((a, b));')
    assert len(statements[0].expression.arguments) == 1


def test_for_loop_is_desugared_into_while():
    statements, _ = parse('for (var i = 0; i < 3; i = i + 1) print i;')
    outer = statements[0]
    assert isinstance(outer, Block)
    assert isinstance(outer.statements[1], WhileStmt)
    assert render('for (;;) break;') == ['(while true (break))']


def test_class_members():
    statements, _ = parse('class B < A { init(x) {} area { return 1; } class make() {} }')
    klass = statements[0]
    assert isinstance(klass, ClassDecl)
    assert klass.superclass.name.lexeme == 'A'
    assert [m.name.lexeme for m in klass.methods] == ['init']
    assert [g.name.lexeme for g in klass.getters] == ['area']
    assert [s.name.lexeme for s in klass.static_methods] == ['make']
    assert AstPrinter().print(klass) == \
        '(class B < A (method init (x) {}) (getter area () {(return 1)}) (static make () {}))'


def test_anonymous_function_expression():
    statements, _ = parse('var f = fun (a, b) { return a; };')
    assert isinstance(statements[0].initializer, AnonFunction)
    assert [p.lexeme for p in statements[0].initializer.params] == ['a', 'b']


def test_fun_statement_with_paren_is_an_expression():
    statements, reporter = parse('fun () {};')
    assert not reporter.had_error
    assert isinstance(statements[0].expression, AnonFunction)


def test_recovery_reports_each_bad_statement():
    statements, reporter = parse('var = 1;\nprint 2;\nprint (3;\nprint 4;')
    assert [str(d) for d in reporter.errors] == [
        "[line 1] Error at '=': Expected variable name.",
        "[line 3] Error at ';': Expected ')' after expression.",
    ]
    assert len(statements) == 2


def test_error_at_end():
    _, reporter = parse('print 1')
    assert [str(d) for d in reporter.errors] == ["[line 1] Error at end: Expected ';' after value."]


def test_invalid_assignment_target_keeps_parsing():
    statements, reporter = parse('1 + 2 = 3; print 4;')
    assert [d.message for d in reporter.errors] == ['Invalid assignment target.']
    assert len(statements) == 2


def test_missing_colon_in_conditional():
    _, reporter = parse('a ? b;')
    assert reporter.errors[0].message == "Expected ':' in conditional expression."


def test_too_many_arguments_is_reported_without_aborting():
    args = ', '.join(['1'] * 256)
    statements, reporter = parse(f'f({args});')
    assert [d.message for d in reporter.errors] == ['Cannot have more than 255 arguments.']
    assert len(statements[0].expression.arguments) == 256


def test_too_many_parameters():
    params = ', '.join(f'p{i}' for i in range(256))
    _, reporter = parse(f'fun f({params}) {{}}')
    assert [d.message for d in reporter.errors] == ['Cannot have more than 255 parameters.']


def test_repl_bare_expression_is_printed():
    statements, reporter = parse('1 + 2', repl=True)
    assert not reporter.had_error
    assert len(statements) == 1
    assert isinstance(statements[0], PrintStmt)


def test_repl_falls_back_to_statements():
    statements, reporter = parse('var a = 1;', repl=True)
    assert not reporter.had_error
    assert AstPrinter().print(statements[0]) == '(var a 1)'


def test_repl_fallback_reports_only_statement_errors():
    _, reporter = parse('1 +', repl=True)
    assert [str(d) for d in reporter.errors] == ["[line 1] Error at end: Expected an expression."]
