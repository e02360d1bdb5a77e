import builtins

from gamalox.__main__ import main


def write_script(tmp_path, source):
    script = tmp_path / 'script.lox'
    script.write_text(source, encoding='utf-8')
    return str(script)


def test_run_file_success(tmp_path, capsys):
    script = write_script(tmp_path, 'print "hello";')
    assert main([script]) == 0
    assert capsys.readouterr().out.strip() == 'hello'


def test_static_error_exit_code(tmp_path, capsys):
    script = write_script(tmp_path, 'print ;')
    assert main([script]) == 65
    assert "[line 1] Error at ';': Expected an expression." in capsys.readouterr().err


def test_runtime_error_exit_code(tmp_path, capsys):
    script = write_script(tmp_path, 'print "a" - 1;')
    assert main([script]) == 70
    assert capsys.readouterr().err == 'Operands must be numbers.\n[line 1]\n'


def test_too_many_scripts(capsys):
    assert main(['a.lox', 'b.lox']) == 64
    assert capsys.readouterr().out.strip() == 'Usage: gamalox [script]'


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / 'nope.lox')]) == 1
    assert 'not found' in capsys.readouterr().err


def test_print_ast(tmp_path, capsys):
    script = write_script(tmp_path, 'var a = 1 + 2;\nprint a;')
    assert main(['--print-ast', script]) == 0
    assert capsys.readouterr().out.strip().split('\n') == ['(var a (+ 1 2))', '(print a)']


def test_verbose_writes_debug_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    script = write_script(tmp_path, 'print 1;')
    assert main(['-v', script]) == 0
    assert (tmp_path / 'debug.txt').exists()


def test_prompt_runs_lines_until_eof(monkeypatch, capsys):
    lines = iter(['var a = 2;', 'a * 21', 'print nope;', 'print a;'])

    def fake_input(prompt=''):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError
    monkeypatch.setattr(builtins, 'input', fake_input)

    assert main([]) == 0
    captured = capsys.readouterr()
    assert captured.out.strip().split('\n') == ['42', '2']
    assert "Undefined variable 'nope'." in captured.err


def test_deep_nesting_exits_with_static_error_code(tmp_path, capsys):
    script = write_script(tmp_path, 'print ' + '(' * 3000 + '1' + ')' * 3000 + ';')
    assert main([script]) == 65
    assert 'Expression nested too deeply.' in capsys.readouterr().err


def test_recursive_script_runs(tmp_path, capsys):
    script = write_script(tmp_path, 'fun count(n) { if (n == 0) return 0; return 1 + count(n - 1); }\nprint count(250);')
    assert main([script]) == 0
    assert capsys.readouterr().out.strip() == '250'
