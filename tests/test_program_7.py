from pathlib import Path

from gamalox.session import Session

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_7_division_by_zero(capsys):
    with open(EXAMPLES / 'program_7.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    session = Session()
    session.run(source)
    captured = capsys.readouterr()
    # The run stops at the failing statement.
    assert captured.out.strip() == '1'
    assert captured.err == 'Division by zero is not allowed.\n[line 2]\n'
    assert session.had_runtime_error
    assert not session.had_error
