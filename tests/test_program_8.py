from pathlib import Path

from gamalox.session import Session

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_8_self_initialization(capsys):
    with open(EXAMPLES / 'program_8.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    session = Session()
    session.run(source)
    captured = capsys.readouterr()
    assert captured.out == ''
    assert "[line 3] Error at 'a': Cannot read local variable in its own initializer." in captured.err
    assert session.had_error
