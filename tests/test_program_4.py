from pathlib import Path

from gamalox.session import Session

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_4_getters_and_static_methods(capsys):
    with open(EXAMPLES / 'program_4.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    session = Session()
    session.run(source)
    captured = capsys.readouterr()
    assert captured.out.strip().split('\n') == [
        '12', '48', '1', '<fn scale>', 'Circle', 'Circle instance',
    ]
    assert not session.had_error
    assert not session.had_runtime_error
