from pathlib import Path

from gamalox.session import Session

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_1_expressions(capsys):
    with open(EXAMPLES / 'program_1.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    session = Session()
    session.run(source)
    captured = capsys.readouterr()
    assert captured.out.strip().split('\n') == [
        '7', '9', '2.5', '-1', 'foobar', 'n=3', '2x', 'true', 'true',
        'zero is truthy', 'empty is truthy', 'true', 'false', 'true',
    ]
    assert captured.err == ''
