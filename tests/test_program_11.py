from pathlib import Path

from gamalox.session import Session

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_11_initializer_returns_instance(capsys):
    with open(EXAMPLES / 'program_11.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    session = Session()
    session.run(source)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['4', 'true', '7']
