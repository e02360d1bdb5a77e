from pathlib import Path

from gamalox.session import Session

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_3_inheritance(capsys):
    with open(EXAMPLES / 'program_3.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    session = Session()
    session.run(source)
    out_lines = capsys.readouterr().out.strip().split('\n')
    # C -> B -> A: each override calls the one above it exactly once.
    assert out_lines == ['AB', 'ABC', 'A']
