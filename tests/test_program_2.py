from pathlib import Path

from gamalox.session import Session

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_2_closures(capsys):
    """Closures see later writes to the variables they captured.

    `counter` hands out a function that keeps incrementing the same `i`,
    and `makeReader` returns a function that observes the assignment made
    after it was created.
    """
    with open(EXAMPLES / 'program_2.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    session = Session()
    session.run(source)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['1', '2', 'after']
