from pathlib import Path

from gamalox.session import Session

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_9_unused_local_warns(capsys):
    with open(EXAMPLES / 'program_9.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    session = Session()
    session.run(source)
    captured = capsys.readouterr()
    assert captured.out.strip() == 'ran'
    assert captured.err.strip() == "[line 2] Warning at 'unused': This variable is unused."
    assert not session.had_error
