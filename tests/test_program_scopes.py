from pathlib import Path

from tern.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_scopes(capsys):
    """Assignments reach the owning scope and free names resolve in the caller."""
    with open(EXAMPLES / 'scopes.tern', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['2', '12', 'level = global', 'level = outer']
