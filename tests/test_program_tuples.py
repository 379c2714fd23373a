from pathlib import Path

from tern.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_tuples(capsys):
    """Destructuring, swapping and element-wise tuple arithmetic."""
    with open(EXAMPLES / 'tuples.tern', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['1,2', '2,1', '(11, 3)', '[1, 2, 3] 3']
