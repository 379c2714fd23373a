from pathlib import Path

from tern.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_factorial(capsys):
    """Recursive function whose value is the value of its if/else."""
    with open(EXAMPLES / 'factorial.tern', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['5! = 120', '10! = 3628800']
