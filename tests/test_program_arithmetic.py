from pathlib import Path

from tern.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_arithmetic(capsys):
    with open(EXAMPLES / 'arithmetic.tern', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == [
        '9 5 14 1',
        '3.5',
        '2',      # 6 / 3 is the real 2.0
        '3.5',
        '-1',     # remainder keeps the sign of the dividend
        'null',
    ]
