from pathlib import Path

from tern.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_conversions(capsys):
    with open(EXAMPLES / 'conversions.tern', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['12.56636', '43', '7', 'false true', 'true!', '3']
