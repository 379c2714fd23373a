from pathlib import Path

from tern.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_case_wildcard(capsys):
    with open(EXAMPLES / 'case_wildcard.tern', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    # A null label matches anything
    assert out_lines == ['one', 'two', 'many']
