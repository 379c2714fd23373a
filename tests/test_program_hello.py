from pathlib import Path

from tern.interpreter import parse_program, Interpreter, run_file

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_hello(capsys):
    with open(EXAMPLES / 'hello.tern', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out == 'Hello World!!'


def test_program_hello_run_file(capsys):
    interp = run_file(str(EXAMPLES / 'hello.tern'))
    assert isinstance(interp, Interpreter)
    assert capsys.readouterr().out == 'Hello World!!\n'
