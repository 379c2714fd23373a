import builtins

import pytest

from tern.__main__ import main


def write_program(tmp_path, source, name='prog.tern'):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_runs_program_file(tmp_path, capsys):
    path = write_program(tmp_path, 'let x = 2;\nprint("x = ", x * 21)\n')
    main([str(path)])
    assert capsys.readouterr().out == 'x = 42\n'


def test_missing_file_exits_with_error(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / 'nope.tern')])
    assert exc.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_interpreter_error_exits_with_status_one(tmp_path, capsys):
    path = write_program(tmp_path, 'print("before")\nlet y = 1 + missing;\n')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == 'before\n'
    assert captured.err.startswith('Error: UndefinedNameError at 2:')


def test_parse_error_exits_with_status_one(tmp_path, capsys):
    path = write_program(tmp_path, 'let x = ;')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    assert capsys.readouterr().err.startswith('Error: ParseError')


def test_emit_ast_then_run_it(tmp_path, capsys):
    path = write_program(tmp_path, 'print("from json")')
    main(['--emit-ast', str(path)])
    out_path = tmp_path / 'prog.tern.ast.json'
    assert capsys.readouterr().out.strip() == str(out_path)
    assert out_path.exists()
    main(['--ast', str(out_path)])
    assert capsys.readouterr().out == 'from json\n'


def test_max_depth_flag(tmp_path, capsys):
    path = write_program(tmp_path, 'func spin() { spin() }\nspin()')
    with pytest.raises(SystemExit):
        main(['--max-depth', '10', str(path)])
    assert 'RecursionDepthError' in capsys.readouterr().err


def test_debug_file_written(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = write_program(tmp_path, 'let x = 1;')
    main(['-vv', str(path)])
    trace = (tmp_path / 'debug.txt').read_text(encoding='utf-8')
    assert 'run: 1 statements' in trace
    assert 'declare x = 1' in trace


def test_repl_keeps_state_and_survives_errors(monkeypatch, capsys):
    lines = iter(['let x = 2;', 'x * 21', '', 'missing', 'print("bye")'])

    def fake_input(prompt=''):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr(builtins, 'input', fake_input)
    main(['--repl'])
    captured = capsys.readouterr()
    assert captured.out.split() == ['42', 'bye']
    assert 'UndefinedNameError' in captured.err


def test_deeply_nested_program_reports_error(tmp_path, capsys):
    path = write_program(tmp_path, 'print(' + '(' * 200 + '1' + ')' * 200 + ')')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    assert capsys.readouterr().err.startswith('Error: ParseError at 1:')


@pytest.mark.parametrize('content', ['{not json', '{"type": "While", "body": []}', '[1, {"type": "Ident"}]'])
def test_invalid_ast_file_reports_error(tmp_path, capsys, content):
    path = write_program(tmp_path, content, name='bad.ast.json')
    with pytest.raises(SystemExit) as exc:
        main(['--ast', str(path)])
    assert exc.value.code == 1
    assert capsys.readouterr().err.startswith('Error: invalid AST file')
