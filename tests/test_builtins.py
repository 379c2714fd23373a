import io
import sys

from tern.builtins import global_constants
from tern.interpreter import Interpreter
from tern.values import NULL, TupleVal


def test_global_constants():
    constants = global_constants()
    assert set(constants) == {'null', 'true', 'false', 'print', 'input', 'tup'}
    assert constants['null'] is NULL
    assert constants['true'] is True


def test_print_concatenates_arguments(capsys):
    result = Interpreter().run_source('print("a", 1, 2.5, true, null, [1, "b"])')
    assert result is NULL
    assert capsys.readouterr().out == 'a12.5truenull[1, b]\n'


def test_print_to_configured_stream():
    out = io.StringIO()
    Interpreter(stdout=out).run_source('print("x")')
    assert out.getvalue() == 'x\n'


def test_input_prompts_and_reads_a_line(capsys):
    interp = Interpreter(stdin=io.StringIO("Ada\n"))
    interp.run_source('let name = input("Name? "); print("Hi ", name)')
    assert capsys.readouterr().out == 'Name? Hi Ada\n'


def test_input_at_end_of_input_is_empty():
    assert Interpreter(stdin=io.StringIO("")).run_source('input()') == ''


def test_input_reads_process_stdin(monkeypatch):
    monkeypatch.setattr(sys, 'stdin', io.StringIO('41\r\n'))
    assert Interpreter().run_source('input() as integer + 1') == 42


def test_tup_collects_arguments():
    interp = Interpreter()
    assert interp.run_source('tup()') == TupleVal(())
    assert interp.run_source('tup(1, "a", [])').items[1] == 'a'
