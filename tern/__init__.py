# Tern language package
# This package provides a tokenizer, parser and tree-walking interpreter for Tern.
from .errors import (
    TernError, LexError, ParseError, UndefinedNameError, ArityError,
    TypeMismatchError, PropertyNotFoundError, DivisionByZeroError,
    RecursionDepthError,
)
from .interpreter import run_program, run_file, Interpreter
from .lexer import tokenize
from .parser import parse_program

__all__ = [
    'run_program',
    'run_file',
    'parse_program',
    'tokenize',
    'Interpreter',
    'TernError',
    'LexError',
    'ParseError',
    'UndefinedNameError',
    'ArityError',
    'TypeMismatchError',
    'PropertyNotFoundError',
    'DivisionByZeroError',
    'RecursionDepthError',
]
