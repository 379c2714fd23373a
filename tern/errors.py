"""Error types raised by the Tern lexer, parser and interpreter."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ErrorVal:
    """Describes a Tern error: its name, a message and where it happened.

    `line` and `column` are 1-based and are 0 when the position is not
    known (for instance for values passed in by an embedding host).
    """
    name: str
    message: str
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if self.line:
            return f"{self.name} at {self.line}:{self.column}: {self.message}"
        return f"{self.name}: {self.message}"


class TernError(Exception):
    """Base exception used to propagate Tern errors to the host."""
    name = 'TernError'

    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.err = ErrorVal(self.name, message, line, column)
        super().__init__(str(self.err))

    @property
    def message(self) -> str:
        return self.err.message

    @property
    def line(self) -> int:
        return self.err.line

    @property
    def column(self) -> int:
        return self.err.column

    def at(self, line: int, column: int) -> 'TernError':
        """Attach a position if the error does not carry one yet."""
        if not self.err.line and line:
            self.err.line = line
            self.err.column = column
            self.args = (str(self.err),)
        return self


class LexError(TernError):
    name = 'LexError'


class ParseError(TernError):
    name = 'ParseError'


class UndefinedNameError(TernError):
    name = 'UndefinedNameError'


class ArityError(TernError):
    name = 'ArityError'


class TypeMismatchError(TernError):
    name = 'TypeMismatchError'


class PropertyNotFoundError(TernError):
    name = 'PropertyNotFoundError'


class DivisionByZeroError(TernError):
    name = 'DivisionByZeroError'


class RecursionDepthError(TernError):
    name = 'RecursionDepthError'
