"""Runtime values of the Tern language.

Tern values map onto Python objects: `Integer`, `Real`, `Boolean` and
`String` are plain `int`, `float`, `bool` and `str`; the remaining kinds
are the small classes below. `kind_of` returns the tag used by the
interpreter for dispatch and by the kind-only type checks of function
parameters and results.

Arrays, tuples and objects are never mutated in place by the language,
so values can be shared freely between scopes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import TypeMismatchError

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1

KINDS = (
    'Null', 'Integer', 'Real', 'Boolean', 'String', 'Array', 'Object',
    'Tuple', 'Function', 'BuiltInFunction', 'Method',
)


class NullVal:
    """Marker type for the Tern `null` value. Use the `NULL` singleton."""

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, NullVal)

    def __hash__(self) -> int:
        return 0

    def __repr__(self) -> str:
        return 'null'


NULL = NullVal()


@dataclass
class ArrayVal:
    items: List[Any] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Array({self.items!r})"


@dataclass
class ObjectVal:
    """A mapping from field names to values.

    The language has no object literal; objects come from the host
    (see `Interpreter.define`).
    """
    fields: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"Object({self.fields!r})"


@dataclass
class TupleVal:
    items: Tuple[Any, ...] = ()

    def __repr__(self) -> str:
        return f"Tuple({self.items!r})"


@dataclass
class FunctionVal:
    """A user-defined function.

    `param_types` holds, per parameter, the value its declared type
    expression evaluated to at declaration time (None when the parameter
    is not annotated). Only the kind of these sample values matters. The
    function does not capture its defining scope: free names in the body
    resolve against the caller's scope chain.
    """
    name: str
    params: List[str]
    param_types: List[Optional[Any]]
    return_type: Optional[Any]
    body: Any  # ast.Block

    def __repr__(self) -> str:
        return f"<func {self.name}>"


@dataclass
class BuiltinFunction:
    name: str
    fn: Callable[[List[Any]], Any]

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


@dataclass
class MethodVal:
    """A native method bound to a snapshot of its receiver."""
    name: str
    fn: Callable[[Any, List[Any]], Any]
    receiver: Any
    bound_args: Tuple[Any, ...] = ()

    def __repr__(self) -> str:
        return f"<method {self.name}>"


def kind_of(value: Any) -> str:
    """Return the Tern kind name of a runtime value."""
    if isinstance(value, NullVal):
        return 'Null'
    # bool is a subclass of int; check it first
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, int):
        return 'Integer'
    if isinstance(value, float):
        return 'Real'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, ArrayVal):
        return 'Array'
    if isinstance(value, ObjectVal):
        return 'Object'
    if isinstance(value, TupleVal):
        return 'Tuple'
    if isinstance(value, FunctionVal):
        return 'Function'
    if isinstance(value, BuiltinFunction):
        return 'BuiltInFunction'
    if isinstance(value, MethodVal):
        return 'Method'
    raise TypeMismatchError(f"{type(value).__name__} is not a Tern value")


def from_python(value: Any) -> Any:
    """Convert a plain Python structure into Tern values.

    Lists become arrays, tuples become tuples, dicts become objects and
    None becomes `NULL`. Values that already are Tern values pass through.
    """
    if value is None:
        return NULL
    if isinstance(value, list):
        return ArrayVal([from_python(v) for v in value])
    if isinstance(value, tuple):
        return TupleVal(tuple(from_python(v) for v in value))
    if isinstance(value, dict):
        return ObjectVal({str(k): from_python(v) for k, v in value.items()})
    kind_of(value)
    return value


def wrap_int(value: int) -> int:
    """Wrap an integer into the signed 64-bit range."""
    if INT64_MIN <= value <= INT64_MAX:
        return value
    return (value - INT64_MIN) % 2 ** 64 + INT64_MIN


def format_real(value: float) -> str:
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    if value.is_integer():
        if value == 0 and math.copysign(1.0, value) < 0:
            return '-0'
        return str(int(value))
    return repr(value)


def to_display(value: Any) -> str:
    """Render a value the way `print` shows it.

    Strings appear as their raw contents and arrays render their elements
    recursively; tuples and objects use the debug rendering.
    """
    if isinstance(value, NullVal):
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_real(value)
    if isinstance(value, str):
        return value
    if isinstance(value, ArrayVal):
        return '[' + ', '.join(to_display(item) for item in value.items) + ']'
    return to_debug(value)


def to_debug(value: Any) -> str:
    """Render a value in a debug-friendly bracketed form (strings quoted)."""
    if isinstance(value, str):
        return '"' + value + '"'
    if isinstance(value, ArrayVal):
        return '[' + ', '.join(to_debug(item) for item in value.items) + ']'
    if isinstance(value, TupleVal):
        return '(' + ', '.join(to_debug(item) for item in value.items) + ')'
    if isinstance(value, ObjectVal):
        entries = ', '.join(f'"{k}": {to_debug(v)}' for k, v in value.fields.items())
        return '{' + entries + '}'
    if isinstance(value, (FunctionVal, BuiltinFunction, MethodVal)):
        return repr(value)
    return to_display(value)


def values_equal(a: Any, b: Any) -> bool:
    """Structural equality: same kind and equal payload."""
    kind = kind_of(a)
    if kind != kind_of(b):
        return False
    if kind in ('Array', 'Tuple'):
        if len(a.items) != len(b.items):
            return False
        return all(values_equal(x, y) for x, y in zip(a.items, b.items))
    if kind == 'Object':
        if a.fields.keys() != b.fields.keys():
            return False
        return all(values_equal(v, b.fields[k]) for k, v in a.fields.items())
    if kind == 'Method':
        return a.fn is b.fn and values_equal(a.receiver, b.receiver)
    return a == b
