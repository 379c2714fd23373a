"""Native methods of the String, Array and Object kinds.

Each kind exposes a fixed table from method name to a routine taking
`(receiver, arguments)`. The tables are shared by every value of the
kind; member access on a value looks the name up in its kind's table and
binds the routine to the receiver as a `MethodVal`.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from .errors import TypeMismatchError
from .values import ArrayVal, ObjectVal, NULL, kind_of

MethodTable = Dict[str, Callable[[Any, List[Any]], Any]]


def string_length(receiver: str, args: List[Any]) -> Any:
    return len(receiver)


def string_is_empty(receiver: str, args: List[Any]) -> Any:
    return len(receiver) == 0


def string_split(receiver: str, args: List[Any]) -> Any:
    """`s.split()` splits on whitespace runs, `s.split(sep)` on `sep`."""
    sep = args[0] if args else NULL
    if sep is NULL:
        return ArrayVal(receiver.split())
    if not isinstance(sep, str):
        raise TypeMismatchError(f"split separator must be String, got {kind_of(sep)}")
    if sep == '':
        return ArrayVal(list(receiver))
    return ArrayVal(receiver.split(sep))


def array_length(receiver: ArrayVal, args: List[Any]) -> Any:
    return len(receiver.items)


def array_is_empty(receiver: ArrayVal, args: List[Any]) -> Any:
    return len(receiver.items) == 0


def object_length(receiver: ObjectVal, args: List[Any]) -> Any:
    return len(receiver.fields)


def object_is_empty(receiver: ObjectVal, args: List[Any]) -> Any:
    return len(receiver.fields) == 0


STRING_METHODS: MethodTable = {
    'length': string_length,
    'is_empty': string_is_empty,
    'split': string_split,
}

ARRAY_METHODS: MethodTable = {
    'length': array_length,
    'is_empty': array_is_empty,
}

OBJECT_METHODS: MethodTable = {
    'length': object_length,
    'is_empty': object_is_empty,
}

_TABLES = {
    'String': STRING_METHODS,
    'Array': ARRAY_METHODS,
    'Object': OBJECT_METHODS,
}


def method_table(value: Any) -> Optional[MethodTable]:
    """Return the method table of the value's kind, or None."""
    return _TABLES.get(kind_of(value))
