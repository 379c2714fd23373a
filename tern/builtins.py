"""Global constants and native functions available to every program."""

from __future__ import annotations

import sys
from typing import Any, Callable, Dict, List, Optional, TextIO

from .values import BuiltinFunction, TupleVal, NULL, to_display

StreamGetter = Callable[[], TextIO]


def global_constants(stdin: Optional[StreamGetter] = None,
                     stdout: Optional[StreamGetter] = None) -> Dict[str, Any]:
    """Build the constants the root scope is seeded with.

    `stdin` and `stdout` are callables returning the streams to use; they
    are resolved on every call so redirected streams are picked up.
    """
    get_in = stdin or (lambda: sys.stdin)
    get_out = stdout or (lambda: sys.stdout)

    def std_print(args: List[Any]) -> Any:
        out = get_out()
        out.write(''.join(to_display(a) for a in args) + '\n')
        return NULL

    def std_input(args: List[Any]) -> Any:
        out = get_out()
        if args:
            out.write(''.join(to_display(a) for a in args))
        out.flush()
        line = get_in().readline()
        return line.rstrip('\r\n')

    def std_tup(args: List[Any]) -> Any:
        return TupleVal(tuple(args))

    return {
        'null': NULL,
        'true': True,
        'false': False,
        'print': BuiltinFunction('print', std_print),
        'input': BuiltinFunction('input', std_input),
        'tup': BuiltinFunction('tup', std_tup),
    }
