"""CLI entry point for the Tern interpreter.

Usage:
    python -m tern [-v|-vv|-vvv|-vvvv] [--max-depth N] <program_file>
    python -m tern [-v...] --emit-ast <program_file>
    python -m tern [-v...] --ast <ast_json_file>
    python -m tern [-v...] --repl

Options:
  -v            Increase debug verbosity (can be repeated)
  --max-depth   Maximum nesting of function calls
  --emit-ast    Parse the given .tern file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --repl        Read and evaluate one line at a time

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import ast_to_obj, ast_from_obj
from .errors import TernError
from .interpreter import DEFAULT_MAX_DEPTH, Interpreter
from .parser import parse_program
from .values import NULL, to_display


def read_path(name: str) -> Path:
    path = Path(name)
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    return path


def read_source(name: str) -> str:
    with open(read_path(name), 'r', encoding='utf-8') as f:
        return f.read()


def repl(interpreter: Interpreter) -> None:
    """Evaluate lines from standard input until end of input."""
    while True:
        try:
            line = input('tern> ')
        except EOFError:
            print()
            return
        if not line.strip():
            continue
        try:
            result = interpreter.run_source(line)
        except TernError as e:
            print(f"Error: {e}", file=sys.stderr)
            continue
        if result is not NULL:
            print(to_display(result))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='tern', description="Tern language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--max-depth', type=int, default=DEFAULT_MAX_DEPTH,
                        help='maximum nesting of function calls')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='TERN_FILE', help='emit AST JSON for the given .tern file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    group.add_argument('--repl', action='store_true', help='start an interactive session')
    parser.add_argument('program', nargs='?', help='Tern program file (.tern) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(args.emit_ast)
        try:
            ast_program = parse_program(source)
        except TernError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    interpreter = Interpreter(debug_level=args.v, max_depth=args.max_depth)
    try:
        if args.repl or (not args.ast and not args.program):
            repl(interpreter)
            return
        if args.ast:
            with open(read_path(args.ast), 'r', encoding='utf-8') as f:
                try:
                    ast_program = ast_from_obj(json.load(f))
                except (ValueError, TypeError) as e:
                    # json.JSONDecodeError is a ValueError
                    print(f"Error: invalid AST file {args.ast}: {e}", file=sys.stderr)
                    sys.exit(1)
        else:
            ast_program = parse_program(read_source(args.program))
        interpreter.run(ast_program)
    except TernError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        interpreter.close()


if __name__ == '__main__':
    main()
