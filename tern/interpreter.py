"""Tree-walking interpreter for the Tern language.

The interpreter evaluates the AST produced by `parse_program` directly.
Every node is an expression: statements such as `let` evaluate to
`null`, blocks evaluate to the value of their last statement.

Two behaviors are deliberate and easy to mistake for bugs:

* Operators applied to kinds they are not defined for do not fail.
  Arithmetic yields `null` and comparisons yield `false`.
* Functions do not close over the scope they were declared in. A call
  runs in a child of the *caller's* scope, so names that are not
  parameters resolve dynamically.
"""

from __future__ import annotations

import math
import operator
import re
import sys
from typing import Any, List, Optional, TextIO

from .ast import (
    Program, Block, Literal, ArrayLit, TupleLit, Ident, CompareOp, BinaryOp,
    UnaryOp, Assign, Member, Index, Conversion, Call, VarDecl, FuncDecl,
    IfStmt, CaseStmt, Node,
)
from .builtins import global_constants
from .environment import Environment
from .errors import (
    TernError, ArityError, TypeMismatchError, PropertyNotFoundError,
    DivisionByZeroError, RecursionDepthError,
)
from .methods import method_table
from .parser import parse_program
from .values import (
    NULL, ArrayVal, ObjectVal, TupleVal, FunctionVal, BuiltinFunction, MethodVal,
    INT64_MIN, INT64_MAX, kind_of, from_python, wrap_int, format_real,
    to_debug, values_equal,
)

DEFAULT_MAX_DEPTH = 1000

# Host stack frames used per nested call, with headroom for a block or two.
FRAMES_PER_LEVEL = 16

COMPARISONS = {
    '<': operator.lt,
    '<=': operator.le,
    '>': operator.gt,
    '>=': operator.ge,
    '==': operator.eq,
    '!=': operator.ne,
}

NUMERIC = ('Integer', 'Real')
SIZED = ('String', 'Array')

INTEGER_TEXT = re.compile(r'[+-]?[0-9]+')


def ieee_divide(a: float, b: float) -> float:
    """Float division with IEEE results for a zero divisor."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def truncated_remainder(a: int, b: int) -> int:
    """Integer remainder with the sign of the dividend."""
    r = abs(a) % abs(b)
    return -r if a < 0 else r


def length_of(value: Any) -> int:
    if isinstance(value, ArrayVal):
        return len(value.items)
    return len(value)


class Interpreter:
    """Core interpreter that evaluates Tern ASTs.

    `debug_level` controls the trace written to `debug_file` (or to
    standard error when `debug_file` is None): 1 traces runs and fatal
    errors, 2 adds declarations and assignments, 3 adds control flow and
    calls, 4 traces every evaluated node. `max_depth` bounds the nesting
    of user function calls; deeper host recursion from nested blocks or
    expressions is reported as a `RecursionDepthError` as well.
    """
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = 'debug.txt',
                 max_depth: int = DEFAULT_MAX_DEPTH,
                 stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 and debug_file else None
        self.max_depth = max_depth
        self.depth = 0
        self.stdin = stdin
        self.stdout = stdout
        self.global_env = Environment()
        self.global_env.constants.update(global_constants(
            stdin=lambda: self.stdin or sys.stdin,
            stdout=lambda: self.stdout or sys.stdout,
        ))

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def define(self, name: str, value: Any):
        """Bind a host value in the global scope."""
        self.global_env.declare(name, from_python(value))

    def run(self, program: Program, env: Optional[Environment] = None) -> Any:
        """Evaluate a program in the global scope and return its value."""
        if env is None:
            env = self.global_env
        self.debug(f"run: {len(program.body)} statements")
        limit = sys.getrecursionlimit()
        needed = limit + self.max_depth * FRAMES_PER_LEVEL
        sys.setrecursionlimit(needed)
        self.depth = 0
        try:
            result = self.execute_block(program.body, env)
        except RecursionError:
            err = RecursionDepthError('host stack exhausted')
            self.debug(f"error: {err}")
            raise err from None
        except TernError as err:
            self.debug(f"error: {err}")
            raise
        finally:
            sys.setrecursionlimit(limit)
            if self.debug_fp:
                self.debug_fp.flush()
        self.debug(f"run finished: {to_debug(result)}")
        return result

    def run_source(self, source: str) -> Any:
        return self.run(parse_program(source))

    def execute_block(self, statements: List[Node], env: Environment) -> Any:
        result = NULL
        for stmt in statements:
            result = self.evaluate(stmt, env)
        return result

    def enter(self, node: Node):
        self.depth += 1
        if self.depth > self.max_depth:
            self.depth -= 1
            raise RecursionDepthError(f"maximum call depth {self.max_depth} exceeded",
                                      node.line, node.column)

    def leave(self):
        self.depth -= 1

    def evaluate(self, node: Node, env: Environment) -> Any:
        if self.debug_level >= 4:
            self.debug(f"eval {type(node).__name__} at {node.line}:{node.column}")
        try:
            return self.dispatch(node, env)
        except TernError as err:
            raise err.at(node.line, node.column)

    def dispatch(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Literal):
            return NULL if node.literal_type == 'Null' else node.value
        if isinstance(node, Ident):
            return env.lookup(node.name)
        if isinstance(node, ArrayLit):
            return ArrayVal([self.evaluate(el, env) for el in node.elements])
        if isinstance(node, TupleLit):
            return TupleVal(tuple(self.evaluate(el, env) for el in node.elements))
        if isinstance(node, CompareOp):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_comparison(node.op, left, right)
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.op, left, right)
        if isinstance(node, UnaryOp):
            return self.apply_unary_op(node.op, self.evaluate(node.operand, env))
        if isinstance(node, Call):
            return self.evaluate_call(node, env)
        if isinstance(node, Member):
            target = self.evaluate(node.target, env)
            if not isinstance(node.prop, Ident):
                return NULL
            return self.get_property(target, node.prop.name)
        if isinstance(node, Index):
            target = self.evaluate(node.target, env)
            index = self.evaluate(node.index, env)
            return self.get_index(target, index)
        if isinstance(node, Conversion):
            value = self.evaluate(node.value, env)
            if not isinstance(node.target_type, Ident):
                return NULL
            return self.convert(value, node.target_type.name)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            self.bind(node.target, value, env, declare=False)
            return NULL
        if isinstance(node, VarDecl):
            value = self.evaluate(node.expr, env) if node.expr is not None else None
            self.bind(node.target, value, env, declare=True)
            return NULL
        if isinstance(node, FuncDecl):
            return self.declare_function(node, env)
        if isinstance(node, IfStmt):
            return self.execute_if(node, env)
        if isinstance(node, CaseStmt):
            return self.execute_case(node, env)
        if isinstance(node, Block):
            return self.execute_block(node.statements, Environment(parent=env))
        if isinstance(node, Program):
            return self.execute_block(node.body, env)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    # Statements

    def bind(self, target: Node, value: Optional[Any], env: Environment, declare: bool):
        """Declare or assign `value` to an identifier or a tuple of targets.

        `value` is None for a declaration without initializer; every name
        in the target is then bound to null.
        """
        if isinstance(target, Ident):
            if value is None:
                value = NULL
            if declare:
                env.declare(target.name, value)
                if self.debug_level >= 2:
                    self.debug(f"declare {target.name} = {to_debug(value)}")
            else:
                env.assign(target.name, value)
                if self.debug_level >= 2:
                    self.debug(f"assign {target.name} = {to_debug(value)}")
            return
        if isinstance(target, TupleLit):
            if value is None:
                for element in target.elements:
                    self.bind(element, None, env, declare)
                return
            if not isinstance(value, TupleVal):
                raise TypeMismatchError(f"cannot destructure {kind_of(value)} into a tuple",
                                        target.line, target.column)
            if len(value.items) != len(target.elements):
                raise ArityError(
                    f"tuple of {len(value.items)} values cannot be bound to {len(target.elements)} names",
                    target.line, target.column)
            for element, item in zip(target.elements, value.items):
                self.bind(element, item, env, declare)
            return
        raise TypeMismatchError('invalid assignment target', target.line, target.column)

    def declare_function(self, node: FuncDecl, env: Environment) -> FunctionVal:
        # Declared types are evaluated once, here, and kept as sample values
        param_types = [
            self.evaluate(p.type_expr, env) if p.type_expr is not None else None
            for p in node.params
        ]
        return_type = self.evaluate(node.return_type, env) if node.return_type is not None else None
        func = FunctionVal(node.name, [p.name for p in node.params], param_types, return_type, node.body)
        env.declare(node.name, func)
        if self.debug_level >= 2:
            self.debug(f"define function {node.name}({', '.join(func.params)})")
        return func

    def execute_if(self, node: IfStmt, env: Environment) -> Any:
        cond = self.evaluate(node.condition, env)
        if self.debug_level >= 3:
            self.debug(f"if condition {to_debug(cond)}")
        if not isinstance(cond, bool):
            return NULL
        if cond:
            return self.evaluate(node.then_block, env)
        if node.else_block is not None:
            return self.evaluate(node.else_block, env)
        return NULL

    def execute_case(self, node: CaseStmt, env: Environment) -> Any:
        value = self.evaluate(node.scrutinee, env)
        for position, arm in enumerate(node.arms):
            label = self.evaluate(arm.label, env)
            if label is NULL or values_equal(value, label):
                if self.debug_level >= 3:
                    self.debug(f"case {to_debug(value)} matched arm {position}")
                return self.evaluate(arm.body, env)
        return NULL

    # Calls

    def evaluate_call(self, node: Call, env: Environment) -> Any:
        func = self.evaluate(node.func, env)
        args = [self.evaluate(arg, env) for arg in node.args]
        return self.call_function(func, args, env, node)

    def call_function(self, func: Any, args: List[Any], env: Environment, node: Node) -> Any:
        if isinstance(func, BuiltinFunction):
            if self.debug_level >= 3:
                self.debug(f"call builtin {func.name}")
            return func.fn(args)
        if isinstance(func, MethodVal):
            if self.debug_level >= 3:
                self.debug(f"call method {func.name} on {kind_of(func.receiver)}")
            return func.fn(func.receiver, list(func.bound_args) + args)
        if isinstance(func, FunctionVal):
            return self.call_user_function(func, args, env, node)
        # Calling a value that is not callable is not an error
        return NULL

    def call_user_function(self, func: FunctionVal, args: List[Any], env: Environment, node: Node) -> Any:
        if len(args) != len(func.params):
            raise ArityError(f"{func.name} expects {len(func.params)} arguments, got {len(args)}",
                             node.line, node.column)
        # The call scope is a child of the caller's scope
        call_env = Environment(parent=env)
        for name, expected, arg in zip(func.params, func.param_types, args):
            if expected is not None and kind_of(arg) != kind_of(expected):
                raise TypeMismatchError(
                    f"parameter {name} of {func.name} expects {kind_of(expected)}, got {kind_of(arg)}",
                    node.line, node.column)
            call_env.declare(name, arg)
        if self.debug_level >= 3:
            self.debug(f"call {func.name}({', '.join(to_debug(a) for a in args)})")
        self.enter(node)
        try:
            result = self.execute_block(func.body.statements, call_env)
        finally:
            self.leave()
        if func.return_type is not None and kind_of(result) != kind_of(func.return_type):
            raise TypeMismatchError(
                f"{func.name} must return {kind_of(func.return_type)}, got {kind_of(result)}",
                node.line, node.column)
        if self.debug_level >= 3:
            self.debug(f"return from {func.name}: {to_debug(result)}")
        return result

    # Member access

    def get_property(self, target: Any, name: str) -> Any:
        table = method_table(target)
        if table is None:
            return NULL
        if name in table:
            return MethodVal(name, table[name], target)
        if isinstance(target, ObjectVal):
            if name in target.fields:
                return target.fields[name]
            raise PropertyNotFoundError(f"property {name!r} not found on Object")
        raise PropertyNotFoundError(f"method {name!r} not found on {kind_of(target)}")

    def get_index(self, target: Any, index: Any) -> Any:
        kind = kind_of(index)
        if kind == 'String':
            return self.get_property(target, index)
        if kind != 'Integer':
            return NULL
        if isinstance(target, str):
            # Out of range reads a single space
            if 0 <= index < len(target):
                return target[index]
            return ' '
        if isinstance(target, ArrayVal):
            if 0 <= index < len(target.items):
                return target.items[index]
            return NULL
        return NULL

    # Operators

    def apply_unary_op(self, op: str, value: Any) -> Any:
        if op == '+':
            return value
        kind = kind_of(value)
        if kind == 'Boolean':
            return not value
        if kind == 'Integer':
            return wrap_int(-value)
        if kind == 'Real':
            return -value
        raise TypeMismatchError(f"unary {op} cannot be applied to {kind}")

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        ka, kb = kind_of(a), kind_of(b)
        if ka == 'Integer' and kb == 'Integer':
            if op == '+':
                return wrap_int(a + b)
            if op == '-':
                return wrap_int(a - b)
            if op == '*':
                return wrap_int(a * b)
            if op == '/':
                return ieee_divide(float(a), float(b))
            if op == '%':
                if b == 0:
                    raise DivisionByZeroError('integer remainder by zero')
                return wrap_int(truncated_remainder(a, b))
            return NULL
        if ka in NUMERIC and kb in NUMERIC:
            # At least one side is Real: widen
            x, y = float(a), float(b)
            if op == '+':
                return x + y
            if op == '-':
                return x - y
            if op == '*':
                return x * y
            if op == '/':
                return ieee_divide(x, y)
            return NULL
        if ka == 'String' and kb == 'String' and op == '+':
            return a + b
        if ka == 'String' and kb == 'Integer' and op == '*':
            return a * max(b, 0)
        if ka == 'Array' and op == '+':
            return ArrayVal(a.items + [b])
        if ka == 'Tuple' and kb == 'Tuple':
            return TupleVal(tuple(self.apply_binary_op(op, x, y) for x, y in zip(a.items, b.items)))
        return NULL

    def apply_comparison(self, op: str, a: Any, b: Any) -> bool:
        compare = COMPARISONS[op]
        ka, kb = kind_of(a), kind_of(b)
        if ka in NUMERIC and kb in NUMERIC:
            return compare(a, b)
        if ka in SIZED and kb == 'Integer':
            return compare(length_of(a), b)
        if ka in SIZED and ka == kb:
            if op in ('==', '!='):
                return compare(values_equal(a, b), True)
            return compare(length_of(a), length_of(b))
        if ka == 'Boolean' and kb == 'Boolean' and op in ('==', '!='):
            return compare(a, b)
        return False

    # Conversions

    def convert(self, value: Any, target: str) -> Any:
        kind = kind_of(value)
        if target == 'integer':
            if kind == 'Integer':
                return value
            if kind == 'Real':
                if math.isnan(value):
                    return 0
                if math.isinf(value):
                    return INT64_MAX if value > 0 else INT64_MIN
                return max(INT64_MIN, min(INT64_MAX, int(value)))
            if kind == 'Boolean':
                return 1 if value else 0
            if kind == 'String':
                if INTEGER_TEXT.fullmatch(value):
                    number = int(value)
                    if INT64_MIN <= number <= INT64_MAX:
                        return number
                raise TypeMismatchError(f"cannot convert {value!r} to integer")
            return NULL
        if target == 'real':
            if kind in NUMERIC:
                return float(value)
            if kind == 'String':
                if value == value.strip() and '_' not in value:
                    try:
                        return float(value)
                    except ValueError:
                        pass
                raise TypeMismatchError(f"cannot convert {value!r} to real")
            return NULL
        if target == 'boolean':
            if kind == 'Boolean':
                return value
            if kind in NUMERIC:
                return value != 0
            if kind == 'String':
                return len(value) > 0
            if kind in ('Array', 'Tuple'):
                return len(value.items) > 0
            if kind == 'Object':
                return len(value.fields) > 0
            return NULL
        if target == 'string':
            if kind == 'Integer':
                return str(value)
            if kind == 'Real':
                return format_real(value)
            if kind == 'Boolean':
                return 'true' if value else 'false'
            if kind == 'String':
                return value
            return NULL
        return NULL


def run_program(source: str, debug_level: int = 0) -> Any:
    """Convenience function to parse and run a Tern program from source."""
    ast_program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    try:
        return interpreter.run(ast_program)
    finally:
        interpreter.close()


def run_file(file_path: str, debug_level: int = 0, max_depth: int = DEFAULT_MAX_DEPTH) -> Interpreter:
    """Parse and run a Tern file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    ast_program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level, max_depth=max_depth)
    try:
        interpreter.run(ast_program)
    finally:
        interpreter.close()
    return interpreter
