"""Abstract Syntax Tree (AST) definitions for the Tern language.

The parser produces a `Program` made of the nodes below and the
interpreter evaluates them directly. Every node owns its children (the
tree has no sharing and no cycles) and records the 1-based source
position of the token it starts at.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class Node:
    """Base class for all AST nodes."""
    line: int = field(default=0, kw_only=True, compare=False, repr=False)
    column: int = field(default=0, kw_only=True, compare=False, repr=False)


@dataclass
class Program(Node):
    body: List[Node]


@dataclass
class Block(Node):
    statements: List[Node]


@dataclass
class Literal(Node):
    value: Any
    literal_type: str  # 'Integer', 'Real', 'String' or 'Null'


@dataclass
class ArrayLit(Node):
    elements: List[Node]


@dataclass
class TupleLit(Node):
    elements: List[Node]


@dataclass
class Ident(Node):
    name: str


@dataclass
class CompareOp(Node):
    op: str  # one of < <= > >= == !=
    left: Node
    right: Node


@dataclass
class BinaryOp(Node):
    op: str  # one of + - * / %
    left: Node
    right: Node


@dataclass
class UnaryOp(Node):
    op: str  # one of + - !
    operand: Node


@dataclass
class Assign(Node):
    target: Node  # Ident or TupleLit of targets
    value: Node


@dataclass
class Member(Node):
    target: Node
    prop: Node  # Ident for ordinary `a.b` access


@dataclass
class Index(Node):
    target: Node
    index: Node


@dataclass
class Conversion(Node):
    value: Node
    target_type: Node  # Ident naming integer, real, boolean or string


@dataclass
class Call(Node):
    func: Node
    args: List[Node]


@dataclass
class VarDecl(Node):
    target: Node  # Ident or TupleLit of targets
    expr: Optional[Node]


@dataclass
class FuncParam(Node):
    name: str
    type_expr: Optional[Node] = None


@dataclass
class FuncDecl(Node):
    name: str
    params: List[FuncParam]
    return_type: Optional[Node]
    body: Block


@dataclass
class IfStmt(Node):
    condition: Node
    then_block: Block
    else_block: Optional[Block]


@dataclass
class CaseArm(Node):
    label: Node
    body: Block


@dataclass
class CaseStmt(Node):
    scrutinee: Node
    arms: List[CaseArm]
