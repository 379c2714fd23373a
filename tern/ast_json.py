"""JSON serialization/deserialization for the Tern AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Each node becomes a dict with a
``type`` key naming its class, one key per field, and its source
position under ``line``/``column``. The conversion round-trips.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict

from .ast import (
    Node,
    Program,
    Block,
    Literal,
    ArrayLit,
    TupleLit,
    Ident,
    CompareOp,
    BinaryOp,
    UnaryOp,
    Assign,
    Member,
    Index,
    Conversion,
    Call,
    VarDecl,
    FuncParam,
    FuncDecl,
    IfStmt,
    CaseArm,
    CaseStmt,
)

NODE_TYPES: Dict[str, type] = {
    cls.__name__: cls
    for cls in (
        Program, Block, Literal, ArrayLit, TupleLit, Ident, CompareOp, BinaryOp,
        UnaryOp, Assign, Member, Index, Conversion, Call, VarDecl, FuncParam,
        FuncDecl, IfStmt, CaseArm, CaseStmt,
    )
}

POSITION_FIELDS = ('line', 'column')


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None or isinstance(node, (bool, int, float, str)):
        return node
    if isinstance(node, list):
        return [ast_to_obj(item) for item in node]
    if not isinstance(node, Node) or type(node).__name__ not in NODE_TYPES:
        raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")
    obj: Dict[str, Any] = {"type": type(node).__name__}
    for f in fields(node):
        obj[f.name] = ast_to_obj(getattr(node, f.name))
    return obj


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, list):
        return [ast_from_obj(item) for item in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    cls = NODE_TYPES.get(t)
    if cls is None:
        raise ValueError(f"Unknown AST node type: {t}")
    kwargs = {}
    for f in fields(cls):
        if f.name in obj:
            kwargs[f.name] = ast_from_obj(obj[f.name])
        elif f.name not in POSITION_FIELDS and f.name != 'type_expr':
            raise ValueError(f"{t} node is missing field {f.name!r}")
    return cls(**kwargs)
