"""AST nodes for complexpr expressions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .values import Value


@dataclass(frozen=True)
class Literal:
    value: Value


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: "Node"


@dataclass(frozen=True)
class Assign:
    name: str
    value: "Node"


@dataclass(frozen=True)
class AssignOp:
    op: str
    name: str
    value: "Node"


@dataclass(frozen=True)
class FunctionCall:
    callee: "Node"
    args: tuple["Node", ...]


@dataclass(frozen=True)
class FunctionCreate:
    params: tuple[str, ...]
    body: "Node"


@dataclass(frozen=True)
class ListExpr:
    items: tuple["Node", ...]


@dataclass(frozen=True)
class Block:
    statements: tuple["Node", ...]


Node = Union[
    Literal,
    Identifier,
    BinaryOp,
    UnaryOp,
    Assign,
    AssignOp,
    FunctionCall,
    FunctionCreate,
    ListExpr,
    Block,
]
