"""Constant folding over literal-only subtrees.

Produces a new tree; the input is never mutated. A fold that would raise is
skipped and the unfolded subtree is kept so the error surfaces at run time.
"""

from __future__ import annotations

from .ast import (
    Assign,
    AssignOp,
    BinaryOp,
    Block,
    FunctionCall,
    FunctionCreate,
    ListExpr,
    Literal,
    Node,
    UnaryOp,
)
from .errors import EvalError
from .operators import binary_op, unary_op
from .values import List


def _fold_unary(op: str, operand: Literal) -> Literal | None:
    try:
        return Literal(unary_op(op, operand.value))
    except EvalError:
        return None


def _fold_binary(op: str, left: Literal, right: Literal) -> Literal | None:
    try:
        return Literal(binary_op(op, left.value, right.value))
    except EvalError:
        return None


def simplify(node: Node) -> Node:
    if isinstance(node, UnaryOp):
        operand = simplify(node.operand)
        if isinstance(operand, Literal):
            folded = _fold_unary(node.op, operand)
            if folded is not None:
                return folded
        return UnaryOp(node.op, operand)

    if isinstance(node, BinaryOp):
        left = simplify(node.left)
        right = simplify(node.right)
        if isinstance(left, Literal) and isinstance(right, Literal):
            folded = _fold_binary(node.op, left, right)
            if folded is not None:
                return folded
        return BinaryOp(node.op, left, right)

    if isinstance(node, ListExpr):
        items = tuple(simplify(item) for item in node.items)
        if all(isinstance(item, Literal) for item in items):
            return Literal(List(tuple(item.value for item in items)))
        return ListExpr(items)

    if isinstance(node, Block):
        return Block(tuple(simplify(stmt) for stmt in node.statements))

    if isinstance(node, Assign):
        return Assign(node.name, simplify(node.value))

    if isinstance(node, AssignOp):
        return AssignOp(node.op, node.name, simplify(node.value))

    if isinstance(node, FunctionCall):
        return FunctionCall(node.callee, tuple(simplify(arg) for arg in node.args))

    if isinstance(node, FunctionCreate):
        return FunctionCreate(node.params, simplify(node.body))

    return node
