"""Tree builder: parenthesis grouping plus highest-binding pivot selection.

Source is first grouped by parentheses (inserting synthetic ``CALL`` tokens
where a group directly follows a value) and then each group is split at the
top-level token that binds loosest. That token becomes the root of the
subtree and both sides are built recursively.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Union

from .ast import (
    Assign,
    AssignOp,
    BinaryOp,
    Block,
    FunctionCall,
    FunctionCreate,
    Identifier,
    ListExpr,
    Literal,
    Node,
    UnaryOp,
)
from .errors import ErrorKind, TreeError
from .lexer import LITERAL_KINDS, Token, is_operator_like, tokenize
from .values import VOID

Item = Union[Token, list]

_COMPARISON_TEXT = frozenset({"==", "!=", "<", ">", "<=", ">="})


def binding(token: Token) -> int:
    kind = token.kind
    if kind == "SEMI":
        return 120
    if kind == "COMMA":
        return 110
    if kind in ("ASSIGN", "ASSIGN_OP"):
        return 100
    if kind == "BINARY_OP":
        if token.text in _COMPARISON_TEXT:
            return 80
        if token.text in ("+", "-"):
            return 70
        if token.text in ("*", "/", "//", "%"):
            return 60
        if token.text == "^":
            return 40
        return 0
    if kind == "UNARY_OP":
        return 35
    if kind == "COLON":
        return 30
    if kind == "CALL":
        return 20
    return 0


def right_assoc(token: Token) -> bool:
    if token.kind == "BINARY_OP":
        return token.text == "^"
    return token.kind in ("ASSIGN", "ASSIGN_OP", "COMMA", "UNARY_OP", "COLON")


def group_tokens(tokens: list[Token]) -> list[Item]:
    """Nest parenthesized spans into sub-lists and mark calls and negation."""
    out: list[Item] = []
    inner: list[Token] = []
    depth = 0
    last_op = True
    open_tok: Token | None = None
    for tok in tokens:
        if tok.kind == "LPAREN":
            depth += 1
            if depth == 1:
                open_tok = tok
                inner = []
                continue
        elif tok.kind == "RPAREN":
            depth -= 1
            if depth < 0:
                raise TreeError(ErrorKind.UNMATCHED_CLOSE_PAREN, f"Unmatched ')' at index {tok.pos}")
            if depth == 0:
                if not last_op:
                    out.append(Token("CALL", "", open_tok.pos, open_tok.pos))
                out.append(group_tokens(inner))
                last_op = False
                continue

        if depth > 0:
            inner.append(tok)
            continue

        if last_op and tok.kind == "BINARY_OP" and tok.text == "-":
            tok = replace(tok, kind="UNARY_OP")
        out.append(tok)
        last_op = is_operator_like(tok)

    if depth > 0:
        raise TreeError(ErrorKind.UNMATCHED_OPEN_PAREN, f"Unmatched '(' at index {open_tok.pos}")
    return out


def next_split(items: list[Item]) -> int | None:
    """Index of the pivot token, or ``None`` if no operator is present.

    Ties resolve so that left-associative operators end up grouping to the
    left (rightmost tie is the root) and right-associative ones to the right
    (leftmost tie is the root). A prefix operator is only a candidate at the
    start of the span.
    """
    best = 0
    idx: int | None = None
    for i, item in enumerate(items):
        if not isinstance(item, Token):
            continue
        if item.kind == "UNARY_OP" and i != 0:
            continue
        b = binding(item)
        if b == 0:
            continue
        if b > best or (b == best and not right_assoc(item)):
            best = b
            idx = i
    return idx


def _missing_operand(token: Token) -> TreeError:
    return TreeError(
        ErrorKind.OPERATOR_MISSING_OPERAND,
        f"Operator '{token.text}' at index {token.pos} is missing an operand",
    )


def _leaf(token: Token) -> Node:
    if token.kind in LITERAL_KINDS:
        return Literal(token.value)
    if token.kind == "NAME":
        return Identifier(token.text)
    raise _missing_operand(token)


def _assign_target(before: list[Item], token: Token) -> str:
    if len(before) == 1 and isinstance(before[0], Token) and before[0].kind == "NAME":
        return before[0].text
    raise TreeError(
        ErrorKind.INVALID_ASSIGNMENT_TARGET,
        f"Left side of '{token.text}' at index {token.pos} must be a single identifier",
    )


def _comma_items(before: list[Item], token: Token, after: list[Item]) -> list[Node]:
    if not before:
        raise _missing_operand(token)
    nodes = [finish_tree(before)]
    rest = after
    while rest:
        idx = next_split(rest)
        if idx is not None and isinstance(rest[idx], Token) and rest[idx].kind == "COMMA":
            car = rest[:idx]
            if not car:
                raise _missing_operand(rest[idx])
            nodes.append(finish_tree(car))
            rest = rest[idx + 1 :]
        else:
            nodes.append(finish_tree(rest))
            break
    return nodes


def _block_part(items: list[Item]) -> list[Node]:
    if not items:
        return [Literal(VOID)]
    node = finish_tree(items)
    if isinstance(node, Block):
        return list(node.statements)
    return [node]


def _lambda_params(node: Node, token: Token) -> tuple[str, ...]:
    if isinstance(node, Identifier):
        return (node.name,)
    if isinstance(node, ListExpr) and all(isinstance(item, Identifier) for item in node.items):
        return tuple(item.name for item in node.items)
    raise TreeError(
        ErrorKind.INVALID_LAMBDA_PARAMETER_LIST,
        f"Parameters of ':' at index {token.pos} must be an identifier or a list of identifiers",
    )


def finish_tree(items: list[Item]) -> Node:
    if not items:
        return ListExpr(())
    if len(items) == 1:
        item = items[0]
        if isinstance(item, list):
            return finish_tree(item)
        return _leaf(item)

    idx = next_split(items)
    if idx is None:
        raise TreeError(ErrorKind.NO_SUCH_OPERATOR_FOR_TOKEN, "Missing operator between operands")

    token = items[idx]
    before = items[:idx]
    after = items[idx + 1 :]
    kind = token.kind

    if kind == "BINARY_OP":
        if not before or not after:
            raise _missing_operand(token)
        return BinaryOp(token.text, finish_tree(before), finish_tree(after))
    if kind == "UNARY_OP":
        if before or not after:
            raise _missing_operand(token)
        return UnaryOp(token.text, finish_tree(after))
    if kind == "ASSIGN":
        name = _assign_target(before, token)
        if not after:
            raise _missing_operand(token)
        return Assign(name, finish_tree(after))
    if kind == "ASSIGN_OP":
        name = _assign_target(before, token)
        if not after:
            raise _missing_operand(token)
        return AssignOp(token.text[:-1], name, finish_tree(after))
    if kind == "CALL":
        callee = finish_tree(before)
        args = finish_tree(after)
        if isinstance(args, ListExpr):
            return FunctionCall(callee, args.items)
        return FunctionCall(callee, (args,))
    if kind == "COMMA":
        return ListExpr(tuple(_comma_items(before, token, after)))
    if kind == "SEMI":
        return Block(tuple(_block_part(before) + _block_part(after)))
    if kind == "COLON":
        params = _lambda_params(finish_tree(before), token)
        return FunctionCreate(params, finish_tree(after))

    raise TreeError(ErrorKind.NO_SUCH_OPERATOR_FOR_TOKEN, f"Token {token.text!r} is not an operator")


def gen_tree(tokens: list[Token]) -> Node:
    return finish_tree(group_tokens(tokens))


def parse(source: str) -> Node:
    """Tokenize and build the expression tree for ``source``."""
    return gen_tree(tokenize(source))
