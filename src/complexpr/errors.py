"""Structured error types for tokenizer, tree-builder and evaluator stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    # tokenization
    UNEXPECTED_CHARACTER = "unexpected_character"
    INVALID_NUMBER_LITERAL = "invalid_number_literal"
    INVALID_CODEPOINT = "invalid_codepoint"
    # tree construction
    UNMATCHED_CLOSE_PAREN = "unmatched_close_paren"
    UNMATCHED_OPEN_PAREN = "unmatched_open_paren"
    OPERATOR_MISSING_OPERAND = "operator_missing_operand"
    INVALID_ASSIGNMENT_TARGET = "invalid_assignment_target"
    INVALID_LAMBDA_PARAMETER_LIST = "invalid_lambda_parameter_list"
    NO_SUCH_OPERATOR_FOR_TOKEN = "no_such_operator_for_token"
    # evaluation
    ARITY_TOO_FEW = "arity_too_few"
    ARITY_TOO_MANY = "arity_too_many"
    NOT_A_FUNCTION = "not_a_function"
    UNBOUND_VARIABLE = "unbound_variable"
    RESERVED_IDENTIFIER = "reserved_identifier"
    UNKNOWN_SPECIAL_FORM = "unknown_special_form"
    WRONG_ARGUMENT_TYPE = "wrong_argument_type"
    WRONG_OPERAND_TYPES = "wrong_operand_types"
    INVALID_ARGUMENT_VALUE = "invalid_argument_value"
    LIST_INDEX_OUT_OF_BOUNDS = "list_index_out_of_bounds"
    IO_FAILURE = "io_failure"
    OTHER = "other"


class TraceKind(str, Enum):
    FUNCTION = "function"
    OPERATOR = "operator"
    MANUAL = "manual"


@dataclass(frozen=True)
class Trace:
    """Where an evaluation error first crossed a function or operator boundary."""

    kind: TraceKind
    name: str = ""

    def prefix(self) -> str:
        if self.kind is TraceKind.FUNCTION:
            return f"Function '{self.name}': "
        if self.kind is TraceKind.OPERATOR:
            return f"Operator '{self.name}': "
        return "Induced manually: "


class ComplexprError(Exception):
    """Base class for structured complexpr errors."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return self.message


class TokenizeError(ComplexprError):
    """Source text could not be split into tokens."""

    def __init__(self, kind: ErrorKind, message: str, position: int) -> None:
        super().__init__(kind, message)
        self.position = position

    def __str__(self) -> str:
        return f"{self.message} at index {self.position}"


class TreeError(ComplexprError):
    """Tokens could not be assembled into an expression tree."""


class EvalError(ComplexprError):
    """Failure while evaluating an expression tree."""

    def __init__(self, kind: ErrorKind, message: str, trace: Trace | None = None) -> None:
        super().__init__(kind, message)
        self.trace = trace

    def with_trace(self, trace: Trace) -> "EvalError":
        # The innermost boundary wins; outer frames never overwrite it.
        if self.trace is None:
            self.trace = trace
        return self

    def __str__(self) -> str:
        if self.trace is None:
            return self.message
        return self.trace.prefix() + self.message


def wrong_argument_type(message: str) -> EvalError:
    return EvalError(ErrorKind.WRONG_ARGUMENT_TYPE, message)


def invalid_argument_value(message: str) -> EvalError:
    return EvalError(ErrorKind.INVALID_ARGUMENT_VALUE, message)


def other_error(message: str) -> EvalError:
    return EvalError(ErrorKind.OTHER, message)


def min_args(count: int, minimum: int) -> None:
    if count < minimum:
        raise EvalError(
            ErrorKind.ARITY_TOO_FEW,
            f"Too few arguments: expected at least {minimum}, got {count}",
        )


def max_args(count: int, maximum: int) -> None:
    if count > maximum:
        raise EvalError(
            ErrorKind.ARITY_TOO_MANY,
            f"Too many arguments: expected at most {maximum}, got {count}",
        )


def bound_args(count: int, minimum: int, maximum: int | None = None) -> None:
    """Check an argument count against an inclusive range.

    ``maximum=None`` means the same as ``minimum`` (an exact arity).
    """
    if maximum is None:
        maximum = minimum
    min_args(count, minimum)
    max_args(count, maximum)
