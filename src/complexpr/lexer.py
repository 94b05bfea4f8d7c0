"""Tokenization for complexpr source text."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import ErrorKind, TokenizeError
from .values import FALSE, INT_MAX, TRUE, Complex, Float, Integer, Str, Value


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int
    end: int
    value: Value | None = None


LITERAL_KINDS = frozenset({"INTEGER", "FLOAT", "IMAGINARY", "STRING", "TRUE", "FALSE"})
OPERATOR_KINDS = frozenset(
    {"BINARY_OP", "UNARY_OP", "ASSIGN", "ASSIGN_OP", "COMMA", "SEMI", "COLON", "CALL"}
)

_IDENT_RE = re.compile(r"\$?[A-Za-z_][A-Za-z0-9_]*")
_NUMBER_RE = re.compile(r"[0-9]+(?:\.[0-9]*)?i?|\.[0-9]+i?")
_STRING_RE = re.compile(
    r'"(?:[^"\\]|\\[\\"nrte0]|\\u\{[0-9a-fA-F]{1,8}\}|\\x[0-9a-fA-F]{2})*"'
)
_OP_RE = re.compile(r"\(|\)|,|;|:|//|\^|<=?|>=?|!=|==|=|[+*\-/%]=?")
_ESCAPE_RE = re.compile(r"\\(?:u\{(?P<u>[0-9a-fA-F]{1,8})\}|x(?P<x>[0-9a-fA-F]{2})|(?P<c>.))", re.DOTALL)

_SIMPLE_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "e": "\x1b",
    "0": "\0",
}

_PUNCTUATION = {
    "(": "LPAREN",
    ")": "RPAREN",
    ",": "COMMA",
    ";": "SEMI",
    ":": "COLON",
    "=": "ASSIGN",
}
_COMPARISONS = frozenset({"==", "!=", "<=", ">="})


def is_operator_like(token: Token) -> bool:
    return token.kind in OPERATOR_KINDS


def _decode_string(body: str, pos: int) -> str:
    out: list[str] = []
    i = 0
    for m in _ESCAPE_RE.finditer(body):
        out.append(body[i : m.start()])
        i = m.end()
        if m.group("c") is not None:
            out.append(_SIMPLE_ESCAPES[m.group("c")])
            continue
        code = int(m.group("u") or m.group("x"), 16)
        if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
            raise TokenizeError(
                ErrorKind.INVALID_CODEPOINT,
                f"Invalid codepoint U+{code:X} in string literal",
                pos + 1 + m.start(),
            )
        out.append(chr(code))
    out.append(body[i:])
    return "".join(out)


def _number_token(text: str, pos: int) -> Token:
    end = pos + len(text)
    if text.endswith("i"):
        try:
            imag = float(text[:-1])
        except ValueError:
            raise TokenizeError(ErrorKind.INVALID_NUMBER_LITERAL, f"Invalid number literal {text!r}", pos) from None
        return Token("IMAGINARY", text, pos, end, Complex(complex(0.0, imag)))
    if text.isdigit():
        n = int(text)
        if n <= INT_MAX:
            return Token("INTEGER", text, pos, end, Integer(n))
    try:
        return Token("FLOAT", text, pos, end, Float(float(text)))
    except ValueError:
        raise TokenizeError(ErrorKind.INVALID_NUMBER_LITERAL, f"Invalid number literal {text!r}", pos) from None


def _name_token(text: str, pos: int) -> Token:
    end = pos + len(text)
    if text == "i":
        return Token("IMAGINARY", text, pos, end, Complex(1j))
    if text == "true":
        return Token("TRUE", text, pos, end, TRUE)
    if text == "false":
        return Token("FALSE", text, pos, end, FALSE)
    return Token("NAME", text, pos, end)


def _op_token(text: str, pos: int) -> Token:
    end = pos + len(text)
    kind = _PUNCTUATION.get(text)
    if kind is None:
        if len(text) == 2 and text.endswith("=") and text not in _COMPARISONS:
            kind = "ASSIGN_OP"
        else:
            kind = "BINARY_OP"
    return Token(kind, text, pos, end)


def tokenize(source: str) -> list[Token]:
    """Split source text into tokens.

    Identifiers are tried first, then numbers, strings and operators;
    the first pattern that matches at a position wins.
    """
    source = source.rstrip()
    tokens: list[Token] = []
    i = 0
    n = len(source)
    while i < n:
        ch = source[i]
        if ch.isspace():
            i += 1
            continue

        m = _IDENT_RE.match(source, i)
        if m:
            tokens.append(_name_token(m.group(), i))
            i = m.end()
            continue

        m = _NUMBER_RE.match(source, i)
        if m:
            tokens.append(_number_token(m.group(), i))
            i = m.end()
            continue

        m = _STRING_RE.match(source, i)
        if m:
            text = m.group()
            tokens.append(Token("STRING", text, i, m.end(), Str(_decode_string(text[1:-1], i))))
            i = m.end()
            continue

        m = _OP_RE.match(source, i)
        if m:
            tokens.append(_op_token(m.group(), i))
            i = m.end()
            continue

        raise TokenizeError(ErrorKind.UNEXPECTED_CHARACTER, f"Unexpected character {ch!r}", i)

    return tokens
