from __future__ import annotations

import unittest

from complexpr.errors import ErrorKind, TokenizeError
from complexpr.lexer import tokenize
from complexpr.values import Complex, Float, Integer, Str


class LexerTests(unittest.TestCase):
    def _kinds(self, source: str):
        return [(tok.kind, tok.text) for tok in tokenize(source)]

    def test_float_forms_and_integer(self) -> None:
        tokens = tokenize("0.5 + .23 + 12. + 5")
        self.assertEqual(
            [tok.kind for tok in tokens],
            ["FLOAT", "BINARY_OP", "FLOAT", "BINARY_OP", "FLOAT", "BINARY_OP", "INTEGER"],
        )
        values = [tok.value for tok in tokens if tok.value is not None]
        self.assertIsInstance(values[0], Float)
        self.assertEqual(values[0].value, 0.5)
        self.assertEqual(values[1].value, 0.23)
        self.assertEqual(values[2].value, 12.0)
        self.assertIsInstance(values[3], Integer)
        self.assertEqual(values[3].value, 5)

    def test_spans_track_source_positions(self) -> None:
        tokens = tokenize("ab += 10")
        self.assertEqual(
            [(tok.kind, tok.text, tok.pos, tok.end) for tok in tokens],
            [("NAME", "ab", 0, 2), ("ASSIGN_OP", "+=", 3, 5), ("INTEGER", "10", 6, 8)],
        )

    def test_operator_longest_match(self) -> None:
        self.assertEqual(
            self._kinds("a//b <= c != d == e >= f ^ g % h"),
            [
                ("NAME", "a"),
                ("BINARY_OP", "//"),
                ("NAME", "b"),
                ("BINARY_OP", "<="),
                ("NAME", "c"),
                ("BINARY_OP", "!="),
                ("NAME", "d"),
                ("BINARY_OP", "=="),
                ("NAME", "e"),
                ("BINARY_OP", ">="),
                ("NAME", "f"),
                ("BINARY_OP", "^"),
                ("NAME", "g"),
                ("BINARY_OP", "%"),
                ("NAME", "h"),
            ],
        )

    def test_compound_assignment_and_punctuation(self) -> None:
        self.assertEqual(
            self._kinds("x=(1,2);y-=3:*= /= %="),
            [
                ("NAME", "x"),
                ("ASSIGN", "="),
                ("LPAREN", "("),
                ("INTEGER", "1"),
                ("COMMA", ","),
                ("INTEGER", "2"),
                ("RPAREN", ")"),
                ("SEMI", ";"),
                ("NAME", "y"),
                ("ASSIGN_OP", "-="),
                ("INTEGER", "3"),
                ("COLON", ":"),
                ("ASSIGN_OP", "*="),
                ("ASSIGN_OP", "/="),
                ("ASSIGN_OP", "%="),
            ],
        )

    def test_identifiers_keywords_and_imaginary_unit(self) -> None:
        tokens = tokenize("true false i $ctx _x1 2i .5i")
        self.assertEqual(
            [tok.kind for tok in tokens],
            ["TRUE", "FALSE", "IMAGINARY", "NAME", "NAME", "IMAGINARY", "IMAGINARY"],
        )
        self.assertEqual(tokens[2].value, Complex(1j))
        self.assertEqual(tokens[3].text, "$ctx")
        self.assertEqual(tokens[5].value.value, 2j)
        self.assertEqual(tokens[6].value.value, 0.5j)

    def test_integer_overflow_becomes_float(self) -> None:
        (tok,) = tokenize("9223372036854775808")
        self.assertEqual(tok.kind, "FLOAT")
        self.assertEqual(tok.value.value, 9223372036854775808.0)
        (tok,) = tokenize("9223372036854775807")
        self.assertEqual(tok.kind, "INTEGER")

    def test_string_escapes(self) -> None:
        (tok,) = tokenize(r'"a\nb\t\"q\"\\\e\0\x41\u{1F600}"')
        self.assertEqual(tok.kind, "STRING")
        self.assertIsInstance(tok.value, Str)
        self.assertEqual(tok.value.value, 'a\nb\t"q"\\\x1b\0A\U0001F600')

    def test_invalid_codepoint(self) -> None:
        for source in (r'"\u{110000}"', r'"\u{D800}"'):
            with self.subTest(source=source):
                with self.assertRaises(TokenizeError) as ctx:
                    tokenize(source)
                self.assertIs(ctx.exception.kind, ErrorKind.INVALID_CODEPOINT)

    def test_unexpected_character_reports_position(self) -> None:
        for source, pos in (("1 + #", 4), ("a.b", 1), ('"open', 0)):
            with self.subTest(source=source):
                with self.assertRaises(TokenizeError) as ctx:
                    tokenize(source)
                self.assertIs(ctx.exception.kind, ErrorKind.UNEXPECTED_CHARACTER)
                self.assertEqual(ctx.exception.position, pos)

    def test_whitespace_only_is_empty(self) -> None:
        self.assertEqual(tokenize("   \n\t "), [])

    def test_exponent_notation_is_not_a_number_literal(self) -> None:
        self.assertEqual(self._kinds("2e3"), [("INTEGER", "2"), ("NAME", "e3")])


if __name__ == "__main__":
    unittest.main()
