from __future__ import annotations

import unittest

from complexpr.ast import (
    Assign,
    BinaryOp,
    Block,
    FunctionCall,
    FunctionCreate,
    Identifier,
    Literal,
)
from complexpr.parser import parse
from complexpr.simplify import simplify
from complexpr.values import Float, Integer, List


class SimplifyTests(unittest.TestCase):
    def test_folds_literal_arithmetic(self) -> None:
        self.assertEqual(simplify(parse("1 + 2 * 3")), Literal(Integer(7)))
        self.assertEqual(simplify(parse("-(4 / 8)")), Literal(Float(-0.5)))

    def test_keeps_identifier_subtrees(self) -> None:
        self.assertEqual(
            simplify(parse("x + 2 * 3")),
            BinaryOp("+", Identifier("x"), Literal(Integer(6))),
        )

    def test_literal_lists_fold(self) -> None:
        self.assertEqual(
            simplify(parse("(1, 1 + 1)")),
            Literal(List((Integer(1), Integer(2)))),
        )

    def test_failing_folds_are_left_for_run_time(self) -> None:
        tree = parse("1 / 0")
        self.assertEqual(simplify(tree), tree)

    def test_recurses_into_statements_calls_and_lambdas(self) -> None:
        self.assertEqual(
            simplify(parse("a = 2 ^ 3; f(1 + 1); x:(x * (2 + 2))")),
            Block(
                (
                    Assign("a", Literal(Integer(8))),
                    FunctionCall(Identifier("f"), (Literal(Integer(2)),)),
                    FunctionCreate(
                        ("x",),
                        BinaryOp("*", Identifier("x"), Literal(Integer(4))),
                    ),
                )
            ),
        )

    def test_input_tree_is_unchanged(self) -> None:
        tree = parse("1 + 2")
        simplify(tree)
        self.assertEqual(tree, BinaryOp("+", Literal(Integer(1)), Literal(Integer(2))))


if __name__ == "__main__":
    unittest.main()
