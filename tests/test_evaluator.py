from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from complexpr.ast import Literal
from complexpr.context import Context
from complexpr.errors import ErrorKind, EvalError, TraceKind
from complexpr.evaluator import call_value, compile_cache_stats, compile_expression, evaluate
from complexpr.values import VOID, Float, Integer, Lambda, List, Str, Value


def _boom(args: list[Value]) -> Value:
    raise EvalError(ErrorKind.INVALID_ARGUMENT_VALUE, "boom")


def _twice(args: list[Value]) -> Value:
    return List(tuple(args) + tuple(args))


class EvaluatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ctx = Context()
        self.ctx.insert_function("boom", _boom)
        self.ctx.insert_function("twice", _twice)

    def _eval(self, source: str) -> Value:
        return evaluate(source, self.ctx)

    def _eval_error(self, source: str) -> EvalError:
        with self.assertRaises(EvalError) as ctx:
            self._eval(source)
        return ctx.exception

    def test_arithmetic_and_grouping(self) -> None:
        self.assertEqual(self._eval("2*(3+4)"), Integer(14))
        self.assertEqual(self._eval("-2^2"), Integer(4))
        self.assertEqual(self._eval("7 / 2"), Float(3.5))

    def test_assignment_returns_void_and_binds(self) -> None:
        self.assertIs(self._eval("x = 4"), VOID)
        self.assertEqual(self.ctx["x"], Integer(4))
        self.assertEqual(self._eval("x * 2"), Integer(8))

    def test_compound_assignment(self) -> None:
        self._eval("var = 1")
        self.assertEqual(self._eval("var += 5; var -= 3; var - 1"), Integer(2))
        self.assertEqual(self.ctx["var"], Integer(3))

    def test_compound_assignment_requires_binding(self) -> None:
        err = self._eval_error("missing += 1")
        self.assertIs(err.kind, ErrorKind.UNBOUND_VARIABLE)

    def test_block_value_is_last_statement(self) -> None:
        self.assertEqual(self._eval("a = 1; b = 2; a + b"), Integer(3))
        self.assertIs(self._eval("a = 1;"), VOID)

    def test_lists(self) -> None:
        self.assertEqual(self._eval("(1, 2 + 3)"), List((Integer(1), Integer(5))))
        self.assertEqual(self._eval("()"), List(()))

    def test_lambda_captures_definition_environment(self) -> None:
        self._eval("n = 10; addn = x:(x + n); n = 0")
        self.assertEqual(self._eval("addn(1)"), Integer(11))

    def test_lambda_assignments_do_not_leak(self) -> None:
        self._eval("f = x: (y = x * 2; y)")
        self.assertEqual(self._eval("f(3)"), Integer(6))
        self.assertNotIn("y", self.ctx)

    def test_curried_lambda(self) -> None:
        self.assertEqual(self._eval("k = a: b:(a - b); k(10)(3)"), Integer(7))

    def test_zero_parameter_lambda(self) -> None:
        self.assertEqual(self._eval("g = ():42; g()"), Integer(42))

    def test_lambda_arity_is_exact(self) -> None:
        self._eval("f = (a, b):(a + b)")
        self.assertIs(self._eval_error("f(1)").kind, ErrorKind.ARITY_TOO_FEW)
        self.assertIs(self._eval_error("f(1, 2, 3)").kind, ErrorKind.ARITY_TOO_MANY)

    def test_call_arguments_are_spread_from_a_single_list(self) -> None:
        self._eval("f = (a, b):(a * b)")
        self.assertEqual(self._eval("f((3, 4))"), Integer(12))

    def test_bool_selector(self) -> None:
        self.assertEqual(self._eval("(1 < 2)(10, 20)"), Integer(10))
        self.assertEqual(self._eval("(1 > 2)(10, 20)"), Integer(20))
        self.assertIs(self._eval_error("true(1)").kind, ErrorKind.ARITY_TOO_FEW)

    def test_not_a_function(self) -> None:
        self.assertIs(self._eval_error("x = 3; x(1)").kind, ErrorKind.NOT_A_FUNCTION)

    def test_unbound_variable(self) -> None:
        err = self._eval_error("nope + 1")
        self.assertIs(err.kind, ErrorKind.UNBOUND_VARIABLE)
        self.assertIn("nope", str(err))

    def test_reserved_identifiers(self) -> None:
        for source in ("$x = 1", '$set("true", 1)', '$set("false", 1)', '$set("$y", 1)'):
            with self.subTest(source=source):
                self.assertIs(self._eval_error(source).kind, ErrorKind.RESERVED_IDENTIFIER)

    def test_unknown_special_form(self) -> None:
        self.assertIs(self._eval_error("$nope(1)").kind, ErrorKind.UNKNOWN_SPECIAL_FORM)
        self.assertIs(self._eval_error("$nope").kind, ErrorKind.UNKNOWN_SPECIAL_FORM)

    def test_native_functions_receive_evaluated_arguments(self) -> None:
        self.assertEqual(
            self._eval("twice(1 + 1)"),
            List((Integer(2), Integer(2))),
        )


class TraceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ctx = Context()
        self.ctx.insert_function("boom", _boom)

    def _error(self, source: str) -> EvalError:
        with self.assertRaises(EvalError) as ctx:
            evaluate(source, self.ctx)
        return ctx.exception

    def test_native_function_trace(self) -> None:
        err = self._error("boom()")
        self.assertIs(err.trace.kind, TraceKind.FUNCTION)
        self.assertEqual(err.trace.name, "boom")
        self.assertEqual(str(err), "Function 'boom': boom")

    def test_operator_trace(self) -> None:
        err = self._error("1 / 0")
        self.assertIs(err.trace.kind, TraceKind.OPERATOR)
        self.assertEqual(err.trace.name, "/")
        self.assertTrue(str(err).startswith("Operator '/': "))

    def test_compound_assignment_trace(self) -> None:
        err = self._error("x = 1; x += ()")
        self.assertEqual((err.trace.kind, err.trace.name), (TraceKind.OPERATOR, "+="))

    def test_innermost_boundary_wins(self) -> None:
        err = self._error("wrap = x: boom(x); wrap(1)")
        self.assertEqual(err.trace.name, "boom")
        err = self._error("inner = x:(x / 0); outer = y: inner(y); outer(1)")
        self.assertEqual((err.trace.kind, err.trace.name), (TraceKind.OPERATOR, "/"))

    def test_lambda_trace_uses_callee_name(self) -> None:
        err = self._error("f = (a, b): a; f(1)")
        self.assertEqual((err.trace.kind, err.trace.name), (TraceKind.FUNCTION, "f"))
        err = self._error("(x: x)()")
        self.assertEqual(err.trace.name, "<lambda>")

    def test_ratio_out_of_range_is_a_traced_error(self) -> None:
        err = self._error("(10//1)^400 == 1.0")
        self.assertIs(err.kind, ErrorKind.INVALID_ARGUMENT_VALUE)
        self.assertEqual((err.trace.kind, err.trace.name), (TraceKind.OPERATOR, "^"))
        err = self._error("x = 2//1; x ^ 1000000000000000")
        self.assertIs(err.kind, ErrorKind.INVALID_ARGUMENT_VALUE)
        self.assertEqual(evaluate("$catch((10//1)^400 + 0.5, 7)", self.ctx), Integer(7))

    def test_untraced_errors_have_plain_messages(self) -> None:
        err = self._error("missing")
        self.assertIsNone(err.trace)
        self.assertEqual(str(err), err.message)


class SpecialFormTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ctx = Context()
        self.ctx.insert_function("boom", _boom)

    def _eval(self, source: str) -> Value:
        return evaluate(source, self.ctx)

    def test_catch(self) -> None:
        self.assertIs(self._eval("$catch(boom())"), VOID)
        self.assertEqual(self._eval("$catch(boom(), 7)"), Integer(7))
        self.assertEqual(self._eval("$catch(1 + 1, boom())"), Integer(2))

    def test_set_get_is_set_unset(self) -> None:
        self.assertIs(self._eval('$set("v", 3)'), VOID)
        self.assertEqual(self._eval('$get("v")'), Integer(3))
        self.assertEqual(self._eval('$is_set("v")').value, True)
        self._eval('$unset("v")')
        self.assertEqual(self._eval('$is_set("v")').value, False)
        self._eval('$unset("v")')
        with self.assertRaises(EvalError) as ctx:
            self._eval('$get("v")')
        self.assertIs(ctx.exception.kind, ErrorKind.UNBOUND_VARIABLE)

    def test_special_forms_require_string_names(self) -> None:
        with self.assertRaises(EvalError) as ctx:
            self._eval("$get(1)")
        self.assertIs(ctx.exception.kind, ErrorKind.WRONG_ARGUMENT_TYPE)

    def test_ctx_lists_sorted_bindings(self) -> None:
        self._eval("b = 2; a = 1")
        listing = self._eval("$ctx()")
        self.assertEqual([pair.items[0].value for pair in listing], ["a", "b", "boom"])
        self.assertEqual(listing.items[0].items[1], Integer(1))
        self.assertEqual(len(self._eval("$ctx")), len(listing))

    def test_include_evaluates_in_current_context(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "defs.cx"
            path.write_text("sq = x:(x * x);\nbase = 5", encoding="utf-8")
            self.ctx["path"] = Str(str(path))
            self._eval("$include(path)")
        self.assertEqual(self._eval("sq(base)"), Integer(25))

    def test_include_failures(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = os.path.join(tmp, "missing.cx")
            with self.assertRaises(EvalError) as ctx:
                evaluate(f'$include("{missing}")', self.ctx)
            self.assertIs(ctx.exception.kind, ErrorKind.IO_FAILURE)

            broken = Path(tmp) / "broken.cx"
            broken.write_text("1 +", encoding="utf-8")
            self.ctx["broken"] = Str(str(broken))
            with self.assertRaises(EvalError) as ctx:
                self._eval("$include(broken)")
            self.assertIs(ctx.exception.kind, ErrorKind.OTHER)

    def test_include_of_undecodable_file_is_an_io_failure(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "binary.cx"
            path.write_bytes(b"\xff\xfe1")
            self.ctx["path"] = Str(str(path))
            with self.assertRaises(EvalError) as ctx:
                self._eval("$include(path)")
            self.assertIs(ctx.exception.kind, ErrorKind.IO_FAILURE)
            self.assertEqual(self._eval("$catch($include(path), 0)"), Integer(0))


class CompileTests(unittest.TestCase):
    def test_compiled_tree_is_reusable(self) -> None:
        tree = compile_expression("n * 2")
        for n in (1, 2, 3):
            with self.subTest(n=n):
                ctx = Context({"n": Integer(n)})
                self.assertEqual(evaluate("n * 2", ctx), Integer(n * 2))
        self.assertIs(compile_expression("n * 2"), tree)
        stats = compile_cache_stats()
        self.assertGreaterEqual(stats["hits"], 1)

    def test_simplify_folds_constants(self) -> None:
        tree = compile_expression("2 * (3 + 4)", simplify=True)
        self.assertEqual(tree, Literal(Integer(14)))
        self.assertEqual(evaluate("2 * (3 + 4)", Context(), simplify=True), Integer(14))

    def test_call_value_on_lambda(self) -> None:
        ctx = Context()
        func = evaluate("(a, b):(a - b)", ctx)
        self.assertIsInstance(func, Lambda)
        self.assertEqual(call_value(func, [Integer(5), Integer(2)]), Integer(3))


class ContextTests(unittest.TestCase):
    def test_rejects_non_values(self) -> None:
        ctx = Context()
        with self.assertRaises(TypeError):
            ctx["x"] = 3
        with self.assertRaises(TypeError):
            ctx[1] = Integer(3)

    def test_copy_is_independent(self) -> None:
        ctx = Context({"a": Integer(1)})
        clone = ctx.copy()
        clone["a"] = Integer(2)
        self.assertEqual(ctx["a"], Integer(1))

    def test_update_from(self) -> None:
        ctx = Context({"a": Integer(1)})
        ctx.update_from(Context({"a": Integer(5), "b": Integer(2)}))
        self.assertEqual(sorted(ctx), ["a", "b"])
        self.assertEqual(ctx["a"], Integer(5))


if __name__ == "__main__":
    unittest.main()
