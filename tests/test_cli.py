from __future__ import annotations

import contextlib
import importlib.util
import io
import tempfile
import unittest
from pathlib import Path

from complexpr.values import Integer

JAX_AVAILABLE = importlib.util.find_spec("jax") is not None

if JAX_AVAILABLE:
    from complexpr.__main__ import main, run_lines
    from complexpr.environments import ctx_default


@unittest.skipUnless(JAX_AVAILABLE, "jax is not installed")
class CliTests(unittest.TestCase):
    def _main(self, argv: list[str]) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_expressions_share_one_context(self) -> None:
        code, out, err = self._main(["-e", "x = 2", "-e", "x * 21", "-e", '"hi"'])
        self.assertEqual(code, 0)
        self.assertEqual(out, '42\n"hi"\n')
        self.assertEqual(err, "")

    def test_error_reports_and_fails(self) -> None:
        code, out, err = self._main(["-e", "1 / 0"])
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertTrue(err.startswith("Error: Operator '/': "))

    def test_script_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "script.cx"
            path.write_text("sq = x:(x * x);\nsq(9)", encoding="utf-8")
            code, out, _err = self._main([str(path)])
        self.assertEqual(code, 0)
        self.assertEqual(out, "81\n")

    def test_missing_file(self) -> None:
        code, _out, err = self._main(["/nonexistent/script.cx"])
        self.assertEqual(code, 1)
        self.assertIn("cannot read", err)

    def test_undecodable_script_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "binary.cx"
            path.write_bytes(b"\xff\xfe1")
            code, out, err = self._main([str(path)])
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("cannot read", err)

    def test_simplify_flag(self) -> None:
        code, out, _err = self._main(["--simplify", "--context", "empty", "-e", "2 * (3 + 4)"])
        self.assertEqual(code, 0)
        self.assertEqual(out, "14\n")

    def test_run_lines_binds_last_result(self) -> None:
        ctx = ctx_default()
        out, err = io.StringIO(), io.StringIO()
        failures = run_lines(["1 + 1\n", "\n", "_ * 10\n", "nope\n"], ctx, False, out, err)
        self.assertEqual(failures, 1)
        self.assertEqual(out.getvalue(), "2\n20\n")
        self.assertEqual(ctx["_"], Integer(20))
        self.assertIn("nope", err.getvalue())


if __name__ == "__main__":
    unittest.main()
