from __future__ import annotations

import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

# We import the entrypoint script specifically to test it
import noiselang


class EntrypointCoverageTests(unittest.TestCase):
    def _script(self, td: str, name: str, text: str) -> str:
        path = os.path.join(td, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_main_runs_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = self._script(td, "ok.nl", "a = perlin()\nout a\nsave copy.nl\n")
            buf = io.StringIO()
            with redirect_stdout(buf):
                code = noiselang.main([path])
            self.assertEqual(code, 0)
            self.assertEqual(buf.getvalue(), "")
            # Relative filenames resolve next to the script.
            with open(os.path.join(td, "copy.nl"), encoding="utf-8") as f:
                self.assertEqual(f.read(), "a = perlin()\nout a\n")

    def test_main_reports_script_errors(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = self._script(td, "bad.nl", "a = perlin()\nb = abs(q)\n")
            buf = io.StringIO()
            with redirect_stdout(buf):
                code = noiselang.main([path])
        self.assertEqual(code, 1)
        self.assertIn("! Unknown identifier 'q'", buf.getvalue())

    def test_main_interactive_after_script(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = self._script(td, "ok.nl", "a = perlin()\n")
            buf = io.StringIO()
            with patch("builtins.input", side_effect=["a = billow()", EOFError]), redirect_stdout(buf):
                code = noiselang.main(["-i", path])
        self.assertEqual(code, 0)
        self.assertIn("NoiseLang interactive session", buf.getvalue())
        self.assertIn("! Identifier 'a' is already declared", buf.getvalue())

    def test_main_without_script_starts_the_repl(self) -> None:
        buf = io.StringIO()
        with patch("builtins.input", side_effect=["x = voronoi()", "exit", "never"]), redirect_stdout(buf):
            code = noiselang.main([])
        self.assertEqual(code, 0)
        self.assertNotIn("!", buf.getvalue())

    def test_bad_log_level_is_a_usage_error(self) -> None:
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as ctx:
            noiselang.main(["--log-level", "chatty"])
        self.assertEqual(ctx.exception.code, 2)
        self.assertIn("Unknown log level", err.getvalue())

    def test_log_level_defaults_from_environment(self) -> None:
        with patch.dict(os.environ, {"NOISELANG_LOG_LEVEL": "nonsense"}):
            with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
                noiselang.main([])


if __name__ == "__main__":
    unittest.main(verbosity=2)
