from __future__ import annotations

import os
import tempfile
import unittest

from noise_lang import Diagnostic, check_source


class CheckSourceTests(unittest.TestCase):
    def test_clean_script(self) -> None:
        src = "a = perlin()\nb = abs(a)\n\nout b\nshow 100x100\nexit\n"
        self.assertEqual(check_source(src), [])

    def test_reports_every_failing_line(self) -> None:
        src = "\n".join(
            [
                "a = perlin()",
                "b = add(a, ghost)",
                "a = billow()",
                "c = abs(a)",
                "c->SetBounds(0.0, 1.0)",
                "show 0x10",
            ]
        )
        diags = check_source(src)
        self.assertEqual([d.line for d in diags], [1, 2, 4, 5])
        self.assertIn("ghost", diags[0].message)
        self.assertIn("already declared", diags[1].message)
        self.assertIn("has no method", diags[2].message)
        self.assertIn("Invalid preview size", diags[3].message)

    def test_lines_after_exit_are_still_checked(self) -> None:
        diags = check_source("exit\nnot a statement\n")
        self.assertEqual(len(diags), 1)
        self.assertIsInstance(diags[0], Diagnostic)
        self.assertEqual(diags[0].line, 1)

    def test_save_writes_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            self.assertEqual(check_source("a = perlin()\nsave out.nl\n", td), [])
            self.assertEqual(os.listdir(td), [])

    def test_loaded_nodes_are_known_to_later_lines(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with open(os.path.join(td, "base_graph.nl"), "w", encoding="utf-8") as f:
                f.write("a = perlin()\nb = abs(a)\nsave copy.nl\n")
            src = "load base_graph.nl\nc = invert(b)\nout c\n"
            self.assertEqual(check_source(src, td), [])
            self.assertEqual(sorted(os.listdir(td)), ["base_graph.nl"])

    def test_missing_and_recursive_loads_are_reported(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with open(os.path.join(td, "loop.nl"), "w", encoding="utf-8") as f:
                f.write("x = perlin()\nload loop.nl\n")
            diags = check_source("load nothere\nload loop.nl\ny = perlin()\n", td)
        self.assertEqual([d.line for d in diags], [0, 1])
        self.assertIn("Cannot read 'nothere'", diags[0].message)
        self.assertIn("Failed to load 'loop.nl'", diags[1].message)


if __name__ == "__main__":
    unittest.main(verbosity=2)
