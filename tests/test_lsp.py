from __future__ import annotations

import importlib.util
import unittest
from dataclasses import dataclass
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
LSP_PATH = ROOT / "packages" / "noiselang-vscode" / "server" / "lsp_server.py"


def _load_lsp_module():
    spec = importlib.util.spec_from_file_location("noiselang_lsp_server", LSP_PATH)
    if spec is None or spec.loader is None:
        raise RuntimeError(f"Failed to load module spec from {LSP_PATH}")
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


@dataclass
class _Doc:
    source: str


class _Workspace:
    def __init__(self, text: str):
        self._doc = _Doc(text)

    def get_document(self, uri: str) -> _Doc:
        return self._doc


class _LS:
    def __init__(self, text: str):
        self.workspace = _Workspace(text)
        self.published: dict[str, list[object]] = {}

    def publish_diagnostics(self, uri: str, diagnostics: list[object]) -> None:
        self.published[uri] = diagnostics


class LspTests(unittest.TestCase):
    def setUp(self):
        self.lsp = _load_lsp_module()

    def test_clean_document_publishes_nothing(self) -> None:
        ls = _LS("a = perlin()\nout a\n")
        self.lsp.validate(ls, "untitled:doc")
        self.assertEqual(ls.published["untitled:doc"], [])

    def test_diagnostic_spans_the_failing_line(self) -> None:
        ls = _LS("a = perlin()\nb = add(a, zz)\n")
        self.lsp.validate(ls, "untitled:doc")
        (diag,) = ls.published["untitled:doc"]
        self.assertEqual(diag.range.start.line, 1)
        self.assertEqual(diag.range.start.character, 0)
        self.assertEqual(diag.range.end.character, len("b = add(a, zz)"))
        self.assertIn("zz", diag.message)
        self.assertEqual(diag.source, "noiselang")

    def test_fixture_scripts_are_clean(self) -> None:
        for name in ("graph_basic.nl", "load_outer.nl", "terrain.nl", "all_kinds.nl"):
            path = ROOT / "tests" / "fixtures" / name
            ls = _LS(path.read_text(encoding="utf-8"))
            self.lsp.validate(ls, path.as_uri())
            with self.subTest(fixture=name):
                self.assertEqual(ls.published[path.as_uri()], [])

    def test_base_path_from_file_uri(self) -> None:
        self.assertEqual(self.lsp._base_path("file:///tmp/x/script.nl"), "/tmp/x")
        self.assertIsNone(self.lsp._base_path("untitled:doc"))


if __name__ == "__main__":
    unittest.main(verbosity=2)
