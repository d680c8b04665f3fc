from __future__ import annotations

import sys
from pathlib import Path


def _fatal(msg: str) -> None:
    sys.stderr.write(msg + "\n")
    sys.stderr.flush()


try:
    try:
        from pygls.lsp.server import LanguageServer
    except ImportError:
        from pygls.server import LanguageServer
    from lsprotocol.types import (
        TEXT_DOCUMENT_DID_CHANGE,
        TEXT_DOCUMENT_DID_OPEN,
        Diagnostic,
        DiagnosticSeverity,
        Position,
        Range,
    )
except ImportError as e:
    _fatal(f"NoiseLang server: Failed to import LSP dependencies: {e}")
    raise


SERVER = LanguageServer("noiselang-server", "v0.1")

# --- PATH SETUP ---
# noise_lang lives three levels up, at the repository root.
SERVER_DIR = Path(__file__).resolve().parent
ROOT_DIR = SERVER_DIR.parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

try:
    from noise_lang import check_source
except ImportError:
    _fatal(
        "NoiseLang server: Could not import 'noise_lang'. Ensure repo root is in PYTHONPATH."
    )
    raise


# --- DIAGNOSTICS LOGIC ---


def _make_diag(line0: int, text: str, msg: str) -> Diagnostic:
    start = Position(line=max(line0, 0), character=0)
    end = Position(line=max(line0, 0), character=max(len(text.rstrip()), 1))
    return Diagnostic(
        range=Range(start=start, end=end),
        message=msg,
        severity=DiagnosticSeverity.Error,
        source="noiselang",
    )


def _base_path(uri: str) -> str | None:
    if not uri.startswith("file://"):
        return None
    return str(Path(uri[len("file://") :]).parent)


def validate(ls: LanguageServer, uri: str) -> None:
    doc = ls.workspace.get_document(uri)
    lines = doc.source.splitlines()
    diags = []
    for found in check_source(doc.source, base_path=_base_path(uri)):
        text = lines[found.line] if found.line < len(lines) else ""
        diags.append(_make_diag(found.line, text, found.message))
    ls.publish_diagnostics(uri, diags)


@SERVER.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls, params):
    validate(ls, params.text_document.uri)


@SERVER.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls, params):
    validate(ls, params.text_document.uri)


if __name__ == "__main__":
    SERVER.start_io()
