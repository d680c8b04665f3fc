from __future__ import annotations

import os
import tempfile
import threading
import unittest
from typing import Optional

import noise_lang
from noise_lang import IOHandler, PreviewSettings, SessionController, SessionState


class _ScriptedIO(IOHandler):
    """Feeds a fixed list of lines, then reports end of input."""

    def __init__(self, lines: list[str]):
        self._lines = list(lines)
        self._lock = threading.Lock()
        self.emitted: list[tuple[str, str]] = []
        self.reader_threads: set[str] = set()

    def emit(self, symbol: str, message: str) -> None:
        self.emitted.append((symbol, message))

    def read_input(self, prompt: str) -> Optional[str]:
        self.reader_threads.add(threading.current_thread().name)
        with self._lock:
            return self._lines.pop(0) if self._lines else None


class _FakeRenderer:
    instances: list["_FakeRenderer"] = []

    def __init__(self, width, height, settings, close_after: Optional[int] = None):
        self.width, self.height, self.settings = width, height, settings
        self.close_after = close_after
        self.sampler = None
        self.started = False
        self.stopped = False
        self.polls = 0
        _FakeRenderer.instances.append(self)

    def set_sampler(self, sampler) -> None:
        self.sampler = sampler

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def is_dead(self) -> bool:
        return self.stopped

    def poll_events(self) -> bool:
        if self.stopped:
            return False
        self.polls += 1
        if self.close_after is not None and self.polls >= self.close_after:
            self.stop()
            return False
        return True


class _RecordingSession(SessionController):
    def __init__(self, *args, **kwargs):
        self.seen: list[SessionState] = []
        super().__init__(*args, **kwargs)

    def _transition(self, state: SessionState) -> None:
        before = self.state
        super()._transition(state)
        if self.state is not before:
            self.seen.append(self.state)


def _session(lines, close_after=None) -> tuple[_RecordingSession, _ScriptedIO]:
    _FakeRenderer.instances = []
    io = _ScriptedIO(lines)
    settings = PreviewSettings(poll_interval=0.001, join_timeout=2.0)
    session = _RecordingSession(
        io_handler=io,
        settings=settings,
        renderer_factory=lambda w, h, s: _FakeRenderer(w, h, s, close_after),
    )
    return session, io


class SessionControllerTests(unittest.TestCase):
    def test_reads_until_end_of_input(self) -> None:
        session, io = _session(["a = perlin()", "b = abs(a)", "b = abs(a)"])
        session.start_reading()
        self.assertIs(session.state, SessionState.STOPPED)
        self.assertEqual(session.seen, [SessionState.INTERACTIVE, SessionState.STOPPED])
        self.assertEqual(session.interpreter.revision.identifiers(), ("a", "b"))
        self.assertEqual(len(io.emitted), 1)
        symbol, message = io.emitted[0]
        self.assertEqual(symbol, "!")
        self.assertIn("already declared", message)

    def test_exit_stops_reading(self) -> None:
        session, io = _session(["a = perlin()", "exit", "b = perlin()"])
        session.start_reading()
        self.assertIs(session.state, SessionState.STOPPED)
        self.assertNotIn("b", session.interpreter.revision)
        # The line after exit is never read.
        self.assertEqual(io._lines, ["b = perlin()"])

    def test_show_moves_reading_to_background(self) -> None:
        session, io = _session(["a = perlin()", "show 64x32", "out a", "b = billow()"])
        session.start_reading()
        renderer = _FakeRenderer.instances[0]
        self.assertEqual((renderer.width, renderer.height), (64, 32))
        self.assertTrue(renderer.started)
        self.assertTrue(renderer.stopped)
        self.assertGreater(renderer.polls, 0)
        self.assertEqual(
            session.seen,
            [SessionState.INTERACTIVE, SessionState.PREVIEW, SessionState.STOPPED],
        )
        self.assertIn("noiselang-reader", io.reader_threads)
        self.assertIn("b", session.interpreter.revision)

    def test_sampler_follows_out_and_reset(self) -> None:
        session, _ = _session(["a = perlin()", "show 8x8", "out a"])
        session.start_reading()
        sampler = _FakeRenderer.instances[0].sampler
        interp = session.interpreter
        self.assertIs(sampler(), interp.revision.require("a").instance)
        interp.reset()
        self.assertIs(sampler(), interp.get_default_out_module())

    def test_closing_the_window_returns_to_interactive(self) -> None:
        session, _ = _session(["show 8x8", "a = perlin()", "b = billow()"], close_after=1)
        session.start_reading()
        self.assertEqual(
            session.seen,
            [
                SessionState.INTERACTIVE,
                SessionState.PREVIEW,
                SessionState.INTERACTIVE,
                SessionState.STOPPED,
            ],
        )
        self.assertIsNone(session.renderer)
        self.assertEqual(session.interpreter.revision.identifiers(), ("a", "b"))

    def test_second_show_replaces_the_preview(self) -> None:
        session, _ = _session(["show 8x8", "show 16x16", "a = perlin()"])
        session.start_reading()
        first, second = _FakeRenderer.instances
        self.assertTrue(first.stopped)
        self.assertTrue(second.started)
        self.assertTrue(second.stopped)
        self.assertEqual((second.width, second.height), (16, 16))

    def test_stop_reading_is_idempotent(self) -> None:
        session, _ = _session([])
        session.start_reading()
        session.stop_reading()
        self.assertIs(session.state, SessionState.STOPPED)
        session.start_reading()
        self.assertEqual(session.seen, [SessionState.INTERACTIVE, SessionState.STOPPED])

    def test_run_script_reports_errors_oldest_first(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with open(os.path.join(td, "inner.nl"), "w", encoding="utf-8") as f:
                f.write("a = perlin()\na = perlin()\n")
            with open(os.path.join(td, "outer.nl"), "w", encoding="utf-8") as f:
                f.write("load inner.nl\n")
            session, io = _session([])
            session.interpreter.base_path = td
            self.assertIs(session.run_script("outer.nl"), noise_lang.Status.ERROR)
        messages = [m for _, m in io.emitted]
        self.assertEqual(len(messages), 2)
        self.assertIn("already declared", messages[0])
        self.assertIn("Failed to load", messages[1])

    def test_show_from_a_script_waits_for_reading(self) -> None:
        session, _ = _session([])
        session.process_line("show 8x8")
        self.assertIs(session.state, SessionState.IDLE)
        self.assertIsNone(session._reader)
        session.start_reading()
        self.assertEqual(
            session.seen,
            [SessionState.PREVIEW, SessionState.STOPPED],
        )
        self.assertTrue(_FakeRenderer.instances[0].stopped)


if __name__ == "__main__":
    unittest.main(verbosity=2)
