"""Session controller: the read loop, error reporting and the preview handshake.

Statements always run on the thread that called ``start_reading()``. That
thread also owns the preview window, so once a preview is shown a daemon
reader thread takes over input and hands lines over one at a time; it does
not prompt again until the previous line has been processed.
"""

import logging
import queue
import threading
import time
from enum import Enum
from typing import Callable, Optional

from .interfaces import ConsoleIO, IOHandler, SessionHooks
from .interpreter import NoiseInterpreter
from .models import PreviewSettings, Status
from .preview import PreviewRenderer

logger = logging.getLogger(__name__)

ERROR_SYMBOL = "!"


class SessionState(Enum):
    IDLE = "idle"
    INTERACTIVE = "interactive"
    PREVIEW = "preview"
    STOPPED = "stopped"


class SessionController(SessionHooks):
    def __init__(
        self,
        interpreter: Optional[NoiseInterpreter] = None,
        io_handler: Optional[IOHandler] = None,
        settings: Optional[PreviewSettings] = None,
        renderer_factory: Optional[Callable[..., PreviewRenderer]] = None,
        prompt: str = "> ",
    ):
        self.io = io_handler if io_handler is not None else ConsoleIO()
        self.interpreter = (
            interpreter if interpreter is not None else NoiseInterpreter(io_handler=self.io)
        )
        self.interpreter.session = self
        self.settings = settings if settings is not None else PreviewSettings.from_env()
        self.prompt = prompt
        self.state = SessionState.IDLE
        self.renderer: Optional[PreviewRenderer] = None

        self._renderer_factory = renderer_factory or PreviewRenderer
        self._lines: "queue.Queue[Optional[str]]" = queue.Queue()
        self._line_done = threading.Event()
        self._reader: Optional[threading.Thread] = None

    # --- Reading ---

    def start_reading(self) -> None:
        """Read and execute statements until Exit or end of input."""
        if self.state is SessionState.STOPPED:
            self.stop_reading()
            return
        if self.renderer is not None:
            self._transition(SessionState.PREVIEW)
            self._ensure_reader()
        else:
            self._transition(SessionState.INTERACTIVE)

        while self.state is not SessionState.STOPPED:
            if self._reader is None:
                line = self.io.read_input(self.prompt)
                from_reader = False
            else:
                self._pump_preview()
                try:
                    line = self._lines.get(timeout=self.settings.poll_interval)
                except queue.Empty:
                    continue
                from_reader = True

            if line is None:
                logger.debug("end of input")
                self._transition(SessionState.STOPPED)
            else:
                self.process_line(line)
            if from_reader:
                self._line_done.set()

        self.stop_reading()

    def stop_reading(self) -> None:
        self._transition(SessionState.STOPPED)
        self._line_done.set()
        reader = self._reader
        if reader is not None and reader is not threading.current_thread():
            reader.join(timeout=self.settings.join_timeout)
            if reader.is_alive():
                logger.debug("reader thread still blocked on input, leaving it")
        self._stop_renderer()

    def process_line(self, line: str) -> Status:
        status = self.interpreter.run_line(line)
        if status is Status.ERROR:
            self.report_errors()
        return status

    def run_script(self, filename: str) -> Status:
        status = self.interpreter.run(filename)
        if status is Status.ERROR:
            self.report_errors()
        return status

    def report_errors(self) -> None:
        """Emit every pending error, oldest first."""
        messages = []
        while self.interpreter.has_error():
            messages.append(self.interpreter.get_error())
        for message in reversed(messages):
            self.io.emit(ERROR_SYMBOL, message)

    def wait_for_preview(self) -> None:
        """Pump an active preview until its window is closed."""
        while self.renderer is not None and self.state is not SessionState.STOPPED:
            self._pump_preview()
            time.sleep(self.settings.poll_interval)
        self._stop_renderer()

    # --- SessionHooks ---

    def show(self, width: int, height: int) -> None:
        if self.renderer is not None:
            logger.debug("replacing active preview")
            self._stop_renderer()
        renderer = self._renderer_factory(width, height, self.settings)
        renderer.set_sampler(self.interpreter.get_out_module)
        renderer.start()
        self.renderer = renderer
        if self.state in (SessionState.INTERACTIVE, SessionState.PREVIEW):
            self._transition(SessionState.PREVIEW)
            self._ensure_reader()

    def exit(self) -> None:
        self._transition(SessionState.STOPPED)

    # --- Internals ---

    def _transition(self, state: SessionState) -> None:
        if self.state is state:
            return
        if self.state is SessionState.STOPPED:
            return
        logger.debug("session %s -> %s", self.state.value, state.value)
        self.state = state

    def _ensure_reader(self) -> None:
        if self._reader is not None:
            return
        self._reader = threading.Thread(
            target=self._read_loop, name="noiselang-reader", daemon=True
        )
        self._reader.start()

    def _read_loop(self) -> None:
        while self.state is not SessionState.STOPPED:
            line = self.io.read_input(self.prompt)
            self._lines.put(line)
            if line is None:
                return
            self._line_done.wait()
            self._line_done.clear()

    def _pump_preview(self) -> None:
        renderer = self.renderer
        if renderer is None:
            return
        try:
            still_open = renderer.poll_events()
        except Exception as e:
            logger.exception("preview window failed")
            self.io.emit(ERROR_SYMBOL, f"Preview failed: {e}")
            still_open = False
        if still_open:
            return
        self.renderer = None
        renderer.stop()
        if self.state is SessionState.PREVIEW:
            self._transition(SessionState.INTERACTIVE)

    def _stop_renderer(self) -> None:
        renderer, self.renderer = self.renderer, None
        if renderer is not None:
            renderer.stop()
