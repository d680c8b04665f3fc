import logging
import os
from collections import deque
from typing import Deque, List, Optional, Sequence

from .builder import build_node
from .dispatch import dispatch
from .exceptions import NoiseLangError, PreviewError, ScriptIOError
from .grammar import Statement, parse_statement
from .interfaces import ConsoleIO, IOHandler, SessionHooks
from .models import Assignment, Exit, Load, MethodCall, Out, Save, Show, Status
from .modules import Const, Module
from .registry import GraphRevision, ModuleRegistry

logger = logging.getLogger(__name__)

# Statements whose text is replayed by Save.
_RECORDED = (Assignment, MethodCall, Out, Load)


class NoiseInterpreter:
    def __init__(
        self,
        base_path: Optional[str] = None,
        session: Optional[SessionHooks] = None,
        io_handler: Optional[IOHandler] = None,
    ):
        self.base_path = os.path.abspath(base_path or os.getcwd())
        self.session = session
        self.io = io_handler if io_handler is not None else ConsoleIO()
        self.registry = ModuleRegistry()
        self.history: List[str] = []
        self._errors: Deque[str] = deque()
        self._default_out: Module = Const(0.0)
        self._stopped = False
        self._loading: List[str] = []

    # --- Session surface ---

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def revision(self) -> GraphRevision:
        return self.registry.revision

    def run_line(self, line: str, record: bool = True) -> Status:
        """Execute one statement; failures are queued, never raised."""
        if self._stopped:
            return Status.OK
        text = line.rstrip("\r\n")
        try:
            statement = parse_statement(text)
            if statement is None:
                return Status.OK
            self._execute(statement)
        except NoiseLangError as e:
            self._push_error(e)
            logger.info("statement failed: %r: %s", text, e)
            return Status.ERROR
        if record and isinstance(statement, _RECORDED):
            self.history.append(text)
        return Status.OK

    def run(self, filename: str, record: bool = True) -> Status:
        """Execute a script; the first failing line aborts it and resets the graph."""
        try:
            lines = self._read_script(filename)
        except ScriptIOError as e:
            self._push_error(e)
            return Status.ERROR
        return self._run_lines(filename, lines, record)

    def reset(self) -> None:
        self.registry.reset()
        self.history.clear()
        logger.debug("interpreter reset")

    def get_error(self) -> str:
        """Pop the most recent pending error message, or return ''."""
        return self._errors.popleft() if self._errors else ""

    def has_error(self) -> bool:
        return bool(self._errors)

    def get_out_module(self) -> Module:
        revision = self.registry.revision
        node = revision.get(revision.output) if revision.output else None
        return node.instance if node is not None else self._default_out

    def get_default_out_module(self) -> Module:
        return self._default_out

    # --- Statement execution ---

    def _execute(self, statement: Statement) -> None:
        if isinstance(statement, Assignment):
            with self.registry.transaction() as graph:
                build_node(graph, statement)
        elif isinstance(statement, MethodCall):
            with self.registry.transaction(deep=True) as graph:
                dispatch(graph, statement)
        elif isinstance(statement, Out):
            with self.registry.transaction() as graph:
                graph.require(statement.identifier)
                graph.output = statement.identifier
            logger.debug("output bound to %s", statement.identifier)
        elif isinstance(statement, Save):
            self._save(statement.filename)
        elif isinstance(statement, Load):
            self._load(statement.filename)
        elif isinstance(statement, Show):
            self._show(statement.width, statement.height)
        elif isinstance(statement, Exit):
            self._exit()
        else:
            raise TypeError(f"Unhandled statement {statement!r}")

    def _save(self, filename: str) -> None:
        path = self._resolve(filename)
        try:
            with open(path, "w", encoding="utf-8") as f:
                for line in self.history:
                    f.write(line + "\n")
        except OSError as e:
            raise ScriptIOError(f"Cannot write '{filename}': {e.strerror or e}") from e
        logger.debug("saved %d statements to %s", len(self.history), path)

    def _load(self, filename: str) -> None:
        if os.path.abspath(self._resolve(filename)) in self._loading:
            raise ScriptIOError(f"'{filename}' is already being loaded")
        lines = self._read_script(filename)
        if self._run_lines(filename, lines, record=False) is Status.ERROR:
            raise ScriptIOError(f"Failed to load '{filename}'")

    def _show(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise PreviewError(f"Invalid preview size {width}x{height}")
        if self.session is None:
            raise PreviewError("No preview surface is available")
        self.session.show(width, height)

    def _exit(self) -> None:
        self._stopped = True
        if self.session is not None:
            self.session.exit()

    # --- Helpers ---

    def _resolve(self, filename: str) -> str:
        return os.path.join(self.base_path, filename)

    def _read_script(self, filename: str) -> List[str]:
        try:
            with open(self._resolve(filename), "r", encoding="utf-8") as f:
                return f.read().splitlines()
        except OSError as e:
            raise ScriptIOError(f"Cannot read '{filename}': {e.strerror or e}") from e
        except UnicodeDecodeError as e:
            raise ScriptIOError(f"Cannot decode '{filename}': {e}") from e

    def _run_lines(self, filename: str, lines: Sequence[str], record: bool) -> Status:
        self._loading.append(os.path.abspath(self._resolve(filename)))
        try:
            for number, line in enumerate(lines, 1):
                if self._stopped:
                    break
                if self.run_line(line, record) is Status.ERROR:
                    logger.info("%s:%d: aborting script, registry reset", filename, number)
                    self.reset()
                    return Status.ERROR
            return Status.OK
        finally:
            self._loading.pop()

    def _push_error(self, error: Exception) -> None:
        self._errors.appendleft(str(error))
