from dataclasses import dataclass
from typing import List, Optional

from .interfaces import IOHandler
from .interpreter import NoiseInterpreter
from .models import Status


@dataclass(frozen=True)
class Diagnostic:
    line: int
    message: str


class _SilentIO(IOHandler):
    def emit(self, symbol: str, message: str) -> None:
        pass

    def read_input(self, prompt: str) -> Optional[str]:
        return None


class _CheckingInterpreter(NoiseInterpreter):
    """Validates Save, Show and Exit without writing files or opening windows.

    Load still reads the named script, so its nodes are known to the lines
    that follow it.
    """

    def _save(self, filename: str) -> None:
        pass

    def _show(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            super()._show(width, height)

    def _exit(self) -> None:
        pass


def check_source(text: str, base_path: Optional[str] = None) -> List[Diagnostic]:
    """Run every line of a script in isolation and collect its failures.

    Unlike ``NoiseInterpreter.run`` the check carries on after an error, so
    later lines are judged against the graph built by the lines that passed.
    """
    interpreter = _CheckingInterpreter(base_path=base_path, io_handler=_SilentIO())
    diagnostics: List[Diagnostic] = []
    for number, line in enumerate(text.splitlines()):
        if interpreter.run_line(line, record=False) is Status.ERROR:
            diagnostics.append(Diagnostic(number, interpreter.get_error()))
            # A failed load also queues the cause from inside the loaded script.
            while interpreter.has_error():
                interpreter.get_error()
    return diagnostics
