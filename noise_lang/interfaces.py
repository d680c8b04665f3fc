from abc import ABC, abstractmethod
from typing import Optional


class IOHandler(ABC):
    """Abstracts I/O so interpreters can be hosted in different frontends."""

    @abstractmethod
    def emit(self, symbol: str, message: str) -> None: ...

    @abstractmethod
    def read_input(self, prompt: str) -> Optional[str]:
        """Return the next line, or None once the input is exhausted."""


class ConsoleIO(IOHandler):
    """Console-backed I/O used by the CLI and REPL."""

    def emit(self, symbol: str, message: str) -> None:
        print(f"{symbol} {message}" if symbol else message, flush=True)

    def read_input(self, prompt: str) -> Optional[str]:
        try:
            return input(prompt)
        except EOFError:
            return None


class SessionHooks(ABC):
    """Side effects of Show and Exit that belong to whoever drives the reading loop."""

    @abstractmethod
    def show(self, width: int, height: int) -> None: ...

    @abstractmethod
    def exit(self) -> None: ...
