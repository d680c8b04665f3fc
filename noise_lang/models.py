import os
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Tuple


class Status(IntEnum):
    OK = 0
    ERROR = 1


class ArgType(str, Enum):
    NUMBER = "number"
    IDENTIFIER = "identifier"


@dataclass(frozen=True)
class Argument:
    text: str
    type: ArgType

    @classmethod
    def classify(cls, text: str) -> "Argument":
        if text[:1].isalpha():
            return cls(text, ArgType.IDENTIFIER)
        return cls(text, ArgType.NUMBER)

    @property
    def number(self) -> float:
        return float(self.text)

    @property
    def identifier(self) -> str:
        return self.text


@dataclass(frozen=True)
class Assignment:
    identifier: str
    kind: str
    arguments: Tuple[str, ...]


@dataclass(frozen=True)
class MethodCall:
    identifier: str
    method: str
    arguments: Tuple[Argument, ...]

    def describe(self) -> str:
        rendered = ", ".join(
            a.text if a.type is ArgType.NUMBER else f'"{a.text}"'
            for a in self.arguments
        )
        return f"{self.identifier}->{self.method}({rendered})"


@dataclass(frozen=True)
class Out:
    identifier: str


@dataclass(frozen=True)
class Save:
    filename: str


@dataclass(frozen=True)
class Load:
    filename: str


@dataclass(frozen=True)
class Show:
    width: int
    height: int


@dataclass(frozen=True)
class Exit:
    pass


@dataclass
class PreviewSettings:
    scale: float = 0.01
    z_step: float = 0.01
    fps: float = 60.0
    poll_interval: float = 0.01
    join_timeout: float = 1.0
    title: str = "libnoise"

    @classmethod
    def from_env(cls) -> "PreviewSettings":
        settings = cls()
        settings.scale = float(os.environ.get("NOISELANG_PREVIEW_SCALE", settings.scale))
        settings.z_step = float(os.environ.get("NOISELANG_Z_STEP", settings.z_step))
        settings.fps = float(os.environ.get("NOISELANG_FPS", settings.fps))
        return settings
