from .grammar import NOISE_GRAMMAR, parse_statement
from .exceptions import (
    NoiseLangError,
    ParseError,
    DuplicateIdentifier,
    UnknownIdentifierReference,
    ArgumentCountMismatch,
    ArgumentTypeMismatch,
    UnknownMethodForKind,
    InvalidParameter,
    CyclicReference,
    ScriptIOError,
    PreviewError,
)
from .interfaces import IOHandler, ConsoleIO, SessionHooks
from .models import (
    Status,
    ArgType,
    Argument,
    Assignment,
    MethodCall,
    Out,
    Save,
    Load,
    Show,
    Exit,
    PreviewSettings,
)
from .schema import ModuleKind, SCHEMA, schema_for, validate_call
from .modules import Module, ModuleError, create_module
from .registry import ModuleNode, GraphRevision, ModuleRegistry
from .interpreter import NoiseInterpreter
from .preview import PreviewRenderer, PygletSurface
from .session import SessionController, SessionState
from .checker import Diagnostic, check_source

__all__ = [
    "NOISE_GRAMMAR",
    "parse_statement",
    "NoiseLangError",
    "ParseError",
    "DuplicateIdentifier",
    "UnknownIdentifierReference",
    "ArgumentCountMismatch",
    "ArgumentTypeMismatch",
    "UnknownMethodForKind",
    "InvalidParameter",
    "CyclicReference",
    "ScriptIOError",
    "PreviewError",
    "IOHandler",
    "ConsoleIO",
    "SessionHooks",
    "Status",
    "ArgType",
    "Argument",
    "Assignment",
    "MethodCall",
    "Out",
    "Save",
    "Load",
    "Show",
    "Exit",
    "PreviewSettings",
    "ModuleKind",
    "SCHEMA",
    "schema_for",
    "validate_call",
    "Module",
    "ModuleError",
    "create_module",
    "ModuleNode",
    "GraphRevision",
    "ModuleRegistry",
    "NoiseInterpreter",
    "PreviewRenderer",
    "PygletSurface",
    "SessionController",
    "SessionState",
    "Diagnostic",
    "check_source",
]
