class NoiseLangError(Exception):
    """Base exception for the interpreter."""

    pass


class ParseError(NoiseLangError):
    """Raised when a line matches none of the statement grammars."""

    pass


class DuplicateIdentifier(NoiseLangError):
    pass


class UnknownIdentifierReference(NoiseLangError):
    pass


class ArgumentCountMismatch(NoiseLangError):
    pass


class ArgumentTypeMismatch(NoiseLangError):
    pass


class UnknownMethodForKind(NoiseLangError):
    pass


class InvalidParameter(NoiseLangError):
    """Raised when the module library rejects a value."""

    pass


class CyclicReference(NoiseLangError):
    pass


class ScriptIOError(NoiseLangError):
    pass


class PreviewError(NoiseLangError):
    pass
