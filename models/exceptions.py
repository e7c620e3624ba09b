from typing import Any, Iterable, List, Optional


class GenAIError(Exception):
    """Base class for all client errors."""


class TransportError(GenAIError):
    """The remote call failed: network error, non-2xx status or undecodable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(f"{status_code}: {message}" if status_code is not None else message)
        self.message = message
        self.status_code = status_code


class UnknownFunctionError(GenAIError):
    """A function name did not match any declared function or pending call."""

    def __init__(self, name: str, known: Iterable[str] = (), message: Optional[str] = None):
        self.name = name
        self.known: List[str] = list(known)
        if message is None:
            message = f"Unknown function '{name}'; declared functions: {self.known or 'none'}"
        super().__init__(message)


class ModeViolationError(GenAIError):
    """The response contradicts the function calling mode that was requested."""

    def __init__(self, mode: Any, function_names: Iterable[str], message: str):
        super().__init__(message)
        self.mode = mode
        self.function_names: List[str] = list(function_names)


class ArgumentError(GenAIError):
    """A function call argument does not conform to its declared schema."""

    def __init__(self, argument: str, message: str):
        super().__init__(message)
        self.argument = argument


class ArgumentTypeError(ArgumentError):
    def __init__(self, argument: str, expected: str, actual: Any):
        self.expected = expected
        self.actual = actual
        super().__init__(
            argument,
            f"Argument '{argument}' expected {expected}, got {type(actual).__name__} ({actual!r})",
        )


class MissingRequiredFieldError(ArgumentError):
    def __init__(self, argument: str):
        super().__init__(argument, f"Required argument '{argument}' is missing")


class BlockedResponseError(GenAIError):
    """The response carried no candidate content (prompt or candidate blocked)."""

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason
        super().__init__(f"Response has no candidate content (reason: {reason or 'unspecified'})")
