"""Typed exception hierarchy for clipdrive."""

from __future__ import annotations

from enum import Enum

ARGUMENT_COUNT_MESSAGE = "Invalid number of arguments!"


class ClipdriveError(Exception):
    """Base class for all clipdrive errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(ClipdriveError):
    """Raised for configuration issues (missing file, invalid JSON, validation failure)."""


class LoadError(ClipdriveError):
    """Raised when a JSON file cannot be read or parsed."""


class ItemDataError(ClipdriveError):
    """Raised when an item bundle payload is truncated or malformed."""


class ProxyError(ClipdriveError):
    """Raised by proxy implementations when the clipboard service call fails."""


class ScriptErrorKind(Enum):
    """Error kinds a single command invocation can end with."""

    INVALID_ARGUMENT_COUNT = "invalid_argument_count"
    INVALID_ARGUMENT_VALUE = "invalid_argument_value"
    OPERATION_FAILED = "operation_failed"
    # Never raised; copy emulation times out silently.
    CONVERGENCE_TIMEOUT = "convergence_timeout"
    UNKNOWN_COMMAND = "unknown_command"
    COMMAND_NOT_FOUND = "command_not_found"


class ScriptError(ClipdriveError):
    """Error ending the current command invocation.

    Raised by command handlers and converted into exactly one error message
    for the client by the engine's top-level handler.

    Attributes:
        kind: Which error category the failure belongs to.
        message: Human-readable message sent back to the client.
    """

    def __init__(self, kind: ScriptErrorKind, message: str) -> None:
        self.kind = kind
        super().__init__(message)

    @classmethod
    def argument_count(cls) -> ScriptError:
        return cls(ScriptErrorKind.INVALID_ARGUMENT_COUNT, ARGUMENT_COUNT_MESSAGE)

    @classmethod
    def argument_value(cls, message: str = ARGUMENT_COUNT_MESSAGE) -> ScriptError:
        return cls(ScriptErrorKind.INVALID_ARGUMENT_VALUE, message)

    @classmethod
    def failed(cls, message: str) -> ScriptError:
        return cls(ScriptErrorKind.OPERATION_FAILED, message)
