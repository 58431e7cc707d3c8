"""Outcome types for command invocations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from clipdrive.core.errors import ScriptErrorKind


class CommandResult(Enum):
    """How an invocation ended.

    Attributes:
        SUCCESS: Command completed; its value was sent to the client.
        ERROR: Command failed; the error message was sent to the client.
        FINISHED: Command completed and asked the server to stop.
        ABORTED: Invocation was aborted; nothing more was sent.
    """

    SUCCESS = auto()
    ERROR = auto()
    FINISHED = auto()
    ABORTED = auto()


@dataclass
class CommandOutput:
    """Result of one top-level invocation.

    Attributes:
        result: How the invocation ended.
        value: Value returned by the command handler.
        error_kind: Error category for ERROR results.
        message: Error message for ERROR results.
    """

    result: CommandResult
    value: Any = None
    error_kind: ScriptErrorKind | None = None
    message: str | None = None

    @classmethod
    def success(cls, value: Any = None) -> CommandOutput:
        return cls(result=CommandResult.SUCCESS, value=value)

    @classmethod
    def finished(cls, value: Any = None) -> CommandOutput:
        return cls(result=CommandResult.FINISHED, value=value)

    @classmethod
    def error(cls, kind: ScriptErrorKind, message: str) -> CommandOutput:
        return cls(result=CommandResult.ERROR, error_kind=kind, message=message)

    @classmethod
    def aborted(cls) -> CommandOutput:
        return cls(result=CommandResult.ABORTED)
