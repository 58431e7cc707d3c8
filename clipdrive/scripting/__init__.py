"""Command dispatch engine for clipboard scripts."""

from clipdrive.scripting.commands import COMMANDS, default_registry
from clipdrive.scripting.context import InvocationContext
from clipdrive.scripting.engine import ScriptEngine
from clipdrive.scripting.protocol import CommandOutput, CommandResult
from clipdrive.scripting.registry import (
    ArgKind,
    CommandRegistry,
    CommandSpec,
    HelpEntry,
    Param,
)

__all__ = [
    "COMMANDS",
    "ArgKind",
    "CommandOutput",
    "CommandRegistry",
    "CommandResult",
    "CommandSpec",
    "HelpEntry",
    "InvocationContext",
    "Param",
    "ScriptEngine",
    "default_registry",
]
