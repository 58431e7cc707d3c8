"""Static command table.

Each command is described once by a ``CommandSpec``: its names, the kind of
every positional argument and the handler coroutine. Argument coercion and
arity checks happen here, before the handler runs, so handlers receive
already typed values.
"""

from __future__ import annotations

import math
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from clipdrive.core.buffer import TypedBuffer, to_int, to_string
from clipdrive.core.errors import ScriptError, ScriptErrorKind

if TYPE_CHECKING:
    from clipdrive.scripting.context import InvocationContext
    from clipdrive.scripting.engine import ScriptEngine

Handler = Callable[["ScriptEngine", "InvocationContext", list[Any]], Awaitable[Any]]


class ArgKind(Enum):
    """Expected type of a positional argument."""

    INT = "int"  # base-10 integer, no partial parse
    TEXT = "text"  # text form of any value
    BUFFER = "buffer"  # TypedBuffer kept as is, anything else as text
    ANY = "any"  # left uncoerced, handler decides
    REST = "rest"  # all remaining values, uncoerced


@dataclass(frozen=True)
class Param:
    """One positional parameter.

    Attributes:
        name: Display name used in help.
        kind: Coercion applied to the value.
        required: Whether the argument must be present.
        variadic: Whether the parameter absorbs all remaining values.
    """

    name: str
    kind: ArgKind = ArgKind.TEXT
    required: bool = True
    variadic: bool = False


@dataclass(frozen=True)
class HelpEntry:
    """A usage line shown by ``help``."""

    args: str
    description: str


@dataclass(frozen=True)
class CommandSpec:
    """Descriptor of a script command."""

    name: str
    handler: Handler
    params: tuple[Param, ...] = ()
    aliases: tuple[str, ...] = ()
    help: tuple[HelpEntry, ...] = ()
    section: int = 0

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)

    @property
    def min_args(self) -> int:
        return sum(1 for p in self.params if p.required)

    @property
    def max_args(self) -> float:
        if any(p.variadic or p.kind is ArgKind.REST for p in self.params):
            return math.inf
        return len(self.params)

    def coerce(self, args: list[Any]) -> list[Any]:
        """Check arity and convert ``args`` according to ``params``.

        Raises:
            ScriptError: INVALID_ARGUMENT_COUNT or INVALID_ARGUMENT_VALUE.
        """
        if not self.min_args <= len(args) <= self.max_args:
            raise ScriptError.argument_count()

        result: list[Any] = []
        for index, param in enumerate(self.params):
            if param.kind is ArgKind.REST:
                result.append(list(args[index:]))
                break
            if param.variadic:
                result.extend(_coerce(param, value) for value in args[index:])
                break
            if index >= len(args):
                break
            result.append(_coerce(param, args[index]))
        return result


def _coerce(param: Param, value: Any) -> Any:
    if param.kind is ArgKind.INT:
        number = to_int(value)
        if number is None:
            raise ScriptError(
                ScriptErrorKind.INVALID_ARGUMENT_VALUE,
                f'Invalid {param.name}: "{to_string(value)}" is not an integer!',
            )
        return number
    if param.kind is ArgKind.TEXT:
        return to_string(value)
    if param.kind is ArgKind.BUFFER and isinstance(value, TypedBuffer):
        return value
    if param.kind is ArgKind.BUFFER:
        return to_string(value)
    return value


@dataclass
class CommandRegistry:
    """Name -> CommandSpec lookup built once from a static list."""

    specs: list[CommandSpec] = field(default_factory=list)
    _by_name: dict[str, CommandSpec] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        for spec in self.specs:
            for name in spec.names:
                if name in self._by_name:
                    raise ValueError(f"Duplicate command name: {name}")
                self._by_name[name] = spec

    @classmethod
    def from_specs(cls, specs: Iterable[CommandSpec]) -> CommandRegistry:
        return cls(specs=list(specs))

    def get(self, name: str) -> CommandSpec | None:
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def help_lines(self, query: str | None = None) -> list[str] | None:
        """Formatted help entries.

        Args:
            query: Only entries whose command names contain this text.

        Returns:
            Lines of help text, or None if ``query`` matched nothing.
        """
        lines: list[str] = []
        section = None
        for spec in self.specs:
            if not spec.help:
                continue
            display = ", ".join(spec.names)
            if query is not None and query not in display:
                continue
            if query is None and section is not None and spec.section != section:
                lines.append("\n")
            section = spec.section
            lines.extend(format_help_entry(display, entry) for entry in spec.help)
        if query is not None and not lines:
            return None
        return lines


HELP_INDENT = 23


def format_help_entry(command: str, entry: HelpEntry) -> str:
    """Format a usage line: command and arguments padded, then description.

    Descriptions starting with a newline go below the usage line.
    """
    usage = command + entry.args
    indent_first = entry.description.startswith("\n")
    if indent_first:
        head = f"    {usage}"
        continuation = " " * (4 + 2)
    else:
        head = f"    {usage:<{HELP_INDENT}}  "
        continuation = " " * (4 + 2 + HELP_INDENT)
    return head + entry.description.replace("\n", "\n" + continuation) + "\n"
