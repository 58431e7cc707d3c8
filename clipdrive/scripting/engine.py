"""Command dispatch engine.

``ScriptEngine.execute`` is the only place that talks to the client about
how an invocation ended: whatever the handler returns or raises is turned
into exactly one terminating client message. Handlers report failures by
raising ``ScriptError``; unexpected errors from the proxy are converted to
OPERATION_FAILED here and never escape the invocation.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from clipdrive.config.schema import Config
from clipdrive.core.buffer import TypedBuffer, from_string, to_string
from clipdrive.core.errors import ClipdriveError, ScriptError, ScriptErrorKind
from clipdrive.platform.window import PlatformAutomation
from clipdrive.proxy.base import ScriptableProxy
from clipdrive.proxy.lock import RemoteBatchLock
from clipdrive.rpc.channel import ClientChannel
from clipdrive.rpc.types import MessageStatus
from clipdrive.scripting.commands import default_registry
from clipdrive.scripting.context import InvocationContext
from clipdrive.scripting.protocol import CommandOutput
from clipdrive.scripting.registry import CommandRegistry

logger = logging.getLogger(__name__)


class ScriptEngine:
    """Runs named commands against a clipboard service proxy.

    Attributes:
        proxy: The remote clipboard-history service.
        automation: Keyboard emulation on the host OS, None where unsupported.
        config: Engine and automation settings.
        registry: Static command table.
    """

    def __init__(
        self,
        proxy: ScriptableProxy,
        *,
        automation: PlatformAutomation | None = None,
        config: Config | None = None,
        registry: CommandRegistry | None = None,
    ) -> None:
        self.proxy = proxy
        self.automation = automation
        self.config = config or Config()
        self.registry = registry or default_registry()

    def new_context(
        self,
        channel: ClientChannel,
        *,
        current_path: str | None = None,
        action_id: str = "",
    ) -> InvocationContext:
        """Fresh per-invocation state with configured defaults."""
        ctx = InvocationContext(
            channel=channel,
            input_separator=self.config.scripting.input_separator,
            action_id=action_id,
        )
        if current_path:
            ctx.current_path = current_path
        return ctx

    async def execute(
        self, name: str, args: Sequence[Any], ctx: InvocationContext
    ) -> CommandOutput:
        """Run a top-level command and send its single terminating message.

        Args:
            name: Command name or alias.
            args: Already evaluated positional values.
            ctx: State of this invocation.

        Returns:
            How the invocation ended. Aborted invocations send nothing more.
        """
        try:
            value = await self.call(name, args, ctx)
            # Woken waits return normally after abort; the client gets nothing more.
            ctx.token.raise_if_cancelled()
        except ScriptError as e:
            if ctx.token.is_cancelled:
                logger.info("Command '%s' failed after abort: %s", name, e.message)
                return CommandOutput.aborted()
            logger.info("Command '%s' failed (%s): %s", name, e.kind.value, e.message)
            return await self._fail(ctx, e.kind, e.message)
        except asyncio.CancelledError:
            if not ctx.token.is_cancelled:
                raise
            logger.info("Command '%s' aborted", name)
            return CommandOutput.aborted()
        except ClipdriveError as e:
            if ctx.token.is_cancelled:
                logger.info("Command '%s' failed after abort: %s", name, e.message)
                return CommandOutput.aborted()
            logger.warning("Command '%s' failed in proxy: %s", name, e.message)
            return await self._fail(ctx, ScriptErrorKind.OPERATION_FAILED, e.message)
        except Exception as e:
            logger.error("Unexpected error running command '%s': %s", name, e, exc_info=True)
            if ctx.token.is_cancelled:
                return CommandOutput.aborted()
            return await self._fail(
                ctx,
                ScriptErrorKind.OPERATION_FAILED,
                f"Internal error: {type(e).__name__}: {e}",
            )

        if ctx.quit_requested:
            await ctx.channel.send(ctx.finish_payload or b"", MessageStatus.FINISHED)
            return CommandOutput.finished(value)

        await ctx.channel.send(self.to_payload(value), MessageStatus.SUCCESS)
        return CommandOutput.success(value)

    async def _fail(
        self, ctx: InvocationContext, kind: ScriptErrorKind, message: str
    ) -> CommandOutput:
        payload = self.from_string(message + "\n") if message else b""
        await ctx.channel.send(payload, MessageStatus.ERROR)
        return CommandOutput.error(kind, message)

    async def call(self, name: str, args: Sequence[Any], ctx: InvocationContext) -> Any:
        """Coerce ``args`` for command ``name`` and run its handler.

        Raises:
            ScriptError: UNKNOWN_COMMAND, or whatever the handler raises.
        """
        spec = self.registry.get(name)
        if spec is None:
            raise ScriptError(ScriptErrorKind.UNKNOWN_COMMAND, f'Unknown command "{name}"!')
        values = spec.coerce(list(args))
        logger.debug("Running command '%s' with %d arguments", spec.name, len(values))
        return await spec.handler(self, ctx, values)

    async def apply_rest(self, rest: Sequence[Any], ctx: InvocationContext) -> Any:
        """Call the command named by ``rest[0]`` with the remaining values."""
        if not rest:
            return None
        name = to_string(rest[0])
        if name not in self.registry:
            raise ScriptError(
                ScriptErrorKind.UNKNOWN_COMMAND,
                f'Name "{name}" doesn\'t refer to a function.',
            )
        return await self.call(name, rest[1:], ctx)

    def lock(self, rows: int) -> RemoteBatchLock:
        return RemoteBatchLock(self.proxy, rows, self.config.scripting.batch_lock_threshold)

    def from_string(self, text: str) -> bytes:
        return from_string(text, crlf=self.config.scripting.crlf_line_endings)

    def to_payload(self, value: Any) -> bytes:
        """Bytes sent to the client for a command's return value."""
        if value is None:
            return b""
        if isinstance(value, TypedBuffer):
            return value.data
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        if isinstance(value, bool):
            return b"true\n" if value else b"false\n"
        if isinstance(value, int):
            return self.from_string(f"{value}\n")
        if isinstance(value, (list, tuple)):
            return self.from_string("".join(f"{to_string(v)}\n" for v in value))
        if isinstance(value, dict):
            return self.from_string(
                "".join(f"{key}: {to_string(v)}\n" for key, v in value.items())
            )
        return self.from_string(to_string(value))
