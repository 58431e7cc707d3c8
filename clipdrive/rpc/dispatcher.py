"""JSON-RPC method dispatcher for script invocations."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Awaitable, Callable
from typing import Any

from clipdrive.rpc.channel import ClientChannel
from clipdrive.rpc.dispatch_core import Handler, InvalidParamsError, dispatch_request
from clipdrive.rpc.protocol import decode_argument, decode_bytes, make_message_notification
from clipdrive.rpc.types import ClientMessage, Request, Response
from clipdrive.scripting.engine import ScriptEngine
from clipdrive.scripting.protocol import CommandResult

logger = logging.getLogger(__name__)

Notifier = Callable[[Request], Awaitable[None]]


class ScriptDispatcher:
    """Routes JSON-RPC requests to script invocations.

    Methods:
        run: Execute one command. Client messages are pushed through the
            notifier as ``message`` notifications while the command runs.
        input: Supply the payload a running invocation asked for.
        abort: Abort a running invocation.

    Requests for the same invocation must be dispatched concurrently with
    its ``run`` request; ``run`` only returns once the invocation ended.

    Attributes:
        should_shutdown: True once a command asked the server to stop.
    """

    def __init__(self, engine: ScriptEngine, notify: Notifier) -> None:
        """Initialize the dispatcher.

        Args:
            engine: Engine that runs the commands.
            notify: Coroutine receiving outgoing ``message`` notifications.
        """
        self._engine = engine
        self._notify = notify
        self._should_shutdown = False
        self._active: dict[str, ClientChannel] = {}
        self._handlers: dict[str, Handler] = {
            "run": self._handle_run,
            "input": self._handle_input,
            "abort": self._handle_abort,
        }

    @property
    def should_shutdown(self) -> bool:
        return self._should_shutdown

    @property
    def active_invocations(self) -> list[str]:
        return list(self._active)

    def abort_all(self) -> None:
        """Abort every running invocation, e.g. when the client went away."""
        for invocation_id, channel in list(self._active.items()):
            logger.info("Aborting invocation %s", invocation_id)
            channel.abort()

    async def dispatch(self, request: Request) -> Response | None:
        """Dispatch a request to the appropriate handler.

        Returns:
            A Response object, or None for notifications (requests without id).
        """
        return await dispatch_request(request, self._handlers, "method")

    async def _handle_run(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle the 'run' method.

        Args:
            params: Must contain 'command'. Optional 'args' (list),
                'invocation_id', 'current_path' and 'action_id'.

        Returns:
            Dict with 'invocation_id', 'result' (success, error, finished
            or aborted) and 'error_kind' (None unless result is error).

        Raises:
            InvalidParamsError: If 'command' or 'args' is malformed, or the
                invocation id is already running.
        """
        command = params.get("command")
        if not isinstance(command, str) or not command:
            raise InvalidParamsError("Missing required parameter: command")

        raw_args = params.get("args", [])
        if not isinstance(raw_args, list):
            raise InvalidParamsError(f"args must be a list, got: {type(raw_args).__name__}")
        args = [decode_argument(value) for value in raw_args]

        invocation_id = str(params.get("invocation_id") or secrets.token_hex(8))
        if invocation_id in self._active:
            raise InvalidParamsError(f"Invocation already running: {invocation_id}")

        async def sink(message: ClientMessage) -> None:
            await self._notify(make_message_notification(invocation_id, message))

        channel = ClientChannel(sink)
        ctx = self._engine.new_context(
            channel,
            current_path=params.get("current_path"),
            action_id=str(params.get("action_id") or ""),
        )

        self._active[invocation_id] = channel
        logger.debug("Invocation %s started: %s", invocation_id, command)
        try:
            output = await self._engine.execute(command, args, ctx)
        finally:
            self._active.pop(invocation_id, None)

        if output.result is CommandResult.FINISHED:
            logger.info("Invocation %s requested server shutdown", invocation_id)
            self._should_shutdown = True

        return {
            "invocation_id": invocation_id,
            "result": output.result.name.lower(),
            "error_kind": output.error_kind.value if output.error_kind else None,
        }

    def _channel(self, params: dict[str, Any]) -> tuple[str, ClientChannel | None]:
        invocation_id = params.get("invocation_id")
        if invocation_id is None or invocation_id == "":
            raise InvalidParamsError("Missing required parameter: invocation_id")
        invocation_id = str(invocation_id)
        return invocation_id, self._active.get(invocation_id)

    async def _handle_input(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle the 'input' method.

        Args:
            params: Must contain 'invocation_id'. Optional base64 'payload'.

        Returns:
            Dict with 'accepted' boolean and 'invocation_id'.
        """
        invocation_id, channel = self._channel(params)
        payload = params.get("payload", "")
        if not isinstance(payload, str):
            raise InvalidParamsError("payload must be a base64 string")
        data = decode_bytes(payload)

        if channel is None:
            return {"accepted": False, "invocation_id": invocation_id}
        channel.set_input(data)
        return {"accepted": True, "invocation_id": invocation_id}

    async def _handle_abort(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle the 'abort' method.

        Returns:
            Dict with 'cancelled' boolean and 'invocation_id'.
            If not found, includes 'reason': 'not_found_or_completed'.
        """
        invocation_id, channel = self._channel(params)
        if channel is None:
            return {
                "cancelled": False,
                "invocation_id": invocation_id,
                "reason": "not_found_or_completed",
            }
        channel.abort()
        return {"cancelled": True, "invocation_id": invocation_id}
