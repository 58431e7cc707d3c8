"""Per-invocation message channel to the invoking client."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from clipdrive.core.cancel import CancellationToken
from clipdrive.rpc.types import ClientMessage, MessageStatus

logger = logging.getLogger(__name__)

MessageSink = Callable[[ClientMessage], Awaitable[None]]


class ClientChannel:
    """Outlet for client messages plus the pending input slot.

    ``read_input()`` asks the client for data with an empty
    ``READ_INPUT_REQUEST`` and blocks until ``set_input()`` supplies it.
    ``abort()`` cancels the invocation token and hands an empty payload to a
    pending read; the invocation then ends at its next suspension point.
    """

    def __init__(self, sink: MessageSink, token: CancellationToken | None = None) -> None:
        self._sink = sink
        self._token = token or CancellationToken()
        self._input: bytes | None = None
        self._input_ready = asyncio.Event()

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def has_input(self) -> bool:
        return self._input is not None

    async def send(self, payload: bytes, status: MessageStatus) -> None:
        logger.debug("Sending %s message (%d bytes)", status.name, len(payload))
        await self._sink(ClientMessage(payload=payload, status=status))

    def set_input(self, payload: bytes) -> None:
        """Supply the resumption payload, waking a pending ``read_input()``."""
        if self._input is not None:
            logger.debug("Input already set, ignoring %d bytes", len(payload))
            return
        self._input = bytes(payload)
        self._input_ready.set()

    async def read_input(self) -> bytes:
        """Return client input, requesting it first if none arrived yet.

        Raises:
            asyncio.CancelledError: If the invocation was aborted before the call.
        """
        self._token.raise_if_cancelled()
        if self._input is None:
            await self.send(b"", MessageStatus.READ_INPUT_REQUEST)
            await self._input_ready.wait()
        assert self._input is not None
        return self._input

    def abort(self) -> None:
        """Cancel the invocation and release a pending input wait."""
        if self._token.is_cancelled:
            return
        logger.info("Aborting invocation")
        self._token.cancel()
        self.set_input(b"")
