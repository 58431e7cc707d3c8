"""Abort tokens for script invocations."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CancellationToken:
    """Abort flag shared by an invocation and its client channel.

    The client's ``abort`` request trips the token. Delays go through
    ``sleep()`` so an abort wakes them at once instead of after the full
    interval, and every suspension point calls ``raise_if_cancelled()``
    when it resumes.

    Example:
        async def poll():
            while not clipboard_converged():
                await token.sleep(0.25)

        # When the client aborts:
        token.cancel()
    """

    def __init__(self) -> None:
        self._aborted = asyncio.Event()
        self._listeners: list[Callable[[], None]] = []

    @property
    def is_cancelled(self) -> bool:
        return self._aborted.is_set()

    def cancel(self) -> None:
        """Trip the token. Only the first call notifies listeners."""
        if self._aborted.is_set():
            return
        self._aborted.set()
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            self._notify(listener)

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on abort, or right away if already aborted."""
        if self._aborted.is_set():
            self._notify(callback)
        else:
            self._listeners.append(callback)

    def raise_if_cancelled(self) -> None:
        """Raise CancelledError if the invocation was aborted.

        Raises:
            asyncio.CancelledError: If cancel() was called.
        """
        if self._aborted.is_set():
            raise asyncio.CancelledError("Invocation aborted")

    async def sleep(self, seconds: float) -> None:
        """Sleep up to ``seconds``, ending early when the token trips.

        Raises:
            asyncio.CancelledError: If the token is tripped by the time the
                sleep ends.
        """
        if seconds <= 0 or self._aborted.is_set():
            await asyncio.sleep(0)
        else:
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._aborted.wait(), seconds)
        self.raise_if_cancelled()

    @staticmethod
    def _notify(listener: Callable[[], None]) -> None:
        try:
            listener()
        except Exception:
            logger.warning("Abort listener failed", exc_info=True)
