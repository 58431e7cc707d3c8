"""Scoped advisory lock over remote row ordering."""

from __future__ import annotations

import logging
from types import TracebackType

from clipdrive.proxy.base import ScriptableProxy

logger = logging.getLogger(__name__)

DEFAULT_LOCK_THRESHOLD = 4


class RemoteBatchLock:
    """Locks the remote browser for multi-row operations.

    The lock is only taken when ``rows`` exceeds ``threshold``; smaller
    batches run unlocked. Once taken it is released on every exit path of
    the ``with`` block.

    The lock is advisory: a writer that ignores it can still reorder rows.

    Example:
        with RemoteBatchLock(proxy, len(rows)):
            for row in rows:
                proxy.browser_remove_row(row)
    """

    def __init__(
        self,
        proxy: ScriptableProxy,
        rows: int,
        threshold: int = DEFAULT_LOCK_THRESHOLD,
    ) -> None:
        self._proxy = proxy
        self._rows = rows
        self._threshold = threshold
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def __enter__(self) -> RemoteBatchLock:
        if self._rows > self._threshold:
            logger.debug("Locking remote browser for %d rows", self._rows)
            self._proxy.browser_lock()
            self._held = True
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._held:
            self._held = False
            self._proxy.browser_unlock()
            logger.debug("Unlocked remote browser")
