"""Bounded cooperative waits.

Every place where an invocation waits for something outside of its control
(the live clipboard converging, the OS clipboard sequence number changing)
goes through ``wait_until``. The wait yields to the event loop between polls
so the host stays responsive. An abort wakes a pending wait immediately.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable

from clipdrive.core.cancel import CancellationToken


async def wait_until(
    predicate: Callable[[], bool],
    *,
    interval: float,
    timeout: float,
    token: CancellationToken | None = None,
) -> bool:
    """Poll ``predicate`` every ``interval`` seconds until it holds.

    The predicate is evaluated after each sleep, never before the first one.

    Args:
        predicate: Condition to wait for.
        interval: Seconds between polls.
        timeout: Total seconds before giving up.
        token: Optional cancellation token checked after every sleep.

    Returns:
        True if the predicate became true before the deadline, False otherwise.

    Raises:
        asyncio.CancelledError: If the token is cancelled during the wait.
    """
    deadline = time.monotonic() + timeout
    while True:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return False
        await sleep(min(interval, remaining), token)
        if predicate():
            return True


async def poll_attempts(
    predicate: Callable[[], bool],
    *,
    attempts: int,
    interval: float,
    token: CancellationToken | None = None,
) -> int | None:
    """Sleep ``interval`` then check ``predicate``, at most ``attempts`` times.

    Returns:
        The 1-based attempt on which the predicate held, or None.
    """
    for attempt in range(1, attempts + 1):
        await sleep(interval, token)
        if predicate():
            return attempt
    return None


async def sleep(seconds: float, token: CancellationToken | None = None) -> None:
    """Fixed delay that ends early, raising, when the token trips."""
    if token is None:
        await asyncio.sleep(seconds)
    else:
        await token.sleep(seconds)
