"""Keyboard emulation against foreground windows.

The logic here is OS independent: it decides which key combo to send, how
to leave the user's physically held modifiers untouched, and how long to
wait for the clipboard to react. The OS primitives (raising a window,
reading key state, enqueueing input events) come from a ``KeyboardBackend``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from clipdrive.config.schema import AutomationConfig
from clipdrive.core import wait
from clipdrive.core.cancel import CancellationToken

logger = logging.getLogger(__name__)

# Windows virtual key codes
VK_INSERT = 0x2D
VK_C = 0x43
VK_V = 0x56
VK_MENU = 0x12
VK_LSHIFT = 0xA0
VK_RSHIFT = 0xA1
VK_LCONTROL = 0xA2
VK_RCONTROL = 0xA3
VK_LMENU = 0xA4
VK_RMENU = 0xA5

# Modifiers released before and restored after an injected combo.
MODIFIER_KEYS: tuple[int, ...] = (
    VK_LCONTROL,
    VK_RCONTROL,
    VK_LSHIFT,
    VK_RSHIFT,
    VK_LMENU,
    VK_RMENU,
    VK_MENU,
)


@dataclass(frozen=True)
class KeyCombo:
    """A modifier plus key, both as virtual key codes."""

    modifier: int
    key: int


@dataclass(frozen=True)
class KeyEvent:
    """A single synthetic key transition."""

    key: int
    key_up: bool = False


COPY_COMBO = KeyCombo(VK_LCONTROL, VK_C)
PASTE_CTRL_V = KeyCombo(VK_LCONTROL, VK_V)
PASTE_SHIFT_INSERT = KeyCombo(VK_LSHIFT, VK_INSERT)


class KeyboardBackend(Protocol):
    """OS primitives needed for keyboard emulation."""

    def foreground_window(self) -> int | None: ...

    def is_window_visible(self, handle: int) -> bool: ...

    def set_foreground_window(self, handle: int) -> bool: ...

    def bring_to_top(self, handle: int) -> None: ...

    def window_title(self, handle: int) -> str: ...

    def is_key_pressed(self, key: int) -> bool: ...

    def send_input(self, events: Sequence[KeyEvent]) -> int:
        """Enqueue all events as one batch. Returns the number accepted."""
        ...

    def clipboard_sequence_number(self) -> int: ...


def build_key_press(combo: KeyCombo, held: Iterable[int]) -> list[KeyEvent]:
    """Event batch sending ``combo`` cleanly while modifiers in ``held`` are down.

    Held modifiers are released first so only the intended combo reaches the
    window, then pressed again so the keyboard state matches what the user is
    physically holding.
    """
    held = list(held)
    events = [KeyEvent(mod, key_up=True) for mod in held]
    events += [
        KeyEvent(combo.modifier),
        KeyEvent(combo.key),
        KeyEvent(combo.key, key_up=True),
        KeyEvent(combo.modifier, key_up=True),
    ]
    events += [KeyEvent(mod) for mod in held]
    return events


def paste_with_ctrl_v(title: str, pattern: str) -> bool:
    """True if windows with ``title`` should receive Ctrl+V instead of Shift+Insert."""
    return bool(pattern) and re.search(pattern, title) is not None


class PlatformWindow:
    """A top-level window that can receive emulated copy and paste.

    No state survives between calls; key state and the clipboard sequence
    number are read fresh from the backend every time.
    """

    def __init__(
        self,
        handle: int,
        backend: KeyboardBackend,
        config: AutomationConfig | None = None,
    ) -> None:
        self._handle = handle
        self._backend = backend
        self._config = config or AutomationConfig()

    @property
    def handle(self) -> int:
        return self._handle

    @property
    def title(self) -> str:
        return self._backend.window_title(self._handle)

    def raise_window(self) -> bool:
        """Bring the window to the foreground and top of the Z-order.

        Returns:
            False if the window is hidden or refused focus.
        """
        if not self._backend.is_window_visible(self._handle):
            return False
        if not self._backend.set_foreground_window(self._handle):
            return False
        self._backend.bring_to_top(self._handle)
        return True

    def held_modifiers(self) -> list[int]:
        return [mod for mod in MODIFIER_KEYS if self._backend.is_key_pressed(mod)]

    def send_key_press(self, modifier: int, key: int) -> None:
        """Inject ``modifier+key`` as one batch, preserving held modifiers."""
        events = build_key_press(KeyCombo(modifier, key), self.held_modifiers())
        sent = self._backend.send_input(events)
        if sent != len(events):
            logger.warning(
                "Only %d of %d key events were injected into window %s",
                sent,
                len(events),
                self._handle,
            )

    async def _press(self, combo: KeyCombo, token: CancellationToken | None) -> bool:
        if not self.raise_window():
            logger.debug("Window %s cannot be raised, skipping key press", self._handle)
            return False
        await wait.sleep(self._config.raise_delay_ms / 1000, token)
        self.send_key_press(combo.modifier, combo.key)
        return True

    async def copy(self, token: CancellationToken | None = None) -> None:
        """Send Ctrl+C and wait for the clipboard to change.

        The wait ends silently after ``copy_timeout_ms``; copy is advisory.
        """
        sequence = self._backend.clipboard_sequence_number()
        if not await self._press(COPY_COMBO, token):
            return

        changed = await wait.wait_until(
            lambda: self._backend.clipboard_sequence_number() != sequence,
            interval=self._config.copy_poll_interval_ms / 1000,
            timeout=self._config.copy_timeout_ms / 1000,
            token=token,
        )
        if not changed:
            logger.debug("Clipboard did not change after copy in window %s", self._handle)

    async def paste_clipboard(self, token: CancellationToken | None = None) -> None:
        """Send the paste combo the window accepts, then let it settle."""
        if paste_with_ctrl_v(self.title, self._config.paste_with_ctrl_v_windows):
            combo = PASTE_CTRL_V
        else:
            combo = PASTE_SHIFT_INSERT
        await self._press(combo, token)

        # The paste is not observable synchronously.
        await wait.sleep(self._config.paste_settle_ms / 1000, token)


class PlatformAutomation:
    """Entry point to the windows of the host OS."""

    def __init__(
        self, backend: KeyboardBackend, config: AutomationConfig | None = None
    ) -> None:
        self._backend = backend
        self._config = config or AutomationConfig()

    def current_window(self) -> PlatformWindow | None:
        handle = self._backend.foreground_window()
        if not handle:
            return None
        return PlatformWindow(handle, self._backend, self._config)
