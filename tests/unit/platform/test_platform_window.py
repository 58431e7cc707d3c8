"""Tests for keyboard emulation logic against a fake OS backend."""

import sys
from asyncio import CancelledError
from collections.abc import Sequence

import pytest

from clipdrive.config.schema import AutomationConfig
from clipdrive.core.cancel import CancellationToken
from clipdrive.platform import (
    COPY_COMBO,
    PASTE_CTRL_V,
    PASTE_SHIFT_INSERT,
    KeyCombo,
    KeyEvent,
    PlatformAutomation,
    PlatformWindow,
    build_key_press,
    create_automation,
    paste_with_ctrl_v,
)
from clipdrive.platform.window import (
    VK_C,
    VK_INSERT,
    VK_LCONTROL,
    VK_LSHIFT,
    VK_RMENU,
    VK_RSHIFT,
    VK_V,
)

FAST = AutomationConfig(
    raise_delay_ms=0,
    paste_settle_ms=0,
    copy_timeout_ms=50,
    copy_poll_interval_ms=1,
)


class FakeBackend:
    """In-memory stand-in for the OS keyboard and window primitives."""

    def __init__(self, title: str = "Untitled - Notepad") -> None:
        self.foreground: int | None = 42
        self.visible = True
        self.accepts_focus = True
        self.title = title
        self.held: set[int] = set()
        self.batches: list[list[KeyEvent]] = []
        self.raised: list[int] = []
        self.sequence = 1
        self.copy_changes_clipboard = True
        self.drop_events = 0

    def foreground_window(self) -> int | None:
        return self.foreground

    def is_window_visible(self, handle: int) -> bool:
        return self.visible

    def set_foreground_window(self, handle: int) -> bool:
        return self.accepts_focus

    def bring_to_top(self, handle: int) -> None:
        self.raised.append(handle)

    def window_title(self, handle: int) -> str:
        return self.title

    def is_key_pressed(self, key: int) -> bool:
        return key in self.held

    def send_input(self, events: Sequence[KeyEvent]) -> int:
        self.batches.append(list(events))
        if self.copy_changes_clipboard and KeyEvent(VK_C) in events:
            self.sequence += 1
        return len(events) - self.drop_events

    def clipboard_sequence_number(self) -> int:
        return self.sequence


def combo_of(batch: list[KeyEvent]) -> KeyCombo:
    """The combo sent in a batch built with no modifiers held."""
    assert len(batch) == 4
    return KeyCombo(batch[0].key, batch[1].key)


class TestBuildKeyPress:
    def test_no_held_modifiers(self):
        assert build_key_press(COPY_COMBO, []) == [
            KeyEvent(VK_LCONTROL),
            KeyEvent(VK_C),
            KeyEvent(VK_C, key_up=True),
            KeyEvent(VK_LCONTROL, key_up=True),
        ]

    def test_held_modifiers_released_then_restored(self):
        events = build_key_press(PASTE_CTRL_V, [VK_RSHIFT, VK_RMENU])
        assert events == [
            KeyEvent(VK_RSHIFT, key_up=True),
            KeyEvent(VK_RMENU, key_up=True),
            KeyEvent(VK_LCONTROL),
            KeyEvent(VK_V),
            KeyEvent(VK_V, key_up=True),
            KeyEvent(VK_LCONTROL, key_up=True),
            KeyEvent(VK_RSHIFT),
            KeyEvent(VK_RMENU),
        ]

    def test_modifier_state_after_batch_matches_physical_state(self):
        held = [VK_LSHIFT, VK_RMENU]
        state: set[int] = set(held)
        for event in build_key_press(PASTE_SHIFT_INSERT, held):
            if event.key_up:
                state.discard(event.key)
            else:
                state.add(event.key)
        assert state == set(held)


class TestPasteWithCtrlV:
    def test_empty_pattern_never_matches(self):
        assert paste_with_ctrl_v("anything", "") is False

    def test_search_semantics(self):
        assert paste_with_ctrl_v("Untitled - Notepad", "Notepad") is True
        assert paste_with_ctrl_v("Untitled - Notepad", "^Notepad") is False

    def test_alternatives(self):
        assert paste_with_ctrl_v("PuTTY", "Notepad|PuTTY") is True


class TestRaiseWindow:
    def test_hidden_window(self):
        backend = FakeBackend()
        backend.visible = False
        assert PlatformWindow(1, backend, FAST).raise_window() is False
        assert backend.raised == []

    def test_focus_refused(self):
        backend = FakeBackend()
        backend.accepts_focus = False
        assert PlatformWindow(1, backend, FAST).raise_window() is False

    def test_raised_to_top(self):
        backend = FakeBackend()
        assert PlatformWindow(7, backend, FAST).raise_window() is True
        assert backend.raised == [7]


class TestSendKeyPress:
    def test_reads_held_modifiers_fresh(self):
        backend = FakeBackend()
        window = PlatformWindow(1, backend, FAST)

        window.send_key_press(VK_LCONTROL, VK_V)
        backend.held = {VK_RSHIFT}
        window.send_key_press(VK_LCONTROL, VK_V)

        assert len(backend.batches[0]) == 4
        assert backend.batches[1][0] == KeyEvent(VK_RSHIFT, key_up=True)
        assert backend.batches[1][-1] == KeyEvent(VK_RSHIFT)

    def test_short_injection_is_logged(self, caplog):
        backend = FakeBackend()
        backend.drop_events = 2
        with caplog.at_level("WARNING"):
            PlatformWindow(1, backend, FAST).send_key_press(VK_LCONTROL, VK_V)
        assert "Only 2 of 4 key events" in caplog.text


class TestPasteClipboard:
    @pytest.mark.asyncio
    async def test_matching_title_uses_ctrl_v(self):
        backend = FakeBackend(title="Untitled - Notepad")
        config = FAST.model_copy(update={"paste_with_ctrl_v_windows": "Notepad"})

        await PlatformWindow(1, backend, config).paste_clipboard()

        assert combo_of(backend.batches[0]) == PASTE_CTRL_V

    @pytest.mark.asyncio
    async def test_notepad_end_to_end(self):
        backend = FakeBackend(title="Notepad — untitled")
        config = FAST.model_copy(update={"paste_with_ctrl_v_windows": "Notepad"})
        automation = PlatformAutomation(backend, config)

        window = automation.current_window()
        assert window is not None
        await window.paste_clipboard()

        assert backend.raised == [42]
        assert combo_of(backend.batches[0]) == PASTE_CTRL_V

    @pytest.mark.asyncio
    async def test_other_title_uses_shift_insert(self):
        backend = FakeBackend(title="Terminal")
        config = FAST.model_copy(update={"paste_with_ctrl_v_windows": "Notepad"})

        await PlatformWindow(1, backend, config).paste_clipboard()

        assert combo_of(backend.batches[0]) == KeyCombo(VK_LSHIFT, VK_INSERT)

    @pytest.mark.asyncio
    async def test_held_shift_released_around_ctrl_v(self):
        backend = FakeBackend()
        backend.held = {VK_LSHIFT}
        config = FAST.model_copy(update={"paste_with_ctrl_v_windows": "."})

        await PlatformWindow(1, backend, config).paste_clipboard()

        batch = backend.batches[0]
        assert batch[0] == KeyEvent(VK_LSHIFT, key_up=True)
        assert batch[-1] == KeyEvent(VK_LSHIFT)
        assert KeyEvent(VK_V) in batch

    @pytest.mark.asyncio
    async def test_unraisable_window_gets_no_keys(self):
        backend = FakeBackend()
        backend.visible = False

        await PlatformWindow(1, backend, FAST).paste_clipboard()

        assert backend.batches == []


class TestCopy:
    @pytest.mark.asyncio
    async def test_waits_for_sequence_change(self):
        backend = FakeBackend()

        await PlatformWindow(1, backend, FAST).copy()

        assert backend.sequence == 2
        assert combo_of(backend.batches[0]) == COPY_COMBO

    @pytest.mark.asyncio
    async def test_timeout_is_silent(self):
        backend = FakeBackend()
        backend.copy_changes_clipboard = False

        await PlatformWindow(1, backend, FAST).copy()

        assert len(backend.batches) == 1

    @pytest.mark.asyncio
    async def test_skipped_when_window_cannot_be_raised(self):
        backend = FakeBackend()
        backend.accepts_focus = False

        await PlatformWindow(1, backend, FAST).copy()

        assert backend.batches == []

    @pytest.mark.asyncio
    async def test_cancellation(self):
        backend = FakeBackend()
        backend.copy_changes_clipboard = False
        token = CancellationToken()
        token.cancel()

        with pytest.raises(CancelledError):
            await PlatformWindow(1, backend, FAST).copy(token)


class TestPlatformAutomation:
    def test_current_window(self):
        backend = FakeBackend(title="Editor")
        window = PlatformAutomation(backend, FAST).current_window()
        assert window is not None
        assert window.handle == 42
        assert window.title == "Editor"

    def test_no_foreground_window(self):
        backend = FakeBackend()
        backend.foreground = None
        assert PlatformAutomation(backend, FAST).current_window() is None

    @pytest.mark.unix_only
    def test_create_automation_unavailable_off_windows(self):
        assert create_automation() is None

    @pytest.mark.windows
    def test_create_automation_on_windows(self):
        assert create_automation(FAST) is not None


@pytest.mark.unix_only
def test_win32_backend_refuses_non_windows():
    from clipdrive.platform.win import Win32KeyboardBackend

    assert sys.platform != "win32"
    with pytest.raises(OSError):
        Win32KeyboardBackend()
