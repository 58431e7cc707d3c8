"""Win32 keyboard backend built on user32 via ctypes."""

from __future__ import annotations

import ctypes
import logging
import sys
from collections.abc import Sequence

from clipdrive.config.schema import AutomationConfig
from clipdrive.platform.window import KeyEvent, PlatformAutomation

logger = logging.getLogger(__name__)

_IS_WINDOWS = hasattr(ctypes, "WinDLL") and sys.platform == "win32"

INPUT_KEYBOARD = 1
KEYEVENTF_KEYUP = 0x0002

HWND_TOP = 0
SWP_NOSIZE = 0x0001
SWP_NOMOVE = 0x0002
SWP_DRAWFRAME = 0x0020
SWP_SHOWWINDOW = 0x0040

if _IS_WINDOWS:
    import ctypes.wintypes

    ULONG_PTR = ctypes.wintypes.WPARAM

    class MOUSEINPUT(ctypes.Structure):
        _fields_ = [
            ("dx", ctypes.wintypes.LONG),
            ("dy", ctypes.wintypes.LONG),
            ("mouseData", ctypes.wintypes.DWORD),
            ("dwFlags", ctypes.wintypes.DWORD),
            ("time", ctypes.wintypes.DWORD),
            ("dwExtraInfo", ULONG_PTR),
        ]

    class KEYBDINPUT(ctypes.Structure):
        _fields_ = [
            ("wVk", ctypes.wintypes.WORD),
            ("wScan", ctypes.wintypes.WORD),
            ("dwFlags", ctypes.wintypes.DWORD),
            ("time", ctypes.wintypes.DWORD),
            ("dwExtraInfo", ULONG_PTR),
        ]

    class HARDWAREINPUT(ctypes.Structure):
        _fields_ = [
            ("uMsg", ctypes.wintypes.DWORD),
            ("wParamL", ctypes.wintypes.WORD),
            ("wParamH", ctypes.wintypes.WORD),
        ]

    class _INPUTUNION(ctypes.Union):
        _fields_ = [("mi", MOUSEINPUT), ("ki", KEYBDINPUT), ("hi", HARDWAREINPUT)]

    class INPUT(ctypes.Structure):
        _anonymous_ = ("u",)
        _fields_ = [("type", ctypes.wintypes.DWORD), ("u", _INPUTUNION)]


class Win32KeyboardBackend:
    """``KeyboardBackend`` talking to user32."""

    def __init__(self) -> None:
        if not _IS_WINDOWS:
            raise OSError("Win32KeyboardBackend is only available on Windows platforms.")
        self._user32 = ctypes.WinDLL("user32", use_last_error=True)
        self._declare()

    def _declare(self) -> None:
        u = self._user32
        wt = ctypes.wintypes
        u.GetForegroundWindow.restype = wt.HWND
        u.IsWindowVisible.argtypes = [wt.HWND]
        u.IsWindowVisible.restype = wt.BOOL
        u.SetForegroundWindow.argtypes = [wt.HWND]
        u.SetForegroundWindow.restype = wt.BOOL
        u.SetWindowPos.argtypes = [
            wt.HWND,
            wt.HWND,
            ctypes.c_int,
            ctypes.c_int,
            ctypes.c_int,
            ctypes.c_int,
            wt.UINT,
        ]
        u.SetWindowPos.restype = wt.BOOL
        u.GetWindowTextW.argtypes = [wt.HWND, wt.LPWSTR, ctypes.c_int]
        u.GetWindowTextW.restype = ctypes.c_int
        u.GetWindowTextLengthW.argtypes = [wt.HWND]
        u.GetWindowTextLengthW.restype = ctypes.c_int
        u.GetKeyState.argtypes = [ctypes.c_int]
        u.GetKeyState.restype = ctypes.c_short
        u.GetMessageExtraInfo.restype = wt.LPARAM
        u.SendInput.argtypes = [wt.UINT, ctypes.POINTER(INPUT), ctypes.c_int]
        u.SendInput.restype = wt.UINT
        u.GetClipboardSequenceNumber.restype = wt.DWORD

    def foreground_window(self) -> int | None:
        return self._user32.GetForegroundWindow() or None

    def is_window_visible(self, handle: int) -> bool:
        return bool(self._user32.IsWindowVisible(handle))

    def set_foreground_window(self, handle: int) -> bool:
        return bool(self._user32.SetForegroundWindow(handle))

    def bring_to_top(self, handle: int) -> None:
        self._user32.SetWindowPos(
            handle,
            HWND_TOP,
            0,
            0,
            0,
            0,
            SWP_DRAWFRAME | SWP_NOMOVE | SWP_NOSIZE | SWP_SHOWWINDOW,
        )

    def window_title(self, handle: int) -> str:
        length = self._user32.GetWindowTextLengthW(handle)
        if length <= 0:
            return ""
        buffer = ctypes.create_unicode_buffer(length + 1)
        self._user32.GetWindowTextW(handle, buffer, length + 1)
        return buffer.value

    def is_key_pressed(self, key: int) -> bool:
        return bool(self._user32.GetKeyState(key) & 0x8000)

    def send_input(self, events: Sequence[KeyEvent]) -> int:
        extra = self._user32.GetMessageExtraInfo()
        inputs = (INPUT * len(events))()
        for slot, event in zip(inputs, events):
            slot.type = INPUT_KEYBOARD
            slot.ki.wVk = event.key
            slot.ki.wScan = 0
            slot.ki.dwFlags = KEYEVENTF_KEYUP if event.key_up else 0
            slot.ki.time = 0
            slot.ki.dwExtraInfo = extra
        sent = self._user32.SendInput(len(events), inputs, ctypes.sizeof(INPUT))
        if sent != len(events):
            logger.debug("SendInput failed: error %d", ctypes.get_last_error())
        return sent

    def clipboard_sequence_number(self) -> int:
        return int(self._user32.GetClipboardSequenceNumber())


def create_automation(config: AutomationConfig | None = None) -> PlatformAutomation | None:
    """Automation for the host OS, or None where keyboard emulation is unsupported."""
    if not _IS_WINDOWS:
        logger.debug("Keyboard emulation is not available on %s", sys.platform)
        return None
    return PlatformAutomation(Win32KeyboardBackend(), config)
