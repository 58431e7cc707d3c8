"""Keyboard emulation on the host operating system."""

from clipdrive.platform.win import create_automation
from clipdrive.platform.window import (
    COPY_COMBO,
    PASTE_CTRL_V,
    PASTE_SHIFT_INSERT,
    KeyboardBackend,
    KeyCombo,
    KeyEvent,
    PlatformAutomation,
    PlatformWindow,
    build_key_press,
    paste_with_ctrl_v,
)

__all__ = [
    "COPY_COMBO",
    "PASTE_CTRL_V",
    "PASTE_SHIFT_INSERT",
    "KeyCombo",
    "KeyEvent",
    "KeyboardBackend",
    "PlatformAutomation",
    "PlatformWindow",
    "build_key_press",
    "create_automation",
    "paste_with_ctrl_v",
]
