"""Access to the remote clipboard-history service."""

from clipdrive.proxy.base import (
    ActionCommand,
    ClipboardMapping,
    ClipboardMode,
    ScriptableProxy,
)
from clipdrive.proxy.lock import DEFAULT_LOCK_THRESHOLD, RemoteBatchLock
from clipdrive.proxy.memory import DEFAULT_TAB, MemoryProxy

__all__ = [
    "ActionCommand",
    "ClipboardMapping",
    "ClipboardMode",
    "DEFAULT_LOCK_THRESHOLD",
    "DEFAULT_TAB",
    "MemoryProxy",
    "RemoteBatchLock",
    "ScriptableProxy",
]
