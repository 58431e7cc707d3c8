"""Core types and helpers."""

from clipdrive.core.buffer import (
    MIME_ITEMS,
    MIME_OCTET_STREAM,
    MIME_TEXT,
    TypedBuffer,
    from_string,
    to_int,
    to_string,
)
from clipdrive.core.cancel import CancellationToken
from clipdrive.core.errors import (
    ClipdriveError,
    ConfigError,
    ItemDataError,
    LoadError,
    ProxyError,
    ScriptError,
    ScriptErrorKind,
)
from clipdrive.core.itemdata import deserialize_data, serialize_data

__all__ = [
    "CancellationToken",
    "ClipdriveError",
    "ConfigError",
    "ItemDataError",
    "LoadError",
    "MIME_ITEMS",
    "MIME_OCTET_STREAM",
    "MIME_TEXT",
    "ProxyError",
    "ScriptError",
    "ScriptErrorKind",
    "TypedBuffer",
    "deserialize_data",
    "from_string",
    "serialize_data",
    "to_int",
    "to_string",
]
