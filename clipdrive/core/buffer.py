"""Typed byte buffers and script value coercion.

Clipboard payloads are either text or opaque binary data (images, item
bundles). Script values arrive already evaluated: plain Python scalars or
``TypedBuffer`` instances. Binary buffers must never be round-tripped through
text, so every coercion here checks for a buffer first.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

MIME_TEXT = "text/plain"
MIME_OCTET_STREAM = "application/octet-stream"
MIME_ITEMS = "application/x-copyq-item"

_INTEGER_RE = re.compile(r"\s*[+-]?[0-9]+\s*")


@dataclass(frozen=True)
class TypedBuffer:
    """Tagged byte payload.

    Attributes:
        mime: MIME type the payload is tagged with.
        data: Raw bytes. UTF-8 text when ``is_binary`` is False.
        is_binary: True if ``data`` is opaque and must be passed through.
    """

    mime: str
    data: bytes
    is_binary: bool = True

    @classmethod
    def from_bytes(cls, data: bytes, mime: str = MIME_OCTET_STREAM) -> TypedBuffer:
        """Wrap raw bytes as a binary buffer."""
        return cls(mime=mime, data=bytes(data), is_binary=True)

    def text(self) -> str:
        """Decode the payload as UTF-8."""
        return self.data.decode("utf-8", errors="replace")

    def __len__(self) -> int:
        return len(self.data)


def from_string(value: str, *, crlf: bool = False) -> bytes:
    """UTF-8 encode ``value``, rewriting LF to CRLF when ``crlf`` is set."""
    data = value.encode("utf-8")
    if crlf:
        data = data.replace(b"\n", b"\r\n")
    return data


def to_string(value: Any) -> str:
    """Text form of a script value.

    Buffers are UTF-8 decoded; ``None`` becomes the empty string; anything
    else uses its own ``str()``.
    """
    if isinstance(value, TypedBuffer):
        return value.text()
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def to_int(value: Any) -> int | None:
    """Parse the text form of ``value`` as a base-10 integer.

    Returns None unless the whole text is an optionally signed run of
    decimal digits. Floats and booleans are never silently converted.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = to_string(value)
    if not _INTEGER_RE.fullmatch(text):
        return None
    return int(text)
