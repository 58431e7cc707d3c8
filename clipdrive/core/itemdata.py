"""Item bundle serialization.

An item bundle packs several MIME payloads of one clipboard item into a
single byte string: a sequence of ``(mime length, mime, data length, data)``
records with big-endian unsigned 32-bit lengths, concatenated in order.
"""

from __future__ import annotations

import struct

from clipdrive.core.errors import ItemDataError

_LENGTH = struct.Struct(">I")


def serialize_data(data: dict[str, bytes]) -> bytes:
    """Serialize a MIME -> bytes mapping into an item bundle."""
    parts: list[bytes] = []
    for mime, payload in data.items():
        mime_bytes = mime.encode("utf-8")
        parts.append(_LENGTH.pack(len(mime_bytes)))
        parts.append(mime_bytes)
        parts.append(_LENGTH.pack(len(payload)))
        parts.append(bytes(payload))
    return b"".join(parts)


def deserialize_data(raw: bytes) -> dict[str, bytes]:
    """Decode an item bundle, strictly in record order.

    Raises:
        ItemDataError: If a record is truncated or a MIME is not valid UTF-8.
    """
    result: dict[str, bytes] = {}
    offset = 0
    size = len(raw)
    while offset < size:
        mime_bytes, offset = _read_field(raw, offset, "MIME")
        payload, offset = _read_field(raw, offset, "data")
        try:
            mime = mime_bytes.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ItemDataError(f"Invalid MIME type in item data at offset {offset}") from e
        result[mime] = payload
    return result


def _read_field(raw: bytes, offset: int, what: str) -> tuple[bytes, int]:
    if offset + _LENGTH.size > len(raw):
        raise ItemDataError(f"Truncated item data: missing {what} length")
    (length,) = _LENGTH.unpack_from(raw, offset)
    offset += _LENGTH.size
    end = offset + length
    if end > len(raw):
        raise ItemDataError(f"Truncated item data: {what} needs {length} bytes")
    return raw[offset:end], end
