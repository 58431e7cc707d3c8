"""Wire types shared by the engine and the invoking client."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class MessageStatus(IntEnum):
    """Status code attached to every client message.

    The integer values are part of the wire contract with client processes.
    """

    SUCCESS = 0
    ERROR = 1
    FINISHED = 2
    READ_INPUT_REQUEST = 3


@dataclass(frozen=True)
class ClientMessage:
    """A payload sent back to the invoking client.

    Attributes:
        payload: Raw bytes; UTF-8 for text results.
        status: What the payload means to the client.
    """

    payload: bytes
    status: MessageStatus


@dataclass
class Request:
    """JSON-RPC 2.0 request.

    Attributes:
        jsonrpc: Protocol version, must be "2.0".
        method: Name of the method to invoke.
        params: Optional parameters for the method.
        id: Request identifier. None means notification (no response expected).
    """

    jsonrpc: str
    method: str
    params: dict[str, Any] | None = None
    id: str | int | None = None


@dataclass
class Response:
    """JSON-RPC 2.0 response.

    Attributes:
        jsonrpc: Protocol version, always "2.0".
        id: Request identifier from the original request.
        result: Result of the method call (mutually exclusive with error).
        error: Error object if method failed (mutually exclusive with result).
    """

    jsonrpc: str
    id: str | int | None
    result: Any | None = None
    error: dict[str, Any] | None = None
