"""JSON-RPC 2.0 line protocol between clients and the script dispatcher.

Requests and responses are single JSON lines. Client messages produced while
a command runs travel as ``message`` notifications. Byte payloads and binary
script arguments are base64 encoded; a binary argument is an object
``{"mime": ..., "base64": ...}``.
"""

import base64
import binascii
import json
from typing import Any

from clipdrive.core.buffer import MIME_OCTET_STREAM, TypedBuffer
from clipdrive.core.errors import ClipdriveError
from clipdrive.rpc.types import ClientMessage, MessageStatus, Request, Response


class ParseError(ClipdriveError):
    """Raised when JSON-RPC parsing fails."""


class InvalidRequestError(ParseError):
    """Raised for well-formed JSON that is not a valid JSON-RPC request."""


# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

MESSAGE_METHOD = "message"


def parse_request(line: str) -> Request:
    """Parse a JSON line into a JSON-RPC 2.0 Request.

    Raises:
        ParseError: If the line is not JSON.
        InvalidRequestError: If the JSON is not a valid request object.
    """
    data = _load_object(line, "Request", InvalidRequestError)

    jsonrpc = data.get("jsonrpc")
    if jsonrpc != "2.0":
        raise InvalidRequestError(f"jsonrpc must be '2.0', got: {jsonrpc!r}")

    method = data.get("method")
    if not isinstance(method, str):
        raise InvalidRequestError(f"method must be a string, got: {type(method).__name__}")

    params = data.get("params")
    if params is not None and not isinstance(params, dict):
        raise InvalidRequestError(f"params must be an object, got: {type(params).__name__}")

    request_id = data.get("id")
    if request_id is not None and not isinstance(request_id, (str, int)):
        raise InvalidRequestError(
            f"id must be string, number, or null, got: {type(request_id).__name__}"
        )

    return Request(jsonrpc=jsonrpc, method=method, params=params, id=request_id)


def serialize_request(request: Request) -> str:
    """Serialize a Request to a JSON line (no trailing newline)."""
    data: dict[str, Any] = {
        "jsonrpc": request.jsonrpc,
        "method": request.method,
    }
    if request.params is not None:
        data["params"] = request.params
    if request.id is not None:
        data["id"] = request.id
    return json.dumps(data, separators=(",", ":"))


def serialize_response(response: Response) -> str:
    """Serialize a Response to a JSON line (no trailing newline)."""
    data: dict[str, Any] = {
        "jsonrpc": response.jsonrpc,
        "id": response.id,
    }
    if response.error is not None:
        data["error"] = response.error
    else:
        data["result"] = response.result
    return json.dumps(data, separators=(",", ":"))


def parse_response(line: str) -> Response:
    """Parse a JSON line into a JSON-RPC 2.0 Response.

    Raises:
        ParseError: If the JSON is invalid or required fields are missing.
    """
    data = _load_object(line, "Response")

    jsonrpc = data.get("jsonrpc")
    if jsonrpc != "2.0":
        raise ParseError(f"jsonrpc must be '2.0', got: {jsonrpc!r}")
    if "id" not in data:
        raise ParseError("Response must have 'id' field")

    has_result = "result" in data
    has_error = "error" in data
    if has_result == has_error:
        raise ParseError("Response must have exactly one of 'result' or 'error'")

    error = data.get("error")
    if error is not None:
        if not isinstance(error, dict):
            raise ParseError(f"error must be an object, got: {type(error).__name__}")
        if "code" not in error or "message" not in error:
            raise ParseError("error must have 'code' and 'message' fields")

    return Response(
        jsonrpc=jsonrpc,
        id=data.get("id"),
        result=data.get("result"),
        error=error,
    )


def make_error_response(
    request_id: str | int | None,
    code: int,
    message: str,
    data: Any = None,
) -> Response:
    """Create an error response."""
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return Response(jsonrpc="2.0", id=request_id, error=error)


def make_success_response(request_id: str | int | None, result: Any) -> Response:
    """Create a success response."""
    return Response(jsonrpc="2.0", id=request_id, result=result)


# === Client messages ===


def encode_bytes(payload: bytes) -> str:
    return base64.b64encode(payload).decode("ascii")


def decode_bytes(text: str) -> bytes:
    """Decode base64 text.

    Raises:
        ParseError: If ``text`` is not valid base64.
    """
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ParseError(f"Invalid base64 payload: {e}") from e


def make_message_notification(invocation_id: str, message: ClientMessage) -> Request:
    """Wrap a client message into a ``message`` notification."""
    return Request(
        jsonrpc="2.0",
        method=MESSAGE_METHOD,
        params={
            "invocation_id": invocation_id,
            "status": int(message.status),
            "payload": encode_bytes(message.payload),
        },
    )


def parse_message_notification(request: Request) -> tuple[str, ClientMessage]:
    """Extract ``(invocation_id, message)`` from a ``message`` notification.

    Raises:
        ParseError: If the notification is malformed.
    """
    if request.method != MESSAGE_METHOD or request.params is None:
        raise ParseError(f"Not a message notification: {request.method}")
    params = request.params
    try:
        status = MessageStatus(params["status"])
        invocation_id = str(params["invocation_id"])
        payload = decode_bytes(params.get("payload", ""))
    except (KeyError, ValueError) as e:
        raise ParseError(f"Invalid message notification: {e}") from e
    return invocation_id, ClientMessage(payload=payload, status=status)


def encode_argument(value: Any) -> Any:
    """JSON form of a script argument."""
    if isinstance(value, TypedBuffer):
        return {"mime": value.mime, "base64": encode_bytes(value.data)}
    return value


def decode_argument(value: Any) -> Any:
    """Script argument from its JSON form.

    Scalars pass through; ``{"mime", "base64"}`` objects become binary buffers.

    Raises:
        ParseError: For any other JSON structure.
    """
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict) and "base64" in value:
        mime = value.get("mime") or MIME_OCTET_STREAM
        if not isinstance(mime, str) or not isinstance(value["base64"], str):
            raise ParseError("Binary argument needs string 'mime' and 'base64' fields")
        return TypedBuffer.from_bytes(decode_bytes(value["base64"]), mime)
    raise ParseError(f"Unsupported argument type: {type(value).__name__}")


def _load_object(
    line: str, what: str, not_object: type[ParseError] = ParseError
) -> dict[str, Any]:
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise not_object(f"{what} must be a JSON object")
    return data
