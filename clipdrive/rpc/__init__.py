"""JSON-RPC 2.0 support for driving script invocations.

Clients send ``run`` requests with a command name and its evaluated
arguments. While the command runs, its client messages come back as
``message`` notifications; ``input`` and ``abort`` requests address the
running invocation by id.

``ScriptDispatcher`` lives in ``clipdrive.rpc.dispatcher``; it depends on the
scripting engine, which itself imports the types defined here.

Example:
    {"jsonrpc":"2.0","method":"run","params":{"command":"copy","args":["Hi"]},"id":1}
"""

from clipdrive.rpc.channel import ClientChannel, MessageSink
from clipdrive.rpc.dispatch_core import InvalidParamsError, dispatch_request
from clipdrive.rpc.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    MESSAGE_METHOD,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    InvalidRequestError,
    ParseError,
    decode_argument,
    encode_argument,
    make_error_response,
    make_message_notification,
    make_success_response,
    parse_message_notification,
    parse_request,
    parse_response,
    serialize_request,
    serialize_response,
)
from clipdrive.rpc.types import ClientMessage, MessageStatus, Request, Response

__all__ = [
    # Types
    "ClientMessage",
    "MessageStatus",
    "Request",
    "Response",
    # Channel and dispatch
    "ClientChannel",
    "InvalidParamsError",
    "MessageSink",
    "dispatch_request",
    # Protocol functions
    "decode_argument",
    "encode_argument",
    "make_error_response",
    "make_message_notification",
    "make_success_response",
    "parse_message_notification",
    "parse_request",
    "parse_response",
    "serialize_request",
    "serialize_response",
    # Error codes
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "MESSAGE_METHOD",
    "METHOD_NOT_FOUND",
    "PARSE_ERROR",
    "InvalidRequestError",
    "ParseError",
]
