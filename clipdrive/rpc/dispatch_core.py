"""Method routing shared by the script dispatcher and its tests.

``dispatch_request()`` maps one parsed request onto a handler coroutine and
turns the outcome into a JSON-RPC response. Notifications (no ``id``) run
their handler but never get a response, not even an error.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from typing import Any

from clipdrive.core.errors import ClipdriveError
from clipdrive.rpc.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    ParseError,
    make_error_response,
    make_success_response,
)
from clipdrive.rpc.types import Request, Response

logger = logging.getLogger(__name__)

Handler = Callable[[dict[str, Any]], Coroutine[Any, Any, dict[str, Any]]]


class InvalidParamsError(ClipdriveError):
    """Raised by handlers when request parameters are missing or malformed."""


def _reply_error(request: Request, code: int, message: str) -> Response | None:
    if request.id is None:
        logger.debug("Dropping error for notification %s: %s", request.method, message)
        return None
    return make_error_response(request.id, code, message)


async def dispatch_request(
    request: Request,
    handlers: dict[str, Handler],
    log_context: str,
) -> Response | None:
    """Run the handler for ``request.method``.

    Handler failures map to error codes: bad parameters (including
    undecodable payloads) to INVALID_PARAMS, known clipdrive errors to
    INTERNAL_ERROR with their message, anything else to INTERNAL_ERROR
    with the exception type.

    Args:
        request: The parsed JSON-RPC request.
        handlers: Mapping of method names to handler coroutines.
        log_context: What kind of request this is, for log messages.

    Returns:
        A Response object, or None for notifications.
    """
    handler = handlers.get(request.method)
    if handler is None:
        return _reply_error(request, METHOD_NOT_FOUND, f"Method not found: {request.method}")

    try:
        result = await handler(request.params or {})
    except (InvalidParamsError, ParseError) as e:
        return _reply_error(request, INVALID_PARAMS, e.message)
    except ClipdriveError as e:
        logger.warning("%s '%s' failed: %s", log_context, request.method, e.message)
        return _reply_error(request, INTERNAL_ERROR, e.message)
    except Exception as e:
        logger.error(
            "Unexpected error dispatching %s '%s': %s",
            log_context,
            request.method,
            e,
            exc_info=True,
        )
        return _reply_error(request, INTERNAL_ERROR, f"Internal error: {type(e).__name__}: {e}")

    if request.id is None:
        return None
    return make_success_response(request.id, result)
