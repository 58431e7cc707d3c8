"""JSON-line transport for script dispatchers.

One client connection carries newline-terminated JSON-RPC messages in both
directions. Every request line is dispatched in its own task so ``input``
and ``abort`` can reach an invocation whose ``run`` request is still
pending. Output lines (responses and ``message`` notifications) are written
one at a time.
"""

from __future__ import annotations

import asyncio
import logging

from clipdrive.rpc.dispatcher import ScriptDispatcher
from clipdrive.rpc.protocol import (
    INVALID_REQUEST,
    PARSE_ERROR,
    InvalidRequestError,
    ParseError,
    make_error_response,
    parse_request,
    serialize_request,
    serialize_response,
)
from clipdrive.rpc.types import Request, Response
from clipdrive.scripting.engine import ScriptEngine

logger = logging.getLogger(__name__)


async def handle_line(dispatcher: ScriptDispatcher, line: str) -> Response | None:
    """Parse and dispatch one request line.

    Returns:
        The response to write back, or None for notifications.
    """
    try:
        request = parse_request(line)
    except InvalidRequestError as e:
        logger.debug("Rejecting invalid request: %s", e.message)
        return make_error_response(None, INVALID_REQUEST, e.message)
    except ParseError as e:
        logger.debug("Rejecting malformed request line: %s", e.message)
        return make_error_response(None, PARSE_ERROR, e.message)
    return await dispatcher.dispatch(request)


async def serve_stream(
    engine: ScriptEngine,
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
) -> ScriptDispatcher:
    """Serve one client connection until EOF or a command stops the server.

    Invocations still running when the client disconnects are aborted.

    Args:
        engine: Engine running the commands.
        reader: Incoming request lines.
        writer: Outgoing response and notification lines.

    Returns:
        The connection's dispatcher, so callers can inspect ``should_shutdown``.
    """
    write_lock = asyncio.Lock()
    stop = asyncio.Event()
    tasks: set[asyncio.Task[None]] = set()

    async def write_line(text: str) -> None:
        async with write_lock:
            writer.write(text.encode("utf-8") + b"\n")
            await writer.drain()

    async def notify(request: Request) -> None:
        await write_line(serialize_request(request))

    dispatcher = ScriptDispatcher(engine, notify)

    async def handle(line: str) -> None:
        response = await handle_line(dispatcher, line)
        if response is not None:
            await write_line(serialize_response(response))
        if dispatcher.should_shutdown:
            stop.set()

    stop_wait = asyncio.create_task(stop.wait())
    try:
        while not stop.is_set():
            read = asyncio.create_task(reader.readline())
            await asyncio.wait({read, stop_wait}, return_when=asyncio.FIRST_COMPLETED)
            if not read.done():
                read.cancel()
                break
            try:
                raw = read.result()
            except (asyncio.LimitOverrunError, ValueError) as e:
                logger.warning("Request line too long, closing connection: %s", e)
                await write_line(
                    serialize_response(make_error_response(None, PARSE_ERROR, "Line too long"))
                )
                break
            if not raw:
                logger.debug("Client closed the connection")
                break

            line = raw.decode("utf-8", errors="replace").strip()
            if not line:
                continue
            task = asyncio.create_task(handle(line))
            tasks.add(task)
            task.add_done_callback(tasks.discard)
    finally:
        stop_wait.cancel()
        dispatcher.abort_all()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        try:
            writer.close()
            await writer.wait_closed()
        except Exception as close_err:
            logger.debug("Connection close failed (already closed?): %s", close_err)

    return dispatcher
