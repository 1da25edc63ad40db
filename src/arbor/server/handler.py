"""ASGI handler — translates ASGI scope/messages to arbor types.

The only component that touches raw ASGI directly. Converts the scope
to a ``Request``, runs the mux dispatch against a fresh
``ResponseWriter``, and sends the result back through ASGI ``send()``.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeAlias

from arbor._internal.asgi import Receive, Scope, Send
from arbor.http.request import Request
from arbor.http.response import ResponseWriter, error, status_text
from arbor.server.sender import send_writer

logger = logging.getLogger("arbor.server")

Dispatch: TypeAlias = Callable[[ResponseWriter, Request], Awaitable[None]]


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatch: Dispatch,
) -> None:
    """Process a single HTTP request through *dispatch*.

    An exception escaping the handler chain is logged here, at the
    transport boundary. If the handler had not committed a status yet, a
    plain 500 is sent; otherwise whatever was already written goes out.
    """
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    writer = ResponseWriter()

    try:
        await dispatch(writer, request)
    except Exception:
        logger.exception("Unhandled error serving %s %s", request.method, request.path)
        if not writer.committed:
            writer = ResponseWriter()
            error(writer, status_text(500), 500)

    await send_writer(writer, send, head=request.method == "HEAD")


async def handle_lifespan(receive: Receive, send: Send) -> None:
    """Acknowledge the ASGI lifespan protocol.

    A built mux has no startup or shutdown work of its own.
    """
    while True:
        message = await receive()
        msg_type = message["type"]

        if msg_type == "lifespan.startup":
            logger.debug("lifespan startup")
            await send({"type": "lifespan.startup.complete"})
        elif msg_type == "lifespan.shutdown":
            logger.debug("lifespan shutdown")
            await send({"type": "lifespan.shutdown.complete"})
            return
