"""Built-in middleware: headers, request ids, access logging, recovery.

Each entry is a plain handler-to-handler transform (or a factory that
returns one) and can be passed straight to ``Router.use``.
"""

import logging
import time
import uuid

from arbor.context import ContextKey
from arbor.http.request import Request
from arbor.http.response import ResponseWriter, error, status_text
from arbor.middleware.protocol import Middleware
from arbor.routing.route import Handler

access_logger = logging.getLogger("arbor.access")
server_logger = logging.getLogger("arbor.server")

REQUEST_ID: ContextKey[str] = ContextKey("request_id")
"""Request id attached by ``request_id()``."""


def set_header(name: str, value: str) -> Middleware:
    """Set response header *name* to *value* before the wrapped handler runs.

    The handler (or an inner middleware) can still overwrite it.
    """

    def middleware(next: Handler) -> Handler:
        async def handler(w: ResponseWriter, r: Request) -> None:
            w.headers.set(name, value)
            await next(w, r)

        return handler

    return middleware


def request_id(header: str = "X-Request-ID") -> Middleware:
    """Attach a request id to the request context and echo it back.

    An inbound *header* value is reused; otherwise a uuid4 hex string is
    generated. Downstream handlers read it with ``r.value(REQUEST_ID)``.
    """

    def middleware(next: Handler) -> Handler:
        async def handler(w: ResponseWriter, r: Request) -> None:
            rid = r.headers.get(header) or uuid.uuid4().hex
            w.headers.set(header, rid)
            await next(w, r.with_value(REQUEST_ID, rid))

        return handler

    return middleware


def request_logger(logger: logging.Logger | None = None) -> Middleware:
    """Log one line per request after the wrapped handler finishes.

    Format: ``GET HTTP/1.1 /hello -> 200 (0.4ms)``. Logged at INFO on
    ``arbor.access`` unless another logger is given. Requests whose
    handler raised are logged too, then the error propagates.
    """
    target = logger or access_logger

    def middleware(next: Handler) -> Handler:
        async def handler(w: ResponseWriter, r: Request) -> None:
            start = time.perf_counter()
            try:
                await next(w, r)
            finally:
                elapsed = (time.perf_counter() - start) * 1000
                target.info(
                    "%s HTTP/%s %s -> %d (%.1fms)",
                    r.method,
                    r.http_version,
                    r.path,
                    w.status,
                    elapsed,
                )

        return handler

    return middleware


def recoverer() -> Middleware:
    """Turn an exception from the wrapped chain into a logged 500.

    Opt-in: the route tree never adds this on its own. If the handler had
    already committed a status, the partial response is left as is.
    """

    def middleware(next: Handler) -> Handler:
        async def handler(w: ResponseWriter, r: Request) -> None:
            try:
                await next(w, r)
            except Exception:
                server_logger.exception("Recovered from error in %s %s", r.method, r.path)
                if not w.committed:
                    error(w, status_text(500), 500)

        return handler

    return middleware
