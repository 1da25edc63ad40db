"""The mutable response sink handed to every handler.

A handler produces its response only through side effects on a
``ResponseWriter``: it sets headers, commits a status, and writes body
bytes. Middleware sees the same writer, so it can set headers before
calling the handler it wraps, or answer on its own and never call it.

Commit rules:

- The first ``write_header()`` commits the status and snapshots the
  headers. The first ``write()`` commits ``200`` if nothing was
  committed yet.
- After commit, header edits are no longer sent and further
  ``write_header()`` calls are ignored with a warning.
"""

import json as json_module
import logging
from typing import Any

from arbor.http.cookies import SetCookie
from arbor.http.headers import MutableHeaders

logger = logging.getLogger("arbor.http")

STATUS_PHRASES: dict[int, str] = {
    200: "OK",
    201: "Created",
    204: "No Content",
    301: "Moved Permanently",
    302: "Found",
    303: "See Other",
    304: "Not Modified",
    307: "Temporary Redirect",
    308: "Permanent Redirect",
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    429: "Too Many Requests",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
}


def status_text(status: int) -> str:
    """Reason phrase for *status*, or an empty string if unknown."""
    return STATUS_PHRASES.get(status, "")


class ResponseWriter:
    """Buffered response sink for a single request.

    Not thread-safe; a writer belongs to exactly one request.
    """

    __slots__ = ("_body", "_committed_headers", "_status", "headers")

    def __init__(self) -> None:
        self.headers = MutableHeaders()
        self._status: int | None = None
        self._committed_headers: tuple[tuple[str, str], ...] = ()
        self._body = bytearray()

    def __repr__(self) -> str:
        return f"<ResponseWriter status={self.status} bytes={len(self._body)}>"

    # -- Writing --

    def write_header(self, status: int) -> None:
        """Commit the response status and freeze the header set."""
        if self._status is not None:
            logger.warning(
                "superfluous write_header(%d) call; status %d already committed",
                status,
                self._status,
            )
            return
        self._status = status
        self._committed_headers = self.headers.items()

    def write(self, data: str | bytes) -> int:
        """Append *data* to the body, committing ``200`` first if needed.

        Returns the number of bytes written.
        """
        if self._status is None:
            self.write_header(200)
        chunk = data.encode("utf-8") if isinstance(data, str) else data
        self._body.extend(chunk)
        return len(chunk)

    def set_cookie(
        self,
        name: str,
        value: str,
        *,
        max_age: int | None = None,
        path: str = "/",
        domain: str | None = None,
        secure: bool = False,
        httponly: bool = True,
        samesite: str = "lax",
    ) -> None:
        """Add a ``Set-Cookie`` header."""
        cookie = SetCookie(
            name=name,
            value=value,
            max_age=max_age,
            path=path,
            domain=domain,
            secure=secure,
            httponly=httponly,
            samesite=samesite,
        )
        self.headers.add("Set-Cookie", cookie.to_header_value())

    # -- State --

    @property
    def committed(self) -> bool:
        """True once a status has been committed."""
        return self._status is not None

    @property
    def status(self) -> int:
        """The committed status, or ``200`` if nothing was committed yet."""
        return 200 if self._status is None else self._status

    @property
    def sent_headers(self) -> tuple[tuple[str, str], ...]:
        """Headers as they will go on the wire.

        The snapshot taken at commit time, or the current headers if the
        handler never committed.
        """
        if self._status is None:
            return self.headers.items()
        return self._committed_headers

    @property
    def body(self) -> bytes:
        return bytes(self._body)


# -- Helpers --


def error(w: ResponseWriter, message: str, status: int) -> None:
    """Reply with a plain-text error *message* and *status*.

    Any ``Content-Length`` a handler set is dropped; the message is
    followed by a newline.
    """
    w.headers.delete("Content-Length")
    w.headers.set("Content-Type", "text/plain; charset=utf-8")
    w.headers.set("X-Content-Type-Options", "nosniff")
    w.write_header(status)
    w.write(f"{message}\n")


def not_found(w: ResponseWriter, r: Any = None) -> None:  # noqa: ARG001
    """Reply with ``404 page not found``."""
    error(w, "404 page not found", 404)


def redirect(w: ResponseWriter, r: Any, url: str, status: int = 302) -> None:  # noqa: ARG001
    """Reply with a redirect to *url*."""
    w.headers.set("Location", url)
    w.write_header(status)


def write_json(w: ResponseWriter, data: Any, status: int = 200) -> None:
    """Serialize *data* as JSON and write it with *status*."""
    w.headers.set("Content-Type", "application/json")
    w.write_header(status)
    w.write(json_module.dumps(data, default=str))
