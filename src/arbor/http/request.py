"""Immutable HTTP request.

Frozen metadata with async body access. Middleware never edits a
request in place: it derives a new one (``with_value``) and passes that
to the next handler.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, TypeVar, overload

from arbor._internal.asgi import Receive
from arbor.context import EMPTY_CONTEXT, MISSING, ContextKey, RequestContext
from arbor.http.cookies import parse_cookies
from arbor.http.headers import Headers
from arbor.http.query import QueryParams

T = TypeVar("T")
D = TypeVar("D")


async def _empty_receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.text()``, ``.json()``.
    ``path_params`` is filled in by the ``Mux`` after matching; typed
    values (``{id:int}``) are already converted.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    path_params: Mapping[str, Any] = field(default_factory=dict)
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None
    cookies: Mapping[str, str] = field(default_factory=dict)
    context: RequestContext = EMPTY_CONTEXT

    # Private: ASGI receive callable for body streaming
    _receive: Receive = field(default=_empty_receive, repr=False, compare=False)

    # Private: body cache shared by every request derived from this one
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Request path plus query string."""
        qs = self.query.raw
        if qs:
            return f"{self.path}?{qs.decode('latin-1')}"
        return self.path

    # -- Typed context --

    def with_value(self, key: ContextKey[T], value: T) -> Request:
        """Return a copy of this request carrying *value* under *key*."""
        return replace(self, context=self.context.set(key, value))

    @overload
    def value(self, key: ContextKey[T]) -> T: ...

    @overload
    def value(self, key: ContextKey[T], default: D) -> T | D: ...

    def value(self, key: ContextKey[T], default: Any = MISSING) -> Any:
        """Return the value attached under *key*.

        Raises ``LookupError`` if the key is unset and has no default.
        """
        return self.context.get(key, default)

    def with_path_params(self, path_params: Mapping[str, Any]) -> Request:
        """Return a copy with the parameters captured by the mux."""
        return replace(self, path_params=dict(path_params))

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached: the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        import json as json_module

        raw = await self.body()
        return json_module.loads(raw)

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        headers = Headers(tuple(scope.get("headers", ())))
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=headers,
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            cookies=parse_cookies(headers.get("cookie", "") or ""),
            _receive=receive,
        )
