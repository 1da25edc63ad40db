"""Cookie-based authentication gate.

``CookieAuth`` rejects requests that lack a session cookie with ``401``
and, for the rest, attaches the cookie value to the request context so
handlers can read it through a typed key::

    protected = Router()
    protected.use(CookieAuth("session_id"))

    @protected.route("GET /profile")
    def profile(w, r):
        w.write(r.value(SESSION_ID))

    router.mount(protected)

Resolving a session id to a user is application work; pass a
``resolve`` callable to do it here and store the result instead.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from arbor._internal.invoke import invoke
from arbor.context import ContextKey
from arbor.http.request import Request
from arbor.http.response import ResponseWriter, error, status_text
from arbor.routing.route import Handler

SESSION_ID: ContextKey[str] = ContextKey("session_id")
"""Raw session cookie value attached by ``CookieAuth``."""


class CookieAuth:
    """Require *cookie_name* on every request passing through.

    Args:
        cookie_name: Cookie that must be present.
        key: Context key the value is stored under.
        resolve: Optional ``(value) -> object | None`` (sync or async).
            Its result is stored instead of the raw value; ``None``
            rejects the request with ``401``.
    """

    __slots__ = ("cookie_name", "key", "resolve")

    def __init__(
        self,
        cookie_name: str = "session_id",
        *,
        key: ContextKey[Any] = SESSION_ID,
        resolve: Callable[[str], Any | Awaitable[Any]] | None = None,
    ) -> None:
        self.cookie_name = cookie_name
        self.key = key
        self.resolve = resolve

    def __call__(self, next: Handler) -> Handler:
        async def handler(w: ResponseWriter, r: Request) -> None:
            raw = r.cookies.get(self.cookie_name)
            if not raw:
                error(w, status_text(401), 401)
                return
            value: Any = raw
            if self.resolve is not None:
                value = await invoke(self.resolve, raw)
                if value is None:
                    error(w, status_text(401), 401)
                    return
            await next(w, r.with_value(self.key, value))

        return handler
