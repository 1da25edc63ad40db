"""Arbor exception hierarchy.

Configuration mistakes surface as ``ConfigurationError`` while the tree
is built. Requests the mux cannot route surface as ``HTTPError``
subclasses, which ``Mux.dispatch`` writes out as plain-text responses.
"""

from collections.abc import Iterable


class ArborError(Exception):
    """Base for all arbor-specific errors."""


class ConfigurationError(ArborError):
    """Raised when the route tree or the mux is configured incorrectly.

    Malformed patterns, conflicting registrations, and invalid mounts
    all surface as this error, at configuration or build time.
    """


class HTTPError(ArborError):
    """A routing failure tied to the status code it is answered with.

    ``status`` and ``reason`` are class-level defaults; ``reason`` becomes
    the response body when set, otherwise the standard status text is
    used. ``headers`` are set on the writer before the body is written.
    """

    status: int = 500
    reason: str = ""

    def __init__(
        self,
        detail: str = "",
        *,
        status: int | None = None,
        headers: tuple[tuple[str, str], ...] = (),
    ) -> None:
        if status is not None:
            self.status = status
        self.detail = detail
        self.headers = headers
        super().__init__(detail or str(self.status))


class NotFound(HTTPError):  # noqa: N818
    """No pattern matches the request path."""

    status = 404
    reason = "404 page not found"

    def __init__(self, method: str = "", path: str = "") -> None:
        self.method = method
        self.path = path
        super().__init__(f"No pattern matches {method} {path!r}" if path else "Not Found")


class MethodNotAllowed(HTTPError):  # noqa: N818
    """The path matches, but no pattern on it answers the method.

    ``allowed`` holds every method that would have matched; it is sent
    back sorted in the ``Allow`` header.
    """

    status = 405

    def __init__(self, allowed: Iterable[str], method: str = "", path: str = "") -> None:
        self.allowed = frozenset(allowed)
        self.method = method
        self.path = path
        allow_value = ", ".join(sorted(self.allowed))
        detail = f"Allowed methods: {allow_value}"
        if method:
            detail = f"{method} {path!r} not allowed. {detail}"
        super().__init__(detail, headers=(("Allow", allow_value),))
