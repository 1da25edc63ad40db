"""Handler type, HandlerFunc adapter, and the frozen Route record."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

from arbor._internal.invoke import invoke
from arbor.http.request import Request
from arbor.http.response import ResponseWriter

# A terminal or wrapped request handler.
Handler: TypeAlias = Callable[[ResponseWriter, Request], Awaitable[None]]


class HandlerFunc:
    """Adapt a plain function into a ``Handler``.

    The function may be ``def`` or ``async def``; its return value is
    ignored.
    """

    __slots__ = ("func",)

    def __init__(self, func: Callable[[ResponseWriter, Request], Any]) -> None:
        if not callable(func):
            msg = f"HandlerFunc requires a callable, got {type(func).__name__}"
            raise TypeError(msg)
        self.func = func

    async def __call__(self, w: ResponseWriter, r: Request) -> None:
        await invoke(self.func, w, r)

    @property
    def name(self) -> str:
        """Name of the wrapped function, for logs and route listings."""
        return getattr(self.func, "__name__", type(self.func).__name__)

    def __repr__(self) -> str:
        return f"HandlerFunc({self.name})"


@dataclass(frozen=True, slots=True)
class Route:
    """A (pattern, handler) pair registered on a router node.

    The pattern is opaque to the route tree; only the ``Mux`` parses it.
    """

    pattern: str
    handler: Handler
