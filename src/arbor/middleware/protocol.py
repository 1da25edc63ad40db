"""Middleware type and chain composition.

A middleware is any callable that turns one handler into another::

    def timing(next: Handler) -> Handler:
        async def handler(w: ResponseWriter, r: Request) -> None:
            start = time.monotonic()
            await next(w, r)
            logger.info("%s took %.3fs", r.path, time.monotonic() - start)

        return handler

No base class required. Closures, objects with ``__call__``, and
``functools.partial`` objects all work. A middleware may do work before
and after calling ``next``, pass a derived request to it, or never call
it at all.
"""

from collections.abc import Callable, Sequence
from typing import TypeAlias

from arbor.routing.route import Handler

Middleware: TypeAlias = Callable[[Handler], Handler]


def apply_chain(chain: Sequence[Middleware], handler: Handler) -> Handler:
    """Wrap *handler* with *chain*, first entry outermost.

    For ``[m1, m2, m3]`` the result is ``m1(m2(m3(handler)))``: a request
    passes through ``m1`` first and reaches *handler* last.
    """
    for middleware in reversed(chain):
        handler = middleware(handler)
    return handler


def chain(*middlewares: Middleware) -> Middleware:
    """Compose several middleware into one, first argument outermost.

    ``router.use(chain(a, b))`` behaves exactly like ``router.use(a)``
    followed by ``router.use(b)``.
    """
    frozen = tuple(middlewares)

    def composed(next: Handler) -> Handler:
        return apply_chain(frozen, next)

    return composed
