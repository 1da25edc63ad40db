"""Router tree — routes, middleware, and sub-routers built into a Mux.

A ``Router`` is a node holding its own routes, its own ordered
middleware, and child routers. Children come from ``group()`` (create,
configure inline, attach) or ``mount()`` (attach a router built
elsewhere). Nothing is wrapped while the tree is being configured;
``build()`` walks the tree once and registers every route with its full
middleware chain already applied.

Ordering rule, for a route registered on node ``N``::

    chain = middleware of root ... middleware of N's parent, middleware of N
    bound = chain[0](chain[1](... chain[-1](handler)))

Ancestors wrap outside, the node's own middleware sits closest to the
handler, and within a node registration order is kept. Siblings never
see each other's middleware.

Usage::

    router = Router()
    router.use(request_logger())

    @router.route("GET /hello")
    def hello(w, r):
        w.write("world!")

    def admin(g: Router) -> None:
        g.use(CookieAuth("session_id"))
        g.handle_func("GET /admin", dashboard)

    router.group(admin)
    mux = router.mux()
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any, Protocol, TypeVar

from arbor.errors import ConfigurationError
from arbor.http.request import Request
from arbor.http.response import ResponseWriter
from arbor.middleware.protocol import Middleware, apply_chain
from arbor.routing.mux import Mux
from arbor.routing.route import Handler, HandlerFunc, Route

logger = logging.getLogger("arbor.routing")

F = TypeVar("F", bound=Callable[..., Any])
R = TypeVar("R", bound="Registrar")


class Registrar(Protocol):
    """Anything that can receive ``(pattern, handler)`` bindings."""

    def register(self, pattern: str, handler: Handler) -> None: ...


class Router:
    """A node in the route tree.

    Configuration is single-threaded and happens before serving.
    ``build()`` only reads the tree, so it can be called again after
    further configuration to produce a fresh, consistent table.
    """

    __slots__ = ("_children", "_middlewares", "_parent", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._middlewares: list[Middleware] = []
        self._children: list[Router] = []
        self._parent: Router | None = None

    def __repr__(self) -> str:
        return (
            f"<Router routes={len(self._routes)} middleware={len(self._middlewares)} "
            f"children={len(self._children)}>"
        )

    # -- Configuration --

    def use(self, middleware: Middleware) -> Middleware:
        """Append *middleware* to this node's chain.

        It wraps this node's routes and every descendant's routes.
        Returns *middleware* unchanged, so ``@router.use`` works as a
        decorator.
        """
        if not callable(middleware):
            msg = f"Middleware must be callable, got {type(middleware).__name__}"
            raise TypeError(msg)
        self._middlewares.append(middleware)
        return middleware

    def handle(self, pattern: str, handler: Handler) -> None:
        """Register *handler* for *pattern* on this node.

        The pattern is not inspected here; duplicates are kept and handed
        to the build target, whose conflict policy applies. A plain
        ``def`` is rejected with ``TypeError``; use ``handle_func`` for it.
        """
        if not callable(handler):
            msg = f"Handler for {pattern!r} must be callable, got {type(handler).__name__}"
            raise TypeError(msg)
        if inspect.isfunction(handler) and not inspect.iscoroutinefunction(handler):
            msg = (
                f"Handler for {pattern!r} must be an async function. "
                f"Register the plain function {handler.__name__!r} with handle_func()."
            )
            raise TypeError(msg)
        self._routes.append(Route(pattern=pattern, handler=handler))

    def handle_func(self, pattern: str, func: Callable[[ResponseWriter, Request], Any]) -> None:
        """Register a plain ``def`` or ``async def`` function for *pattern*."""
        self.handle(pattern, HandlerFunc(func))

    def route(self, pattern: str) -> Callable[[F], F]:
        """Register a function via decorator; the function is returned as-is."""

        def decorator(func: F) -> F:
            self.handle_func(pattern, func)
            return func

        return decorator

    def group(self, configure: Callable[[Router], object]) -> None:
        """Create a child router, let *configure* set it up, then mount it.

        *configure* runs synchronously, before this call returns.
        """
        child = Router()
        configure(child)
        self.mount(child)

    def mount(self, subrouter: Router) -> None:
        """Attach an existing router as the last child of this node.

        The subrouter keeps its own middleware innermost; this node's
        chain is added outside it at build time.

        Raises ``ConfigurationError`` when *subrouter* already has a
        parent, is this router, or is one of its ancestors.
        """
        if not isinstance(subrouter, Router):
            msg = f"mount() expects a Router, got {type(subrouter).__name__}"
            raise TypeError(msg)
        if subrouter is self:
            msg = "Cannot mount a router into itself."
            raise ConfigurationError(msg)
        if subrouter._parent is not None:
            msg = (
                f"{subrouter!r} is already mounted under {subrouter._parent!r}; "
                "a router can only have one parent."
            )
            raise ConfigurationError(msg)
        ancestor = self._parent
        while ancestor is not None:
            if ancestor is subrouter:
                msg = f"Mounting {subrouter!r} here would create a cycle."
                raise ConfigurationError(msg)
            ancestor = ancestor._parent
        subrouter._parent = self
        self._children.append(subrouter)

    # -- Introspection --

    @property
    def routes(self) -> tuple[Route, ...]:
        """Routes registered on this node (not its children)."""
        return tuple(self._routes)

    @property
    def middlewares(self) -> tuple[Middleware, ...]:
        """Middleware registered on this node, outermost first."""
        return tuple(self._middlewares)

    @property
    def children(self) -> tuple[Router, ...]:
        return tuple(self._children)

    @property
    def parent(self) -> Router | None:
        return self._parent

    # -- Build --

    def build(self, target: R) -> R:
        """Register every route of this tree, fully wrapped, with *target*.

        Walks the tree depth-first: a node's own routes are registered
        before its children are visited, children in mount order. Errors
        raised by ``target.register`` propagate unchanged.

        Returns *target*.
        """
        count = self._apply(target, (), depth=0)
        logger.debug("built %d route(s) into %s", count, type(target).__name__)
        return target

    def mux(self) -> Mux:
        """Build this tree into a new ``Mux``."""
        return self.build(Mux())

    def _apply(self, target: Registrar, inherited: tuple[Middleware, ...], depth: int) -> int:
        chain = (*inherited, *self._middlewares)
        count = 0
        for route in tuple(self._routes):
            bound = apply_chain(chain, route.handler)
            target.register(route.pattern, bound)
            logger.debug(
                "bound %s (depth %d, %d middleware)", route.pattern, depth, len(chain)
            )
            count += 1
        for child in tuple(self._children):
            count += child._apply(target, chain, depth + 1)
        return count
