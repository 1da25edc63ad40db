"""Arbor — a route tree for ASGI services.

Routes, middleware, and sub-routers are collected on ``Router`` nodes and
built once into a ``Mux`` with every middleware chain already applied.

Basic usage::

    from arbor import Router, set_header

    router = Router()

    @router.route("GET /hello")
    def hello(w, r):
        w.write("world!")

    def api(g):
        g.use(set_header("X-API", "1"))
        g.handle_func("GET /api/status", status)

    router.group(api)
    router.mux().serve()

Serving requires pounce (``pip install arbor[server]``); building and
testing a tree does not.
"""

__version__ = "0.1.0"
__all__ = [
    "ArborError",
    "ConfigurationError",
    "ContextKey",
    "HTTPError",
    "Handler",
    "HandlerFunc",
    "MethodNotAllowed",
    "Middleware",
    "Mux",
    "NotFound",
    "Request",
    "ResponseWriter",
    "Route",
    "Router",
    "ServerConfig",
    "chain",
    "error",
    "not_found",
    "redirect",
    "serve",
    "set_header",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import arbor`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from arbor.routing.router import Router

        return Router

    if name == "Mux":
        from arbor.routing.mux import Mux

        return Mux

    if name in ("Handler", "HandlerFunc", "Route"):
        from arbor.routing import route as _route

        return getattr(_route, name)

    if name == "Request":
        from arbor.http.request import Request

        return Request

    if name in ("ResponseWriter", "error", "not_found", "redirect"):
        from arbor.http import response as _resp

        return getattr(_resp, name)

    if name in ("Middleware", "chain"):
        from arbor.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "set_header":
        from arbor.middleware.builtin import set_header

        return set_header

    if name == "ContextKey":
        from arbor.context import ContextKey

        return ContextKey

    if name == "ServerConfig":
        from arbor.config import ServerConfig

        return ServerConfig

    if name == "serve":
        from arbor.server.runner import serve

        return serve

    if name in ("ArborError", "ConfigurationError", "HTTPError", "MethodNotAllowed", "NotFound"):
        from arbor import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
