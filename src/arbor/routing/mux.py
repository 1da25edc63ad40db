"""Mux — the pattern-matching dispatch table a route tree builds into.

The route tree treats patterns as opaque strings. The mux is where they
get meaning::

    "GET /users/{id:int}"   method-specific, typed parameter (handler sees an int)
    "/files/{path:path}"    any method, catch-all tail
    "POST /login"           method-specific, static

Segments are static text, ``{name}`` (one segment), ``{name:int}``,
``{name:float}``, or a final ``{name:path}`` that consumes the rest of
the path. Typed values reach the handler converted, so
``r.path_params["id"]`` is an ``int`` for ``{id:int}``. A pattern
without a method answers every method; a ``GET`` pattern also answers
``HEAD``.

Precedence: static segments beat parameters, parameters beat
catch-alls, and a method-specific registration beats a method-less one
on the same path. Registering the same method twice on an equivalent
path is a conflict and raises ``ConfigurationError``.

Matching is a trie walk, O(path depth). Registrations are collected
during setup; the mux freezes when it starts serving.

Middleware added with ``Mux.use`` wraps the whole dispatch, so it also
sees requests that match no pattern (CORS preflights, for example).
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from arbor._internal.asgi import Receive, Scope, Send
from arbor.errors import ConfigurationError, HTTPError, MethodNotAllowed, NotFound
from arbor.http.request import Request
from arbor.http.response import ResponseWriter, error, status_text
from arbor.middleware.protocol import Middleware, apply_chain
from arbor.routing.route import Handler

# Method slot for patterns registered without a method
ANY_METHOD = "*"

# (regex_pattern, python_type) for each supported converter
CONVERTERS: dict[str, tuple[str, type]] = {
    "str": (r"[^/]+", str),
    "int": (r"\d+", int),
    "float": (r"\d+(?:\.\d+)?", float),
    "path": (r".+", str),
}

_METHOD_RE = re.compile(r"^[A-Z]+$")


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a pattern path.

    Static:  ``/users``     (is_param=False)
    Param:   ``/{id}``      (is_param=True, param_name="id")
    Typed:   ``/{id:int}``  (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class ParsedPattern:
    """A pattern split into its method and path segments."""

    method: str | None
    path: str
    segments: tuple[PathSegment, ...]


@dataclass(frozen=True, slots=True)
class MuxMatch:
    """Result of a successful match."""

    pattern: str
    handler: Handler
    path_params: dict[str, object]


def parse_pattern(pattern: str) -> ParsedPattern:
    """Parse ``"[METHOD ]/path"`` into method and segments.

    Examples::

        "/users"              -> method None, [users]
        "GET /users/{id}"     -> method "GET", [users, {id}]
        "/files/{rest:path}"  -> method None, [files, {rest:path}]

    Raises ``ConfigurationError`` for malformed patterns.
    """
    text = pattern.strip()
    if not text:
        msg = "Empty pattern."
        raise ConfigurationError(msg)

    method: str | None = None
    path = text
    if " " in text:
        method, _, path = text.partition(" ")
        path = path.strip()
        if not _METHOD_RE.match(method):
            msg = f"Invalid method {method!r} in pattern {pattern!r}."
            raise ConfigurationError(msg)

    if not path.startswith("/"):
        msg = f"Pattern path must start with '/': {pattern!r}"
        raise ConfigurationError(msg)

    segments: list[PathSegment] = []
    parts = [part for part in path.strip("/").split("/") if part]
    for index, part in enumerate(parts):
        if part.startswith("<") and part.endswith(">"):
            msg = (
                f"Pattern {pattern!r} uses <param> syntax; "
                "arbor expects {param} (e.g. /users/{id})."
            )
            raise ConfigurationError(msg)
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name, param_type = inner, "str"
            if not param_name.isidentifier():
                msg = f"Invalid parameter name {param_name!r} in pattern {pattern!r}."
                raise ConfigurationError(msg)
            if param_type not in CONVERTERS:
                msg = (
                    f"Unknown converter {param_type!r} in pattern {pattern!r}. "
                    f"Available: {', '.join(sorted(CONVERTERS))}."
                )
                raise ConfigurationError(msg)
            if param_type == "path" and index != len(parts) - 1:
                msg = f"Catch-all {{{inner}}} must be the last segment in {pattern!r}."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(value=part, is_param=True, param_name=param_name, param_type=param_type)
            )
        else:
            segments.append(PathSegment(value=part))

    return ParsedPattern(method=method, path=path, segments=tuple(segments))


@dataclass(frozen=True, slots=True)
class _Entry:
    """A registered handler at a trie node."""

    pattern: str
    handler: Handler
    # (name, converter) per parameter, in path order
    params: tuple[tuple[str, str], ...]

    def convert(self, values: tuple[str, ...]) -> dict[str, object]:
        converted: dict[str, object] = {}
        for (name, kind), value in zip(self.params, values, strict=True):
            _, target_type = CONVERTERS[kind]
            converted[name] = target_type(value)
        return converted


@dataclass(slots=True)
class _TrieNode:
    """A node in the pattern trie. Mutable until the mux freezes."""

    # Static segment children: "users" -> node
    children: dict[str, _TrieNode] = field(default_factory=dict)
    # Parameter children keyed by converter, tried in registration order
    param_children: dict[str, _ParamEdge] = field(default_factory=dict)
    # Catch-all handlers (path converter), keyed by method slot
    catch_all: dict[str, _Entry] = field(default_factory=dict)
    # Handlers at this node, keyed by method slot
    entries: dict[str, _Entry] = field(default_factory=dict)


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    regex: re.Pattern[str]
    node: _TrieNode


class Mux:
    """Pattern-matching dispatch table and ASGI application.

    Usage::

        mux = Mux()
        mux.register("GET /users/{id:int}", show_user)
        mux.freeze()
        match = mux.match("GET", "/users/42")

    A built mux is an ASGI callable, so it can be handed to any ASGI
    server, or started directly with ``mux.serve()``.
    """

    __slots__ = ("_bindings", "_frozen", "_handler", "_middlewares", "_root")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._bindings: list[tuple[str, Handler]] = []
        self._middlewares: list[Middleware] = []
        self._handler: Handler = self.dispatch
        self._frozen = False

    # -- Registration --

    def register(self, pattern: str, handler: Handler) -> None:
        """Bind *handler* to *pattern*.

        Raises ``ConfigurationError`` if the pattern is malformed or an
        equivalent pattern is already bound for the same method, and
        ``RuntimeError`` once the mux is frozen.
        """
        if self._frozen:
            msg = "Cannot register patterns after the mux has started serving."
            raise RuntimeError(msg)
        if not callable(handler):
            msg = f"Handler for {pattern!r} is not callable: {handler!r}"
            raise ConfigurationError(msg)

        parsed = parse_pattern(pattern)
        slot = parsed.method or ANY_METHOD
        params = tuple(
            (seg.param_name or "", seg.param_type) for seg in parsed.segments if seg.is_param
        )
        entry = _Entry(pattern=pattern, handler=handler, params=params)

        node = self._root
        for seg in parsed.segments:
            if seg.is_param and seg.param_type == "path":
                # Catch-all: consumes rest of path, always the last segment
                self._store(node.catch_all, slot, entry)
                self._bindings.append((pattern, handler))
                return
            if seg.is_param:
                edge = node.param_children.get(seg.param_type)
                if edge is None:
                    regex, _ = CONVERTERS[seg.param_type]
                    edge = _ParamEdge(regex=re.compile(f"^{regex}$"), node=_TrieNode())
                    node.param_children[seg.param_type] = edge
                node = edge.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        self._store(node.entries, slot, entry)
        self._bindings.append((pattern, handler))

    @staticmethod
    def _store(table: dict[str, _Entry], slot: str, entry: _Entry) -> None:
        existing = table.get(slot)
        if existing is not None:
            msg = f"Pattern {entry.pattern!r} conflicts with {existing.pattern!r}."
            raise ConfigurationError(msg)
        table[slot] = entry

    def use(self, middleware: Middleware) -> None:
        """Wrap the whole dispatch with *middleware*.

        Unlike router middleware, this runs for every request, including
        those answered with 404 or 405. The first call is outermost.
        """
        if self._frozen:
            msg = "Cannot add middleware after the mux has started serving."
            raise RuntimeError(msg)
        if not callable(middleware):
            msg = f"Middleware must be callable, got {type(middleware).__name__}"
            raise ConfigurationError(msg)
        self._middlewares.append(middleware)

    def freeze(self) -> None:
        """Stop accepting registrations and compose the mux middleware."""
        if self._frozen:
            return
        self._handler = apply_chain(self._middlewares, self.dispatch)
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def bindings(self) -> tuple[tuple[str, Handler], ...]:
        """Every ``(pattern, handler)`` in registration order."""
        return tuple(self._bindings)

    # -- Matching --

    def match(self, method: str, path: str) -> MuxMatch:
        """Match a request method and path against registered patterns.

        Returns a ``MuxMatch`` on success.
        Raises ``NotFound`` if no pattern matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        method = method.upper()
        parts = [p for p in path.strip("/").split("/") if p]
        allowed: set[str] = set()

        for table, values in self._candidates(self._root, parts, 0, ()):
            entry = _select(table, method)
            if entry is not None:
                return MuxMatch(
                    pattern=entry.pattern,
                    handler=entry.handler,
                    path_params=entry.convert(values),
                )
            allowed.update(table)

        if allowed:
            if "GET" in allowed:
                allowed.add("HEAD")
            raise MethodNotAllowed(allowed, method, path)
        raise NotFound(method, path)

    def _candidates(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        values: tuple[str, ...],
    ) -> Iterator[tuple[dict[str, _Entry], tuple[str, ...]]]:
        """Yield handler tables whose path matches, most specific first."""
        if index == len(parts):
            if node.entries:
                yield node.entries, values
        else:
            part = parts[index]

            # 1. Static child (exact match)
            child = node.children.get(part)
            if child is not None:
                yield from self._candidates(child, parts, index + 1, values)

            # 2. Parameter children
            for edge in node.param_children.values():
                if edge.regex.match(part):
                    yield from self._candidates(edge.node, parts, index + 1, (*values, part))

        # 3. Catch-all (needs at least one remaining segment)
        if node.catch_all and index < len(parts):
            yield node.catch_all, (*values, "/".join(parts[index:]))

    # -- Dispatch --

    async def dispatch(self, w: ResponseWriter, r: Request) -> None:
        """Route *r* to its bound handler; the mux is itself a Handler.

        Unmatched requests get a plain-text 404 or 405. Exceptions raised
        by the bound handler propagate to the caller.
        """
        try:
            match = self.match(r.method, r.path)
        except HTTPError as exc:
            for name, value in exc.headers:
                w.headers.set(name, value)
            message = exc.reason or status_text(exc.status)
            error(w, message, exc.status)
            return
        await match.handler(w, r.with_path_params(match.path_params))

    # -- ASGI / serving --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        from arbor.server.handler import handle_lifespan, handle_request

        if scope["type"] == "lifespan":
            await handle_lifespan(receive, send)
            return

        self.freeze()
        await handle_request(scope, receive, send, dispatch=self._handler)

    def serve(self, host: str | None = None, port: int | None = None, **options: object) -> None:
        """Serve this mux with pounce. See ``arbor.serve``."""
        from arbor.server.runner import serve

        serve(self, host=host, port=port, **options)


def _select(table: dict[str, _Entry], method: str) -> _Entry | None:
    """Pick the entry answering *method*: exact, GET for HEAD, then any."""
    entry = table.get(method)
    if entry is None and method == "HEAD":
        entry = table.get("GET")
    if entry is None:
        entry = table.get(ANY_METHOD)
    return entry
