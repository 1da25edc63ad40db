"""Typed request-scoped values.

Middleware often needs to hand something to the handlers it wraps: an
authenticated user id, a request id, a parsed token. Instead of a
string-keyed bag, arbor uses ``ContextKey`` objects. A key is compared by
identity, so two libraries that both pick the name ``"user"`` can never
collide, and the key carries the value type for the checker.

Values travel with the request itself::

    USER_ID: ContextKey[str] = ContextKey("user_id")

    def authenticate(next: Handler) -> Handler:
        async def handler(w: ResponseWriter, r: Request) -> None:
            await next(w, r.with_value(USER_ID, "1234"))

        return handler

    async def profile(w: ResponseWriter, r: Request) -> None:
        w.write(r.value(USER_ID))

There is no ambient global: a value is visible exactly to the handlers
that receive the request it was attached to.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Final, Generic, TypeVar, cast, overload

T = TypeVar("T")
D = TypeVar("D")


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final[Any] = _Missing()


class ContextKey(Generic[T]):
    """A typed, identity-compared key for request-scoped values.

    Args:
        name: Label used in ``repr`` and error messages only.
        default: Value returned by ``Request.value`` when the key is not
            set. Without a default, a missing key raises ``LookupError``.
    """

    __slots__ = ("default", "name")

    def __init__(self, name: str, *, default: T = MISSING) -> None:
        self.name = name
        self.default = default

    def __repr__(self) -> str:
        return f"<ContextKey {self.name!r}>"

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING


class RequestContext:
    """Immutable mapping of ``ContextKey`` -> value.

    ``set`` returns a new context; the receiver is never modified, so a
    context captured by an outer middleware is not affected by what inner
    layers attach.
    """

    __slots__ = ("_values",)

    def __init__(self, values: dict[ContextKey[Any], Any] | None = None) -> None:
        object.__setattr__(self, "_values", dict(values or {}))

    def __setattr__(self, name: str, value: object) -> None:
        msg = "RequestContext is immutable; use .set() to derive a new context"
        raise AttributeError(msg)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[ContextKey[Any]]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        items = ", ".join(f"{k.name!r}: {v!r}" for k, v in self._values.items())
        return f"RequestContext({{{items}}})"

    def set(self, key: ContextKey[T], value: T) -> RequestContext:
        """Return a new context with *key* bound to *value*."""
        return RequestContext({**self._values, key: value})

    @overload
    def get(self, key: ContextKey[T]) -> T: ...

    @overload
    def get(self, key: ContextKey[T], default: D) -> T | D: ...

    def get(self, key: ContextKey[T], default: Any = MISSING) -> Any:
        """Return the value for *key*.

        Falls back to *default*, then to the key's own default. Raises
        ``LookupError`` when none of them is available.
        """
        if key in self._values:
            return cast(T, self._values[key])
        if default is not MISSING:
            return default
        if key.has_default:
            return key.default
        msg = f"{key!r} is not set on this request"
        raise LookupError(msg)


EMPTY_CONTEXT: Final[RequestContext] = RequestContext()
