"""Tests for arbor.http.request — immutable Request and typed context."""

from typing import Any

import pytest

from arbor.context import ContextKey
from arbor.http.request import Request

USER_ID: ContextKey[str] = ContextKey("user_id")


def _scope(**overrides: Any) -> dict[str, Any]:
    scope: dict[str, Any] = {
        "type": "http",
        "method": "POST",
        "path": "/items",
        "query_string": b"page=2&tag=a&tag=b",
        "headers": [
            (b"content-type", b"application/json"),
            (b"cookie", b"session_id=abc; theme=dark"),
        ],
        "http_version": "2",
        "server": ("example.com", 443),
        "client": ("10.0.0.1", 5000),
    }
    scope.update(overrides)
    return scope


def _receiver(*chunks: bytes):
    messages = [
        {"type": "http.request", "body": chunk, "more_body": index < len(chunks) - 1}
        for index, chunk in enumerate(chunks)
    ]

    async def receive() -> dict[str, Any]:
        return messages.pop(0)

    return receive


class TestFromAsgi:
    def test_metadata(self) -> None:
        request = Request.from_asgi(_scope(), _receiver(b""))
        assert request.method == "POST"
        assert request.path == "/items"
        assert request.http_version == "2"
        assert request.server == ("example.com", 443)
        assert request.client == ("10.0.0.1", 5000)
        assert request.content_type == "application/json"

    def test_query(self) -> None:
        request = Request.from_asgi(_scope(), _receiver(b""))
        assert request.query["page"] == "2"
        assert request.query.get_list("tag") == ["a", "b"]
        assert request.url == "/items?page=2&tag=a&tag=b"

    def test_url_without_query(self) -> None:
        request = Request.from_asgi(_scope(query_string=b""), _receiver(b""))
        assert request.url == "/items"

    def test_cookies(self) -> None:
        request = Request.from_asgi(_scope(), _receiver(b""))
        assert request.cookies == {"session_id": "abc", "theme": "dark"}

    def test_minimal_scope(self) -> None:
        request = Request.from_asgi({"method": "GET", "path": "/"}, _receiver(b""))
        assert request.server is None
        assert request.client is None
        assert request.cookies == {}
        assert len(request.headers) == 0

    def test_frozen(self) -> None:
        request = Request(method="GET", path="/")
        with pytest.raises(AttributeError):
            request.method = "POST"  # type: ignore[misc]


class TestBody:
    async def test_body_joins_chunks(self) -> None:
        request = Request.from_asgi(_scope(), _receiver(b"hel", b"lo"))
        assert await request.body() == b"hello"

    async def test_body_cached(self) -> None:
        request = Request.from_asgi(_scope(), _receiver(b"once"))
        assert await request.body() == b"once"
        assert await request.body() == b"once"

    async def test_body_cache_shared_with_derived_request(self) -> None:
        request = Request.from_asgi(_scope(), _receiver(b"shared"))
        await request.body()
        derived = request.with_value(USER_ID, "1")
        assert await derived.body() == b"shared"

    async def test_json(self) -> None:
        request = Request.from_asgi(_scope(), _receiver(b'{"a": 1}'))
        assert await request.json() == {"a": 1}

    async def test_text(self) -> None:
        request = Request.from_asgi(_scope(), _receiver("héllo".encode()))
        assert await request.text() == "héllo"

    async def test_default_receive_is_empty(self) -> None:
        assert await Request(method="GET", path="/").body() == b""


class TestTypedContext:
    def test_with_value_returns_new_request(self) -> None:
        request = Request(method="GET", path="/")
        derived = request.with_value(USER_ID, "1234")
        assert derived.value(USER_ID) == "1234"
        assert derived is not request
        assert USER_ID not in request.context

    def test_missing_value_raises(self) -> None:
        with pytest.raises(LookupError, match="user_id"):
            Request(method="GET", path="/").value(USER_ID)

    def test_missing_value_with_default(self) -> None:
        assert Request(method="GET", path="/").value(USER_ID, None) is None

    def test_with_value_keeps_metadata(self) -> None:
        request = Request(method="PUT", path="/x", path_params={"id": "1"})
        derived = request.with_value(USER_ID, "u")
        assert derived.method == "PUT"
        assert derived.path_params == {"id": "1"}

    def test_with_path_params(self) -> None:
        request = Request(method="GET", path="/users/1").with_value(USER_ID, "u")
        derived = request.with_path_params({"id": "1"})
        assert derived.path_params == {"id": "1"}
        assert derived.value(USER_ID) == "u"
