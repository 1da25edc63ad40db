"""Tests for arbor.server.handler — the ASGI boundary."""

import logging
from typing import Any

import pytest

from arbor.http.request import Request
from arbor.http.response import ResponseWriter
from arbor.server.handler import handle_lifespan, handle_request


async def _run(dispatch, method: str = "GET", path: str = "/") -> list[dict]:
    messages: list[dict] = []

    async def receive() -> dict[str, Any]:
        return {"type": "http.request", "body": b"", "more_body": False}

    async def send(message: dict) -> None:
        messages.append(message)

    scope = {"type": "http", "method": method, "path": path, "headers": []}
    await handle_request(scope, receive, send, dispatch=dispatch)
    return messages


class TestHandleRequest:
    async def test_dispatch_result_sent(self) -> None:
        async def dispatch(w: ResponseWriter, r: Request) -> None:
            w.headers.set("X-Path", r.path)
            w.write("hi")

        messages = await _run(dispatch, path="/greet")
        assert messages[0]["status"] == 200
        assert (b"x-path", b"/greet") in messages[0]["headers"]
        assert messages[1]["body"] == b"hi"

    async def test_unhandled_error_becomes_500(self, caplog: pytest.LogCaptureFixture) -> None:
        async def dispatch(w: ResponseWriter, r: Request) -> None:
            w.headers.set("X-Secret", "leak")
            msg = "boom"
            raise RuntimeError(msg)

        with caplog.at_level(logging.ERROR, logger="arbor.server"):
            messages = await _run(dispatch, path="/x")

        assert messages[0]["status"] == 500
        assert b"x-secret" not in dict(messages[0]["headers"])
        assert messages[1]["body"] == b"Internal Server Error\n"
        assert "Unhandled error serving GET /x" in caplog.text

    async def test_error_after_commit_keeps_partial_response(self) -> None:
        async def dispatch(w: ResponseWriter, r: Request) -> None:
            w.write_header(202)
            w.write("partial")
            msg = "late"
            raise RuntimeError(msg)

        messages = await _run(dispatch)
        assert messages[0]["status"] == 202
        assert messages[1]["body"] == b"partial"

    async def test_head_request_has_no_body(self) -> None:
        async def dispatch(w: ResponseWriter, r: Request) -> None:
            w.write("body")

        messages = await _run(dispatch, method="HEAD")
        assert dict(messages[0]["headers"])[b"content-length"] == b"4"
        assert messages[1]["body"] == b""

    async def test_non_http_scope_ignored(self) -> None:
        called = False

        async def dispatch(w: ResponseWriter, r: Request) -> None:
            nonlocal called
            called = True

        async def receive() -> dict[str, Any]:
            return {}

        async def send(message: dict) -> None:
            pass

        await handle_request({"type": "websocket"}, receive, send, dispatch=dispatch)
        assert called is False


class TestLifespan:
    async def test_startup_and_shutdown_acknowledged(self) -> None:
        incoming = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
        sent: list[dict] = []

        async def receive() -> dict[str, Any]:
            return incoming.pop(0)

        async def send(message: dict) -> None:
            sent.append(message)

        await handle_lifespan(receive, send)

        assert sent == [
            {"type": "lifespan.startup.complete"},
            {"type": "lifespan.shutdown.complete"},
        ]
