"""Tests for arbor.routing.route and arbor.errors."""

import pytest

from arbor.errors import ArborError, ConfigurationError, HTTPError, MethodNotAllowed, NotFound
from arbor.http.request import Request
from arbor.http.response import ResponseWriter
from arbor.routing.route import HandlerFunc, Route


def hello(w: ResponseWriter, r: Request) -> None:
    w.write("world!")


async def hello_async(w: ResponseWriter, r: Request) -> None:
    w.write("async world!")


class TestHandlerFunc:
    async def test_sync_function(self) -> None:
        w = ResponseWriter()
        await HandlerFunc(hello)(w, Request(method="GET", path="/"))
        assert w.body == b"world!"

    async def test_async_function(self) -> None:
        w = ResponseWriter()
        await HandlerFunc(hello_async)(w, Request(method="GET", path="/"))
        assert w.body == b"async world!"

    def test_rejects_non_callable(self) -> None:
        with pytest.raises(TypeError, match="requires a callable"):
            HandlerFunc(42)  # type: ignore[arg-type]

    def test_name_and_repr(self) -> None:
        handler = HandlerFunc(hello)
        assert handler.name == "hello"
        assert repr(handler) == "HandlerFunc(hello)"


class TestRoute:
    def test_frozen(self) -> None:
        route = Route(pattern="GET /", handler=HandlerFunc(hello))
        with pytest.raises(AttributeError):
            route.pattern = "POST /"  # type: ignore[misc]


class TestErrors:
    def test_hierarchy(self) -> None:
        assert issubclass(ConfigurationError, ArborError)
        assert issubclass(NotFound, HTTPError)
        assert issubclass(MethodNotAllowed, HTTPError)

    def test_not_found(self) -> None:
        exc = NotFound()
        assert exc.status == 404
        assert exc.reason == "404 page not found"
        assert str(exc) == "Not Found"

    def test_not_found_records_request(self) -> None:
        exc = NotFound("GET", "/missing")
        assert (exc.method, exc.path) == ("GET", "/missing")
        assert str(exc) == "No pattern matches GET '/missing'"

    def test_method_not_allowed_allow_header(self) -> None:
        exc = MethodNotAllowed({"POST", "GET"}, "DELETE", "/x")
        assert exc.status == 405
        assert exc.allowed == frozenset({"GET", "POST"})
        assert exc.headers == (("Allow", "GET, POST"),)
        assert exc.detail == "DELETE '/x' not allowed. Allowed methods: GET, POST"

    def test_method_not_allowed_without_request(self) -> None:
        assert str(MethodNotAllowed(["PUT"])) == "Allowed methods: PUT"

    def test_http_error_str_without_detail(self) -> None:
        assert str(HTTPError(status=418)) == "418"

    def test_status_override_is_per_instance(self) -> None:
        exc = HTTPError("teapot", status=418)
        assert exc.status == 418
        assert str(exc) == "teapot"
        assert HTTPError().status == 500
        assert NotFound().status == 404
