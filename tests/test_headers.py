"""Tests for arbor.http.headers, arbor.http.query, and arbor.http.cookies."""

from arbor.http.cookies import SetCookie, parse_cookies
from arbor.http.headers import Headers, MutableHeaders
from arbor.http.query import QueryParams


class TestHeaders:
    def test_case_insensitive(self) -> None:
        headers = Headers(((b"Content-Type", b"text/html"),))
        assert headers["content-type"] == "text/html"
        assert headers["CONTENT-TYPE"] == "text/html"
        assert "Content-Type" in headers

    def test_get_default(self) -> None:
        assert Headers().get("x-missing") is None
        assert Headers().get("x-missing", "d") == "d"

    def test_get_list(self) -> None:
        headers = Headers(((b"accept", b"a"), (b"Accept", b"b")))
        assert headers.get_list("accept") == ["a", "b"]
        assert headers["accept"] == "a"

    def test_iter_deduplicates(self) -> None:
        headers = Headers(((b"accept", b"a"), (b"Accept", b"b"), (b"host", b"x")))
        assert list(headers) == ["accept", "host"]
        assert len(headers) == 2

    def test_non_string_key_not_contained(self) -> None:
        assert 1 not in Headers(((b"a", b"b"),))

    def test_raw(self) -> None:
        raw = ((b"a", b"b"),)
        assert Headers(raw).raw is raw


class TestMutableHeaders:
    def test_set_replaces_all_values(self) -> None:
        headers = MutableHeaders()
        headers.add("Vary", "Origin")
        headers.add("vary", "Accept")
        headers.set("VARY", "Cookie")
        assert headers.items() == (("Vary", "Cookie"),)

    def test_set_keeps_position(self) -> None:
        headers = MutableHeaders()
        headers.set("A", "1")
        headers.set("B", "2")
        headers.set("a", "3")
        assert headers.items() == (("A", "3"), ("B", "2"))

    def test_add_appends(self) -> None:
        headers = MutableHeaders()
        headers.add("Set-Cookie", "a=1")
        headers.add("Set-Cookie", "b=2")
        assert headers.get_list("set-cookie") == ["a=1", "b=2"]
        assert headers.get("set-cookie") == "a=1"

    def test_delete(self) -> None:
        headers = MutableHeaders((("A", "1"), ("B", "2"), ("a", "3")))
        headers.delete("a")
        assert headers.items() == (("B", "2"),)
        headers.delete("missing")
        assert len(headers) == 1

    def test_contains_and_iter(self) -> None:
        headers = MutableHeaders((("X-One", "1"),))
        assert "x-one" in headers
        assert list(headers) == [("X-One", "1")]

    def test_items_is_snapshot(self) -> None:
        headers = MutableHeaders()
        snapshot = headers.items()
        headers.set("A", "1")
        assert snapshot == ()


class TestQueryParams:
    def test_parse(self) -> None:
        query = QueryParams(b"a=1&b=2&a=3&empty=")
        assert query["a"] == "1"
        assert query.get_list("a") == ["1", "3"]
        assert query["empty"] == ""
        assert "b" in query
        assert len(query) == 3

    def test_get_default(self) -> None:
        assert QueryParams().get("x") is None
        assert QueryParams().get("x", "d") == "d"

    def test_raw(self) -> None:
        assert QueryParams(b"a=1").raw == b"a=1"


class TestCookies:
    def test_parse(self) -> None:
        assert parse_cookies("a=1; b=two; c") == {"a": "1", "b": "two"}

    def test_parse_empty(self) -> None:
        assert parse_cookies("") == {}

    def test_set_cookie_full(self) -> None:
        cookie = SetCookie(
            name="sid",
            value="x",
            max_age=0,
            path="/app",
            domain="example.com",
            secure=True,
            samesite="strict",
        )
        assert cookie.to_header_value() == (
            "sid=x; Max-Age=0; Path=/app; Domain=example.com; Secure; HttpOnly; SameSite=strict"
        )
