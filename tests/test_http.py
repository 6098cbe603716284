"""Tests for switchyard.http — Headers, QueryParams, Request and Response."""

import pytest

from switchyard.http.headers import Headers
from switchyard.http.query import QueryParams
from switchyard.http.request import Request
from switchyard.http.response import Response


def _h(*pairs: tuple[str, str]) -> Headers:
    """Shorthand: build Headers from string pairs."""
    raw = tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs)
    return Headers(raw)


class TestHeaders:
    def test_case_insensitive(self) -> None:
        h = _h(("Content-Type", "text/html"))
        assert h["content-type"] == "text/html"
        assert h["CONTENT-TYPE"] == "text/html"

    def test_missing_key_raises(self) -> None:
        with pytest.raises(KeyError):
            _h(("Accept", "*/*"))["X-Missing"]

    def test_contains_rejects_non_str(self) -> None:
        assert 42 not in _h(("Accept", "*/*"))  # type: ignore[operator]

    def test_multiple_values(self) -> None:
        h = _h(("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"))
        assert h["set-cookie"] == "a=1"
        assert h.get_list("Set-Cookie") == ["a=1", "b=2"]
        assert len(h) == 1

    def test_from_mapping(self) -> None:
        h = Headers.from_mapping({"Accept": "text/html"})
        assert h.get("accept") == "text/html"
        assert h.get("x-missing", "fallback") == "fallback"


class TestQueryParams:
    def test_parse(self) -> None:
        q = QueryParams(b"page=2&tag=a&tag=b&flag=")
        assert q["page"] == "2"
        assert q.get_list("tag") == ["a", "b"]
        assert q["flag"] == ""

    def test_get_int(self) -> None:
        q = QueryParams("page=2&name=x")
        assert q.get_int("page") == 2
        assert q.get_int("name", 1) == 1
        assert q.get_int("missing") is None


class TestRequest:
    async def test_build_and_body(self) -> None:
        request = Request.build(
            "post",
            "/items",
            headers={"Content-Type": "application/json"},
            query="q=1",
            body=b'{"name": "widget"}',
        )
        assert request.method == "POST"
        assert request.content_type == "application/json"
        assert request.url == "/items?q=1"
        assert await request.json() == {"name": "widget"}
        # Cached after the first read
        assert await request.text() == '{"name": "widget"}'

    async def test_from_asgi(self) -> None:
        chunks = [
            {"type": "http.request", "body": b"hel", "more_body": True},
            {"type": "http.request", "body": b"lo", "more_body": False},
        ]

        async def receive():
            return chunks.pop(0)

        scope = {
            "type": "http",
            "method": "get",
            "path": "/birds",
            "headers": [(b"accept", b"text/html")],
            "query_string": b"a=1",
            "client": ("127.0.0.1", 5000),
        }
        request = Request.from_asgi(scope, receive)
        assert request.method == "GET"
        assert request.headers["Accept"] == "text/html"
        assert request.query["a"] == "1"
        assert request.client == ("127.0.0.1", 5000)
        assert await request.body() == b"hello"


class TestResponse:
    def test_defaults(self) -> None:
        response = Response("hi")
        assert response.status == 200
        assert response.content_type.startswith("text/html")
        assert response.body_bytes == b"hi"

    def test_transformations_return_new_objects(self) -> None:
        original = Response("hi")
        changed = original.with_status(201).with_header("X-Id", "7").with_content_type("text/plain")
        assert original.status == 200
        assert original.headers == ()
        assert changed.status == 201
        assert changed.header("x-id") == "7"
        assert changed.content_type == "text/plain"

    def test_with_headers(self) -> None:
        response = Response().with_headers({"A": "1", "B": "2"})
        assert response.header("a") == "1"
        assert response.header("b") == "2"

    def test_text_from_bytes(self) -> None:
        assert Response(b"caf\xc3\xa9").text == "café"
