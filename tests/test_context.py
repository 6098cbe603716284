"""Tests for switchyard.context — RequestContext and the request contextvar."""

import pytest

from switchyard.context import RequestContext, get_request, request_var


class TestRequestContext:
    def test_initial_routing_state(self) -> None:
        ctx = RequestContext.create("get", "/users/42")
        assert ctx.method == "GET"
        assert ctx.path == "/users/42"
        assert ctx.original_path == "/users/42"
        assert ctx.base_path == ""
        assert ctx.params == {}
        assert ctx.state == {}
        assert ctx.route is None
        assert ctx.allowed_methods == set()

    def test_query_passthrough(self) -> None:
        ctx = RequestContext.create("GET", "/search", query="q=birds&page=2")
        assert ctx.query.get("q") == "birds"
        assert ctx.query.get("page") == "2"

    def test_headers_passthrough(self) -> None:
        ctx = RequestContext.create("GET", "/", headers={"X-Token": "abc"})
        assert ctx.headers.get("x-token") == "abc"

    async def test_body_passthrough(self) -> None:
        ctx = RequestContext.create(
            "POST",
            "/",
            headers={"Content-Type": "application/json"},
            body=b'{"a": 1}',
        )
        assert await ctx.json() == {"a": 1}
        assert await ctx.text() == '{"a": 1}'

    def test_accepts(self) -> None:
        ctx = RequestContext.create("GET", "/", headers={"Accept": "text/html, application/json;q=0.5"})
        assert ctx.accepts("json", "html") == "html"
        assert ctx.accepts("png") is None

    def test_response_bound_to_request(self) -> None:
        ctx = RequestContext.create("GET", "/")
        assert ctx.response.result is None
        assert ctx.response.finished is False


class TestGetRequest:
    def test_outside_request_raises(self) -> None:
        with pytest.raises(LookupError):
            get_request()

    def test_returns_current(self) -> None:
        ctx = RequestContext.create("GET", "/")
        token = request_var.set(ctx)
        try:
            assert get_request() is ctx
        finally:
            request_var.reset(token)
