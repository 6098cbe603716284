"""Tests for switchyard.server — ASGI sending, error mapping, request handling."""

from typing import Any

from switchyard.context import RequestContext
from switchyard.errors import HTTPError, NotFound
from switchyard.http.response import Response
from switchyard.routing.router import Router
from switchyard.server.errors import handle_http_error, handle_internal_error
from switchyard.server.handler import handle_request, unhandled_response
from switchyard.server.sender import send_response


class _Collector:
    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def start(self) -> dict[str, Any]:
        return self.messages[0]

    @property
    def headers(self) -> dict[bytes, bytes]:
        return dict(self.start["headers"])

    @property
    def body(self) -> bytes:
        return self.messages[1]["body"]


class TestSendResponse:
    async def test_basic(self) -> None:
        send = _Collector()
        await send_response(Response(body="hello", headers=(("X-Test", "1"),)), send)

        assert send.start["type"] == "http.response.start"
        assert send.start["status"] == 200
        assert send.headers[b"content-type"] == b"text/html; charset=utf-8"
        assert send.headers[b"x-test"] == b"1"
        assert send.headers[b"content-length"] == b"5"
        assert send.body == b"hello"

    async def test_head_keeps_length_drops_body(self) -> None:
        send = _Collector()
        await send_response(Response(body="hello"), send, head=True)

        assert send.headers[b"content-length"] == b"5"
        assert send.body == b""

    async def test_no_body_statuses(self) -> None:
        for status in (204, 304):
            send = _Collector()
            await send_response(Response(body="ignored", status=status), send)
            assert send.headers[b"content-length"] == b"0"
            assert send.body == b""

    async def test_repeated_headers_kept(self) -> None:
        send = _Collector()
        response = Response(body="").with_header("Set-Cookie", "a=1").with_header("Set-Cookie", "b=2")
        await send_response(response, send)

        cookies = [v for k, v in send.start["headers"] if k == b"set-cookie"]
        assert cookies == [b"a=1", b"b=2"]


class TestErrorResponses:
    def test_http_error(self) -> None:
        ctx = RequestContext.create("GET", "/x")
        response = handle_http_error(HTTPError(409, "Conflict here"), ctx)
        assert response.status == 409
        assert response.text == "Conflict here"
        assert "text/plain" in response.content_type

    def test_http_error_without_detail_uses_phrase(self) -> None:
        ctx = RequestContext.create("GET", "/x")
        assert handle_http_error(HTTPError(418), ctx).text == "I'm a Teapot"

    def test_internal_error_hides_detail(self) -> None:
        ctx = RequestContext.create("GET", "/x")
        response = handle_internal_error(ValueError("secret"), ctx, debug=False)
        assert response.status == 500
        assert "secret" not in response.text


class TestUnhandledResponse:
    def test_not_found_names_original_path(self) -> None:
        ctx = RequestContext.create("DELETE", "/birds/about")
        ctx.path = "/about"
        response = unhandled_response(ctx)
        assert response.status == 404
        assert response.text == "Cannot DELETE /birds/about"

    def test_options_without_matches_is_404(self) -> None:
        ctx = RequestContext.create("OPTIONS", "/nothing")
        assert unhandled_response(ctx).status == 404

    def test_options_allow(self) -> None:
        ctx = RequestContext.create("OPTIONS", "/book")
        ctx.allowed_methods.update({"PUT", "GET"})
        response = unhandled_response(ctx)
        assert response.status == 200
        assert response.header("Allow") == "GET, HEAD, PUT"


def _http_scope(method: str, path: str) -> dict[str, Any]:
    return {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": b"",
        "headers": [],
    }


async def _receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


class TestHandleRequest:
    async def test_dispatches_through_router(self) -> None:
        router = Router()
        router.get("/", lambda request, response, next: response.send("home"))
        send = _Collector()

        await handle_request(_http_scope("GET", "/"), _receive, send, router=router)

        assert send.start["status"] == 200
        assert send.body == b"home"

    async def test_not_found_error_from_handler(self) -> None:
        router = Router()

        async def missing(request, response, next):
            raise NotFound()

        router.get("/", missing)
        send = _Collector()

        await handle_request(_http_scope("GET", "/"), _receive, send, router=router)

        assert send.start["status"] == 404
        assert send.body == b"Not Found"

    async def test_ignores_non_http_scopes(self) -> None:
        send = _Collector()
        await handle_request({"type": "websocket"}, _receive, send, router=Router())
        assert send.messages == []
