"""ASGI handler — translates ASGI scope/messages to switchyard types.

The only component that touches raw ASGI directly for HTTP. Converts
the scope to a ``Request``, runs it through the router, and sends the
outcome back through ASGI ``send()``.
"""

import logging
from collections.abc import Mapping
from typing import Any

from kida import Environment

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard.context import RequestContext, request_var
from switchyard.errors import HTTPError, NotFound
from switchyard.http.builder import ResponseBuilder
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.routing.router import Router
from switchyard.routing.signals import Unhandled
from switchyard.server.errors import handle_http_error, handle_internal_error
from switchyard.server.sender import send_response

logger = logging.getLogger("switchyard.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    renderer: Environment | None = None,
    app_locals: Mapping[str, Any] | None = None,
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the router."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    ctx = RequestContext(
        request,
        ResponseBuilder(request, renderer=renderer, app_locals=app_locals),
    )

    token = request_var.set(ctx)
    try:
        result = await router.dispatch(ctx)
        response = unhandled_response(ctx) if isinstance(result, Unhandled) else result
    except Exception as exc:
        if ctx.response.result is not None:
            # Raised after a response was produced; the client still gets it.
            logger.error(
                "Error after response for %s %s",
                ctx.method,
                ctx.original_path,
                exc_info=exc,
            )
            response = ctx.response.result
        elif isinstance(exc, HTTPError):
            response = handle_http_error(exc, ctx)
        else:
            response = handle_internal_error(exc, ctx, debug)
    finally:
        request_var.reset(token)

    await send_response(response, send, head=request.method == "HEAD")


def unhandled_response(ctx: RequestContext) -> Response:
    """Response for a request no chain answered.

    ``OPTIONS`` for a path other methods are registered on gets a 200
    with an ``Allow`` header; everything else is a 404.
    """
    if ctx.method == "OPTIONS" and ctx.allowed_methods:
        allowed = set(ctx.allowed_methods)
        if "GET" in allowed:
            allowed.add("HEAD")
        allow_value = ", ".join(sorted(allowed))
        return Response(
            body=allow_value,
            content_type="text/plain; charset=utf-8",
            headers=(("Allow", allow_value),),
        )
    return handle_http_error(NotFound(f"Cannot {ctx.method} {ctx.original_path}"), ctx)
