"""Error handling for requests no error middleware dealt with.

Maps HTTPError exceptions and unexpected failures to Response objects.
Error middleware registered on the router runs first; these defaults
only see what escaped it.
"""

import html
import logging
import traceback
from http import HTTPStatus

from switchyard.context import RequestContext
from switchyard.errors import HTTPError
from switchyard.http.response import Response

logger = logging.getLogger("switchyard.server")

_PLAIN = "text/plain; charset=utf-8"


def _phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return f"Error {status}"


def handle_http_error(exc: HTTPError, ctx: RequestContext) -> Response:
    """Map an HTTPError to a plain-text Response with the same status."""
    logger.debug("%d %s %s: %s", exc.status, ctx.method, ctx.original_path, exc.detail)

    resp = Response(body=exc.detail or _phrase(exc.status), status=exc.status, content_type=_PLAIN)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(exc: Exception, ctx: RequestContext, debug: bool) -> Response:
    """Handle unexpected exceptions as 500 errors.

    In debug mode the body is an HTML page with the traceback.
    """
    logger.error("500 %s %s", ctx.method, ctx.original_path, exc_info=exc)

    if debug:
        return Response(body=render_debug_page(exc, ctx), status=500)
    return Response(body="Internal Server Error", status=500, content_type=_PLAIN)


def render_debug_page(exc: BaseException, ctx: RequestContext) -> str:
    """Minimal HTML page showing the exception and its traceback."""
    trace = "".join(traceback.format_exception(exc))
    title = f"{type(exc).__name__}: {exc}"
    return (
        "<!DOCTYPE html>\n"
        f"<html><head><title>{html.escape(title)}</title></head><body>\n"
        f"<h1>{html.escape(title)}</h1>\n"
        f"<p>{html.escape(ctx.method)} {html.escape(ctx.original_path)}</p>\n"
        f"<pre>{html.escape(trace)}</pre>\n"
        "</body></html>\n"
    )
