"""Middleware — plain handlers registered with ``use()``.

A middleware is any callable matching::

    async def mw(request: RequestContext, response: ResponseBuilder, next) -> None

Built-in middleware:
    request_logger -- One access-log line per request
    serve_static -- Serve static files from a directory
"""

from switchyard.middleware.logger import request_logger
from switchyard.middleware.static import StaticFiles, serve_static

__all__ = [
    "StaticFiles",
    "request_logger",
    "serve_static",
]
