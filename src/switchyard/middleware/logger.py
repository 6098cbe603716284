"""Request logging middleware."""

import logging
import time

from switchyard._internal.types import Handler
from switchyard.context import RequestContext
from switchyard.http.builder import ResponseBuilder
from switchyard.routing.router import Next


def request_logger(logger: logging.Logger | None = None) -> Handler:
    """Log one line per request once the rest of the chain has finished.

    Stamps ``request.state["request_time"]`` (a Unix timestamp) so later
    handlers can read when the request arrived::

        app.use(request_logger())

    The status is ``-`` when nothing responded; the app reports those
    as 404.
    """
    log = logger or logging.getLogger("switchyard.access")

    async def log_request(
        request: RequestContext,
        response: ResponseBuilder,
        next: Next,
    ) -> None:
        request.state["request_time"] = time.time()
        start = time.perf_counter()
        try:
            await next()
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            status = response.result.status if response.result is not None else "-"
            log.info(
                "%s %s %s %.1fms",
                request.method,
                request.original_path,
                status,
                elapsed_ms,
            )

    return log_request
