"""Per-request dispatch context.

``RequestContext`` is what handlers receive as their first argument.
It wraps the immutable ``Request`` with the state routing needs:

- ``params``: captures of the registration currently running
- ``path`` / ``base_path``: path relative to the current router and the
  mount prefixes stripped so far
- ``state``: a free-form bag shared by every handler of this request
- ``response``: the ``ResponseBuilder`` handed to handlers

A context belongs to exactly one in-flight request. The ASGI handler
also publishes it through ``request_var`` so helpers deep in a call
stack can reach it with :func:`get_request`.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from switchyard.http.builder import ResponseBuilder
from switchyard.http.negotiation import best_match
from switchyard.http.request import Request

if TYPE_CHECKING:
    from kida import Environment

    from switchyard.http.headers import Headers
    from switchyard.http.query import QueryParams
    from switchyard.routing.layer import RouteRegistration


class RequestContext:
    """Mutable routing state for one request."""

    __slots__ = (
        "allowed_methods",
        "base_path",
        "method",
        "original_path",
        "params",
        "path",
        "request",
        "response",
        "route",
        "state",
    )

    def __init__(self, request: Request, response: ResponseBuilder | None = None) -> None:
        self.request = request
        self.response = response or ResponseBuilder(request)
        self.method: str = request.method.upper()
        self.original_path: str = request.path
        self.path: str = request.path or "/"
        self.base_path: str = ""
        self.params: dict[str, str] = {}
        self.state: dict[str, Any] = {}
        self.route: RouteRegistration | None = None
        # Methods of registrations whose pattern matched but whose method
        # did not; used to answer OPTIONS.
        self.allowed_methods: set[str] = set()

    @classmethod
    def create(
        cls,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        query: bytes | str = b"",
        body: bytes = b"",
        renderer: Environment | None = None,
        app_locals: Mapping[str, Any] | None = None,
    ) -> RequestContext:
        """Build a context without an ASGI server.

        Usage::

            ctx = RequestContext.create("GET", "/users/42")
            result = await router.dispatch(ctx)
        """
        request = Request.build(method, path, headers=headers, query=query, body=body)
        return cls(request, ResponseBuilder(request, renderer=renderer, app_locals=app_locals))

    # -- Request passthroughs --

    @property
    def headers(self) -> Headers:
        return self.request.headers

    @property
    def query(self) -> QueryParams:
        return self.request.query

    async def body(self) -> bytes:
        return await self.request.body()

    async def json(self) -> Any:
        return await self.request.json()

    async def text(self) -> str:
        return await self.request.text()

    def accepts(self, *types: str) -> str | None:
        """Return whichever of *types* the client prefers, or ``None``."""
        return best_match(self.request.headers.get("accept"), types)

    def __repr__(self) -> str:
        return f"<RequestContext {self.method} {self.original_path!r} params={self.params!r}>"


request_var: ContextVar[RequestContext] = ContextVar("switchyard_request")
"""The context of the request being handled. Set by the ASGI handler."""


def get_request() -> RequestContext:
    """Return the current request context.

    Raises ``LookupError`` if called outside a request.
    """
    return request_var.get()
