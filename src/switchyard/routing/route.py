"""Chained per-method registration on a single pattern."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from switchyard.routing.pattern import RoutePattern
    from switchyard.routing.router import Router


class RouteBuilder:
    """Returned by ``Router.route(pattern)``.

    The pattern is compiled once; each method call appends an ordinary
    route registration to the owning router, so the chain below is
    exactly three registrations, in this order::

        router.route("/book").get(get_book).post(add_book).put(update_book)
    """

    __slots__ = ("_router", "pattern")

    def __init__(self, router: Router, pattern: RoutePattern) -> None:
        self._router = router
        self.pattern = pattern

    def _add(self, method: str | None, handlers: tuple[Any, ...]) -> RouteBuilder:
        self._router._add_route(method, self.pattern, handlers)
        return self

    def get(self, *handlers: Any) -> RouteBuilder:
        return self._add("GET", handlers)

    def post(self, *handlers: Any) -> RouteBuilder:
        return self._add("POST", handlers)

    def put(self, *handlers: Any) -> RouteBuilder:
        return self._add("PUT", handlers)

    def patch(self, *handlers: Any) -> RouteBuilder:
        return self._add("PATCH", handlers)

    def delete(self, *handlers: Any) -> RouteBuilder:
        return self._add("DELETE", handlers)

    def head(self, *handlers: Any) -> RouteBuilder:
        return self._add("HEAD", handlers)

    def options(self, *handlers: Any) -> RouteBuilder:
        return self._add("OPTIONS", handlers)

    def all(self, *handlers: Any) -> RouteBuilder:
        return self._add(None, handlers)

    def __repr__(self) -> str:
        return f"<RouteBuilder {self.pattern.source!r}>"
