"""Registration records held by a Router.

Both kinds are frozen: once registered, a route or mount never changes.
The router's stack is a list of these, in registration order, and that
order is the dispatch precedence.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from switchyard._internal.types import Handler
from switchyard.routing.pattern import RoutePattern

if TYPE_CHECKING:
    from switchyard.routing.router import Router


@dataclass(frozen=True, slots=True)
class Step:
    """One handler of a chain, classified once at registration."""

    func: Handler
    takes_error: bool = False

    @property
    def name(self) -> str:
        return getattr(self.func, "__qualname__", None) or type(self.func).__name__


@dataclass(frozen=True, slots=True)
class RouteRegistration:
    """``method`` + full-path pattern + handler chain.

    ``method`` is ``None`` for registrations that accept any method.
    """

    method: str | None
    pattern: RoutePattern
    steps: tuple[Step, ...]

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return tuple(step.func for step in self.steps)

    @property
    def method_label(self) -> str:
        return self.method or "*"

    def handles(self, method: str) -> bool:
        """Whether a request with *method* may run this chain.

        ``HEAD`` falls back to ``GET`` registrations.
        """
        if self.method is None or self.method == method:
            return True
        return method == "HEAD" and self.method == "GET"


@dataclass(frozen=True, slots=True)
class MountRegistration:
    """Prefix pattern + a middleware handler or a mounted Router."""

    pattern: RoutePattern
    target: Handler | Router
    takes_error: bool = False

    @property
    def router(self) -> Router | None:
        from switchyard.routing.router import Router

        return self.target if isinstance(self.target, Router) else None

    @property
    def name(self) -> str:
        if self.router is not None:
            return f"<router {self.router.name or hex(id(self.router))}>"
        return getattr(self.target, "__qualname__", None) or type(self.target).__name__


type Registration = RouteRegistration | MountRegistration
