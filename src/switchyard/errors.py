"""Switchyard exception hierarchy.

Shared across Router, App, handler, and middleware so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when routes, middleware, or app configuration are invalid.

    Registration-time problems surface here, synchronously, before the
    router changes state.
    """


class PatternError(ConfigurationError):
    """A route pattern could not be compiled."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid route pattern {pattern!r}: {reason}")


class ResponseAlreadySent(SwitchyardError):  # noqa: N818
    """A terminal response method was called twice for one request."""


class StalledChainError(SwitchyardError):
    """A handler returned without responding or signalling ``next``.

    Dispatch would otherwise wait forever for a request nobody is going
    to finish.
    """

    def __init__(self, handler: object, path: str) -> None:
        name = getattr(handler, "__qualname__", None) or repr(handler)
        self.handler = handler
        self.path = path
        super().__init__(
            f"Handler {name} for {path!r} returned without sending a response "
            "or calling next()."
        )


@dataclass(frozen=True, slots=True)
class HTTPError(SwitchyardError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers or middleware. The ASGI handler turns it into a
    response with the same status when no error middleware handled it.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: nothing handled the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class NotAcceptable(HTTPError):  # noqa: N818
    """406: none of the offered representations satisfy ``Accept``."""

    def __init__(
        self,
        offered: tuple[str, ...] = (),
        detail: str = "",
        headers: tuple[tuple[str, str], ...] = (("Vary", "Accept"),),
    ) -> None:
        default_detail = "Not Acceptable"
        if offered:
            default_detail = f"Not Acceptable. Available: {', '.join(offered)}"
        super().__init__(status=406, detail=detail or default_detail, headers=headers)
