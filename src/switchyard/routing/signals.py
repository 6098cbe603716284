"""Control signals and the unhandled outcome.

A handler steers dispatch by awaiting ``next(...)`` or, from a sync
handler, by returning one of these::

    await next()                    # same as Signal.CONTINUE
    await next(Signal.SKIP_ROUTE)   # drop the rest of this route's chain
    await next(Signal.SKIP_ROUTER)  # leave the current (mounted) router
    await next(exc)                 # fail: route to the nearest error handler
"""

from enum import Enum


class Signal(Enum):
    """What the dispatcher should do after a handler."""

    CONTINUE = "continue"
    SKIP_ROUTE = "route"
    SKIP_ROUTER = "router"


class Unhandled:
    """Type of :data:`UNHANDLED`: no chain produced a response."""

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNHANDLED"


UNHANDLED = Unhandled()
