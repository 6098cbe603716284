"""Invoke helpers — call sync or async handlers uniformly.

Switchyard handlers can be ``def`` or ``async def``. Anything that calls
a user-provided handler goes through :func:`invoke` so the sync/async
check lives in exactly one place.

Usage::

    from switchyard._internal.invoke import invoke

    result = await invoke(handler, request, response, next)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Sync handlers cannot await ``next``, so they signal by return value::

        def only_admins(request, response, next):
            if request.state.get("user") != "admin":
                return Signal.SKIP_ROUTE
            return Signal.CONTINUE

        async def load_user(request, response, next):
            request.state["user"] = await lookup(request.params["id"])
            await next()
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def accepts_error(handler: Any) -> bool:
    """True if *handler* takes ``(error, request, response, next)``.

    Error handlers are recognised by shape: four or more positional
    parameters without defaults, so ``(request, response, next, extra=None)``
    stays a regular handler. Anything that cannot be introspected is
    treated as a regular handler.
    """
    try:
        sig = inspect.signature(handler)
    except (TypeError, ValueError):
        return False
    positional = [
        p
        for p in sig.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
    ]
    return len(positional) >= 4
