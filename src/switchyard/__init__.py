"""Switchyard — Express-style routing and middleware dispatch for ASGI.

Routes, middleware and sub-routers are registered in order and run as
handler chains that steer dispatch through ``next``.

Basic usage::

    from switchyard import App, Router

    app = App()

    async def index(request, response, next):
        response.send("Hello World!")

    app.get("/", index)

    birds = Router()
    birds.get("/about", lambda request, response, next: response.send("About birds"))
    app.mount("/birds", birds)

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "UNHANDLED",
    "App",
    "AppConfig",
    "ConfigurationError",
    "HTTPError",
    "NotAcceptable",
    "NotFound",
    "PatternError",
    "Request",
    "RequestContext",
    "Response",
    "ResponseAlreadySent",
    "ResponseBuilder",
    "Router",
    "Signal",
    "StalledChainError",
    "SwitchyardError",
    "get_request",
    "request_logger",
    "serve_static",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    if name == "App":
        from switchyard.app import App

        return App

    if name == "AppConfig":
        from switchyard.config import AppConfig

        return AppConfig

    if name == "Request":
        from switchyard.http.request import Request

        return Request

    if name == "Response":
        from switchyard.http.response import Response

        return Response

    if name == "ResponseBuilder":
        from switchyard.http.builder import ResponseBuilder

        return ResponseBuilder

    if name in ("Router", "Signal", "UNHANDLED"):
        from switchyard import routing as _routing

        return getattr(_routing, name)

    if name in ("RequestContext", "get_request"):
        from switchyard import context as _ctx

        return getattr(_ctx, name)

    if name in ("request_logger", "serve_static"):
        from switchyard import middleware as _mw

        return getattr(_mw, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "NotAcceptable",
        "NotFound",
        "PatternError",
        "ResponseAlreadySent",
        "StalledChainError",
        "SwitchyardError",
    ):
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
