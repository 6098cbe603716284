"""Server startup.

Starts a pounce ASGI server with the live switchyard App object.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from switchyard.app import App


def run_server(
    app: App,
    host: str,
    port: int,
    *,
    workers: int = 1,
    reload: bool = False,
    log_level: str = "info",
    app_path: str | None = None,
) -> None:
    """Start a pounce server with the given switchyard App.

    Pounce's ``run()`` takes an import string (e.g., ``"myapp:app"``),
    but switchyard has a live ``App`` object. We use ``pounce.Server``
    directly with the ASGI callable.

    Args:
        app: ASGI callable (switchyard App instance).
        host: Bind host address.
        port: Bind port number.
        workers: Worker count. Reload forces a single worker.
        reload: Enable auto-reload on file changes.
        log_level: Log level (debug, info, warning, error, critical).
        app_path: Optional ``"module:attribute"`` import string.  When
            provided, pounce reimports the app on each reload cycle.
    """
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError as exc:
        msg = "Serving requires pounce: pip install 'switchyard[server]'"
        raise RuntimeError(msg) from exc

    config = ServerConfig(
        host=host,
        port=port,
        workers=1 if reload else workers,
        reload=reload,
        log_level=log_level,
    )
    server = Server(config, app, app_path=app_path)
    server.run()
