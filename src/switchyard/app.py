"""Switchyard application class.

Mutable during setup (routes, middleware, mounts, hooks).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

from __future__ import annotations

import re
import threading
from typing import Any

from kida import Environment

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard._internal.invoke import invoke
from switchyard._internal.types import Hook
from switchyard.config import AppConfig
from switchyard.routing.route import RouteBuilder
from switchyard.routing.router import Router
from switchyard.server.handler import handle_request
from switchyard.templating.integration import create_environment


class App:
    """The switchyard application.

    Owns a root ``Router`` and forwards registration to it, so an app is
    set up exactly like a router::

        app = App()
        app.use(request_logger())
        app.get("/", lambda request, response, next: response.send("Hello World!"))
        app.mount("/birds", birds)

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check to ensure exactly
        one thread freezes the app, even when multiple ASGI workers call
        ``__call__()`` concurrently on first request.
    """

    __slots__ = (
        "_custom_kida_env",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
        "locals",
        "router",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        router: Router | None = None,
        kida_env: Environment | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self.router: Router = router or Router(
            name="app",
            case_sensitive=self.config.case_sensitive_routing,
            strict=self.config.strict_routing,
        )
        # Merged into every render context, under response.locals.
        self.locals: dict[str, Any] = {}
        self._startup_hooks: list[Hook] = []
        self._shutdown_hooks: list[Hook] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._custom_kida_env: Environment | None = kida_env
        self._kida_env: Environment | None = None

    # -- Registration (delegated to the root router) --

    def register(self, method: str, pattern: str | re.Pattern[str], *handlers: Any) -> Any:
        self._check_not_frozen()
        return self._chain(self.router.register(method, pattern, *handlers))

    def get(self, pattern: str | re.Pattern[str], *handlers: Any) -> Any:
        return self.register("GET", pattern, *handlers)

    def post(self, pattern: str | re.Pattern[str], *handlers: Any) -> Any:
        return self.register("POST", pattern, *handlers)

    def put(self, pattern: str | re.Pattern[str], *handlers: Any) -> Any:
        return self.register("PUT", pattern, *handlers)

    def patch(self, pattern: str | re.Pattern[str], *handlers: Any) -> Any:
        return self.register("PATCH", pattern, *handlers)

    def delete(self, pattern: str | re.Pattern[str], *handlers: Any) -> Any:
        return self.register("DELETE", pattern, *handlers)

    def all(self, pattern: str | re.Pattern[str], *handlers: Any) -> Any:
        return self.register("*", pattern, *handlers)

    def use(self, *args: Any) -> App:
        """Register middleware or routers on the root router."""
        self._check_not_frozen()
        self.router.use(*args)
        return self

    def mount(self, prefix: str | re.Pattern[str], router: Router) -> App:
        """Attach *router* under *prefix*."""
        self._check_not_frozen()
        self.router.mount(prefix, router)
        return self

    def route(self, pattern: str | re.Pattern[str]) -> RouteBuilder:
        self._check_not_frozen()
        return self.router.route(pattern)

    # -- Lifecycle hooks --

    def on_startup(self, func: Hook) -> Hook:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.

        Usage::

            @app.on_startup
            async def setup():
                await db.connect()
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Hook) -> Hook:
        """Register an async or sync shutdown hook via decorator.

        Hooks run in registration order during ASGI lifespan shutdown,
        after the server stops accepting new requests.
        """
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    @property
    def kida_env(self) -> Environment | None:
        """The template environment, available once the app is frozen."""
        return self._kida_env

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start a pounce server for this app.

        Freezes the app (routes, middleware, templates) and serves
        requests until interrupted. ``config.debug`` enables reload.
        """
        self._ensure_frozen()

        from switchyard.server.dev import run_server

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            workers=self.config.workers,
            reload=self.config.debug,
            log_level=self.config.log_level,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to
        the request handler.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()

        await handle_request(
            scope,
            receive,
            send,
            router=self.router,
            renderer=self._kida_env,
            app_locals=self.locals,
            debug=self.config.debug,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before first HTTP request), then
        runs registered startup/shutdown hooks and signals completion
        back to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    await send(
                        {
                            "type": "lifespan.startup.failed",
                            "message": str(exc),
                        }
                    )
                    return

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """Run startup hooks in registration order."""
        await _run_hooks(self._startup_hooks)

    async def shutdown(self) -> None:
        """Run shutdown hooks in registration order."""
        await _run_hooks(self._shutdown_hooks)

    # -- Internal --

    def _chain(self, result: Any) -> Any:
        # Router helpers return the router (or a decorator); an app hands
        # itself back so app.get(...).get(...) keeps working on the app.
        return self if result is self.router else result

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Freeze the router tree and create the template environment.

        MUST only be called while holding _freeze_lock.
        """
        self.router.freeze()
        self._kida_env = self._custom_kida_env or create_environment(self.config)
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and middleware before calling app.run()."
            )
            raise RuntimeError(msg)


async def _run_hooks(hooks: list[Hook]) -> None:
    for hook in hooks:
        await invoke(hook)
