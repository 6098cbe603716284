"""Ordered router with Express-style chain dispatch.

Registrations are kept in one list, in the order they were made, and
that order is the precedence: dispatch walks the list, runs the chain of
every registration whose method and pattern match, and stops as soon as
a handler produces a response.

Usage::

    router = Router()
    router.use(request_logger())
    router.get("/users/:id(\\d+)", load_user, show_user)
    router.mount("/birds", birds)

    result = await router.dispatch(RequestContext.create("GET", "/users/42"))
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from switchyard._internal.invoke import accepts_error, invoke
from switchyard._internal.types import Handler
from switchyard.context import RequestContext
from switchyard.errors import ConfigurationError, ResponseAlreadySent, StalledChainError
from switchyard.http.response import Response
from switchyard.routing.layer import MountRegistration, Registration, RouteRegistration, Step
from switchyard.routing.pattern import PatternMatch, RoutePattern, compile_pattern
from switchyard.routing.route import RouteBuilder
from switchyard.routing.signals import UNHANDLED, Signal, Unhandled

logger = logging.getLogger("switchyard.routing")

_METHOD = re.compile(r"[A-Z][A-Z0-9_-]*")

# What a handler (or a sub-router) hands back to the level above it.
type Outcome = Signal | BaseException | None
type Continuation = Callable[[Outcome], Awaitable[None]]

# The `next` handed to handlers: called with no argument, a Signal or an exception.
type Next = Callable[..., Awaitable[None]]


@dataclass(frozen=True, slots=True)
class RouteInfo:
    """A flattened view of one registration, with mount prefixes joined."""

    method: str
    path: str
    handlers: tuple[str, ...]


def _flatten(items: Iterable[Any]) -> Iterator[Any]:
    for item in items:
        if isinstance(item, (list, tuple)):
            yield from _flatten(item)
        else:
            yield item


def _normalize_method(method: str) -> str | None:
    verb = method.strip().upper()
    if verb in ("*", "ALL"):
        return None
    if not _METHOD.fullmatch(verb):
        msg = f"Invalid HTTP method {method!r}."
        raise ConfigurationError(msg)
    return verb


def _join(prefix: str, path: str) -> str:
    joined = prefix.rstrip("/") + "/" + path.lstrip("/")
    return joined if joined == "/" else joined.rstrip("/") or "/"


class Router:
    """An ordered collection of routes, middleware and mounted routers.

    Mutable during setup, frozen once serving starts (``freeze()``,
    called by ``App`` on first request). A frozen router is shared
    read-only by every in-flight request.

    Options:
        case_sensitive: ``/About`` and ``/about`` are different routes.
        strict: ``/about`` and ``/about/`` are different routes.
        merge_params: a mounted router also sees its parent's params.

    Dispatch depth:
        ``next`` is a continuation, so every layer that awaits it stays on
        the stack until the response is produced. Each pass-through
        middleware costs a handful of frames; around 150 stacked layers
        per request fit under the default recursion limit.
    """

    __slots__ = ("_frozen", "_stack", "case_sensitive", "merge_params", "name", "strict")

    def __init__(
        self,
        *,
        name: str | None = None,
        case_sensitive: bool = False,
        strict: bool = False,
        merge_params: bool = False,
    ) -> None:
        self.name = name
        self.case_sensitive = case_sensitive
        self.strict = strict
        self.merge_params = merge_params
        self._stack: list[Registration] = []
        self._frozen = False

    def __repr__(self) -> str:
        label = f" {self.name!r}" if self.name else ""
        return f"<Router{label} registrations={len(self._stack)}>"

    # -- Registration --

    @property
    def registrations(self) -> tuple[Registration, ...]:
        """Registrations in dispatch order."""
        return tuple(self._stack)

    def register(self, method: str, pattern: str | re.Pattern[str], *handlers: Any) -> Any:
        """Register a handler chain for *method* (``"*"`` for any) and *pattern*.

        Handlers may be passed flat or in nested lists. Without handlers,
        returns a decorator::

            @router.register("GET", "/about")
            async def about(request, response, next):
                response.send("About birds")
        """
        self._check_not_frozen()
        verb = _normalize_method(method)
        compiled = self.compile(pattern)

        if not handlers:

            def decorator(func: Handler) -> Handler:
                self._add_route(verb, compiled, (func,))
                return func

            return decorator

        self._add_route(verb, compiled, handlers)
        return self

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

    def head(self, pattern: str | re.Pattern[str], *handlers: Any) -> Any:
        return self.register("HEAD", pattern, *handlers)

    def options(self, pattern: str | re.Pattern[str], *handlers: Any) -> Any:
        return self.register("OPTIONS", pattern, *handlers)

    def all(self, pattern: str | re.Pattern[str], *handlers: Any) -> Any:
        """Register a chain that runs for every method."""
        return self.register("*", pattern, *handlers)

    def route(self, pattern: str | re.Pattern[str]) -> RouteBuilder:
        """Start a chain of per-method registrations on one pattern.

        Usage::

            router.route("/book").get(list_books).post(add_book).put(update_book)
        """
        self._check_not_frozen()
        return RouteBuilder(self, self.compile(pattern))

    def use(self, *args: Any) -> Router:
        """Register middleware or routers under an optional prefix.

        ``use(handler, ...)`` applies to every path; ``use("/api", ...)``
        only to paths under ``/api``, with the prefix stripped from
        ``request.path`` while the handler runs. Four-parameter handlers
        are error middleware.
        """
        self._check_not_frozen()
        items = list(args)
        prefix: str | re.Pattern[str] = "/"
        if items and isinstance(items[0], (str, re.Pattern)):
            prefix = items.pop(0)
        targets = list(_flatten(items))
        if not targets:
            msg = "use() requires at least one handler or router."
            raise ConfigurationError(msg)

        compiled = self.compile(prefix, end=False)
        pending: list[Registration] = []
        for target in targets:
            if isinstance(target, Router):
                self._check_mountable(target)
                pending.append(MountRegistration(compiled, target))
            elif callable(target):
                pending.append(MountRegistration(compiled, target, accepts_error(target)))
            else:
                msg = f"Middleware must be callable or a Router, got {type(target).__name__}."
                raise ConfigurationError(msg)

        self._stack.extend(pending)
        for registration in pending:
            logger.debug("USE %s -> %s", compiled.source or "/", registration.name)
        return self

    def mount(self, prefix: str | re.Pattern[str], router: Router) -> Router:
        """Attach *router* under *prefix*."""
        if not isinstance(router, Router):
            msg = f"mount() expects a Router, got {type(router).__name__}."
            raise ConfigurationError(msg)
        return self.use(prefix, router)

    def compile(self, pattern: str | re.Pattern[str], *, end: bool = True) -> RoutePattern:
        """Compile *pattern* with this router's matching options."""
        return compile_pattern(
            pattern,
            end=end,
            case_sensitive=self.case_sensitive,
            strict=self.strict,
        )

    def freeze(self) -> None:
        """Disallow further registration here and in every mounted router."""
        if self._frozen:
            return
        self._frozen = True
        for registration in self._stack:
            if isinstance(registration, MountRegistration) and registration.router is not None:
                registration.router.freeze()

    @property
    def frozen(self) -> bool:
        return self._frozen

    def iter_routes(self, prefix: str = "") -> Iterator[RouteInfo]:
        """Yield every registration in dispatch order, descending into mounts."""
        for registration in self._stack:
            if isinstance(registration, RouteRegistration):
                yield RouteInfo(
                    registration.method_label,
                    _join(prefix, registration.pattern.source),
                    tuple(step.name for step in registration.steps),
                )
            elif registration.router is not None:
                yield from registration.router.iter_routes(
                    _join(prefix, registration.pattern.source)
                )
            else:
                yield RouteInfo(
                    "USE",
                    _join(prefix, registration.pattern.source),
                    (registration.name,),
                )

    # -- Dispatch --

    async def dispatch(self, context: RequestContext) -> Response | Unhandled:
        """Run *context* through the registrations.

        Returns the produced ``Response``, or ``UNHANDLED`` when every
        matching chain ran out without responding. An error no error
        handler dealt with is re-raised.
        """

        async def finish(outcome: Outcome) -> None:
            if isinstance(outcome, BaseException):
                raise outcome

        await self.handle(context, finish)

        if context.response.result is not None:
            return context.response.result
        logger.debug("Unhandled %s %s", context.method, context.original_path)
        return UNHANDLED

    async def handle(self, ctx: RequestContext, out: Continuation) -> None:
        """Walk this router's registrations, then hand control to *out*.

        *out* is the continuation of the enclosing router (or the final
        step of ``dispatch``). It receives a pending error, if any.
        """
        stack = self._stack
        index = 0
        entry_path = ctx.path
        entry_base = ctx.base_path
        entry_params = ctx.params

        async def next_registration(outcome: Outcome = None) -> None:
            nonlocal index
            ctx.path = entry_path
            ctx.base_path = entry_base

            if outcome is Signal.SKIP_ROUTER:
                ctx.params = entry_params
                await out(None)
                return

            error = outcome if isinstance(outcome, BaseException) else None

            while index < len(stack):
                registration = stack[index]
                index += 1
                matched = registration.pattern.match(ctx.path)
                if matched is None:
                    continue

                if isinstance(registration, RouteRegistration):
                    if error is not None:
                        continue
                    if not registration.handles(ctx.method):
                        if registration.method is not None:
                            ctx.allowed_methods.add(registration.method)
                        continue
                    ctx.params = self._merge(entry_params, matched)
                    ctx.route = registration
                    await _run_chain(ctx, registration, next_registration)
                    return

                child = registration.router
                if child is not None and error is not None:
                    continue
                if child is None and registration.takes_error != (error is not None):
                    continue

                ctx.params = self._merge(entry_params, matched)
                if matched.path:
                    ctx.base_path = entry_base + matched.path
                    remainder = ctx.path[len(matched.path) :]
                    ctx.path = remainder if remainder.startswith("/") else "/" + remainder

                if child is not None:
                    await child.handle(ctx, next_registration)
                else:
                    await _call(
                        registration.target,
                        registration.takes_error,
                        ctx,
                        next_registration,
                        error,
                    )
                return

            ctx.params = entry_params
            await out(error)

        await next_registration()

    # -- Internal --

    def _add_route(
        self,
        method: str | None,
        pattern: RoutePattern,
        handlers: Iterable[Any],
    ) -> RouteRegistration:
        self._check_not_frozen()
        flat = list(_flatten(handlers))
        label = method or "*"
        if not flat:
            msg = f"No handlers given for {label} {pattern.source!r}."
            raise ConfigurationError(msg)
        for handler in flat:
            if isinstance(handler, Router):
                msg = (
                    f"Router passed as a handler for {label} {pattern.source!r}; "
                    "attach routers with use() or mount()."
                )
                raise ConfigurationError(msg)
            if not callable(handler):
                msg = f"Route handler must be callable, got {type(handler).__name__}."
                raise ConfigurationError(msg)

        registration = RouteRegistration(
            method,
            pattern,
            tuple(Step(handler, accepts_error(handler)) for handler in flat),
        )
        self._stack.append(registration)
        logger.debug("%s %s -> %d handler(s)", label, pattern.source, len(flat))
        return registration

    def _merge(self, parent: dict[str, str], matched: PatternMatch) -> dict[str, str]:
        if self.merge_params:
            return {**parent, **matched.params}
        return dict(matched.params)

    def _descendants(self) -> Iterator[Router]:
        for registration in self._stack:
            if isinstance(registration, MountRegistration) and registration.router is not None:
                yield registration.router
                yield from registration.router._descendants()

    def _check_mountable(self, child: Router) -> None:
        if child is self or any(r is self for r in child._descendants()):
            msg = "Cannot mount a router inside itself."
            raise ConfigurationError(msg)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify a router after it has started serving requests. "
                "Register routes and middleware before the first request."
            )
            raise RuntimeError(msg)


async def _run_chain(
    ctx: RequestContext,
    registration: RouteRegistration,
    out: Continuation,
) -> None:
    """Run one registration's handlers in order."""
    steps = registration.steps
    position = 0

    async def next_step(outcome: Outcome = None) -> None:
        nonlocal position
        if outcome is Signal.SKIP_ROUTE:
            await out(None)
            return
        if outcome is Signal.SKIP_ROUTER:
            await out(Signal.SKIP_ROUTER)
            return

        error = outcome if isinstance(outcome, BaseException) else None
        while position < len(steps):
            step = steps[position]
            position += 1
            # While an error is pending only error handlers run, and
            # error handlers never run without one.
            if step.takes_error != (error is not None):
                continue
            await _call(step.func, step.takes_error, ctx, next_step, error)
            return

        await out(error)

    await next_step()


async def _call(
    handler: Handler,
    takes_error: bool,
    ctx: RequestContext,
    proceed: Continuation,
    error: BaseException | None,
) -> None:
    """Invoke one handler and translate how it finished into an outcome."""
    called = False

    async def next_(signal: Outcome = None) -> None:
        nonlocal called
        if called:
            name = getattr(handler, "__qualname__", repr(handler))
            msg = f"next() called more than once by {name}."
            raise ConfigurationError(msg)
        called = True
        if ctx.response.finished:
            if isinstance(signal, BaseException):
                raise signal
            return
        await proceed(None if signal is Signal.CONTINUE else signal)

    response = ctx.response
    try:
        if takes_error:
            result = await invoke(handler, error, ctx, response, next_)
        else:
            result = await invoke(handler, ctx, response, next_)
    except (ResponseAlreadySent, StalledChainError):
        raise
    except Exception as exc:
        if called:
            raise
        called = True
        await proceed(exc)
        return

    if called:
        return
    if isinstance(result, Signal):
        called = True
        await proceed(None if result is Signal.CONTINUE else result)
        return
    if response.finished or response.respond(result):
        return
    raise StalledChainError(handler, ctx.original_path)
