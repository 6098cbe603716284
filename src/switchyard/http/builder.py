"""Per-request response builder.

Handlers receive a ``ResponseBuilder`` as their second argument. It
collects status and headers, then one terminal call (``send``, ``json``,
``render``, ``redirect``, ``end``, ``send_status``, ``send_file`` or a
branch of ``format``) freezes the result into a ``Response`` and ends
dispatch. A second terminal call raises ``ResponseAlreadySent``.
"""

from __future__ import annotations

import json as json_module
import mimetypes
from collections.abc import Callable, Mapping
from http import HTTPStatus
from pathlib import Path
from typing import TYPE_CHECKING, Any

import anyio.to_thread

from switchyard._internal.invoke import invoke
from switchyard.errors import ConfigurationError, NotAcceptable, ResponseAlreadySent
from switchyard.http.negotiation import best_match, normalize_type
from switchyard.http.request import Request
from switchyard.http.response import Response

if TYPE_CHECKING:
    from kida import Environment

_TEXTUAL = ("text/", "application/json", "application/javascript", "application/xml")


def _with_charset(mime: str) -> str:
    if "charset=" not in mime and mime.startswith(_TEXTUAL):
        return f"{mime}; charset=utf-8"
    return mime


class ResponseBuilder:
    """Mutable response state for one request.

    Usage::

        async def show_user(request, response, next):
            user = await load(request.params["id"])
            response.status(200).set("Cache-Control", "no-store").json(user)
    """

    __slots__ = (
        "_content_type",
        "_headers",
        "_status",
        "app_locals",
        "locals",
        "renderer",
        "request",
        "result",
    )

    def __init__(
        self,
        request: Request,
        *,
        renderer: Environment | None = None,
        app_locals: Mapping[str, Any] | None = None,
    ) -> None:
        self.request = request
        self.renderer = renderer
        self.app_locals: Mapping[str, Any] = app_locals or {}
        self.locals: dict[str, Any] = {}
        self.result: Response | None = None
        self._status = 200
        self._headers: list[tuple[str, str]] = []
        self._content_type: str | None = None

    @property
    def finished(self) -> bool:
        """True once a terminal method produced the response."""
        return self.result is not None

    @property
    def status_code(self) -> int:
        return self._status

    # -- Non-terminal setters (chainable) --

    def status(self, code: int) -> ResponseBuilder:
        """Set the status code for the eventual response."""
        self._status = int(code)
        return self

    def set(self, name: str, value: str) -> ResponseBuilder:
        """Set a header, replacing earlier values of the same name."""
        if name.lower() == "content-type":
            return self.type(value)
        wanted = name.lower()
        self._headers = [(k, v) for k, v in self._headers if k.lower() != wanted]
        self._headers.append((name, value))
        return self

    def append(self, name: str, value: str) -> ResponseBuilder:
        """Add a header without replacing existing values."""
        self._headers.append((name, value))
        return self

    def get(self, name: str) -> str | None:
        """Current value of a pending header."""
        wanted = name.lower()
        if wanted == "content-type":
            return self._content_type
        for key, value in reversed(self._headers):
            if key.lower() == wanted:
                return value
        return None

    def type(self, mime: str) -> ResponseBuilder:
        """Set the Content-Type from a MIME type or short name (``json``)."""
        self._content_type = _with_charset(mime if "/" in mime else normalize_type(mime))
        return self

    def vary(self, field: str) -> ResponseBuilder:
        """Add *field* to the Vary header once."""
        current = self.get("Vary")
        fields = [f.strip() for f in current.split(",")] if current else []
        if field.lower() not in (f.lower() for f in fields):
            fields.append(field)
            self.set("Vary", ", ".join(fields))
        return self

    # -- Terminal methods --

    def send(self, body: str | bytes | dict[str, Any] | list[Any] = "") -> Response:
        """Finish with *body*: str as HTML, bytes as binary, dict/list as JSON."""
        if isinstance(body, (dict, list)):
            return self.json(body)
        if isinstance(body, bytes):
            default_type = "application/octet-stream"
        else:
            default_type = "text/html; charset=utf-8"
        return self._finish(body, self._content_type or default_type)

    def json(self, value: Any) -> Response:
        """Finish with *value* serialized as JSON."""
        body = json_module.dumps(value, default=str)
        return self._finish(body, self._content_type or "application/json")

    def render(self, name: str, /, **context: Any) -> Response:
        """Finish with template *name* rendered through kida.

        The render context is ``app.locals``, then ``response.locals``,
        then *context*, later keys winning.
        """
        if self.renderer is None:
            msg = (
                f"Cannot render {name!r}: no template environment. "
                "Set AppConfig(template_dir=...) or pass kida_env= to App()."
            )
            raise ConfigurationError(msg)
        template = self.renderer.get_template(name)
        html = template.render({**self.app_locals, **self.locals, **context})
        return self._finish(html, self._content_type or "text/html; charset=utf-8")

    def redirect(self, url: str, status: int = 302) -> Response:
        """Finish with a redirect to *url*."""
        self._status = status
        self.set("Location", url)
        return self._finish("", self._content_type or "text/plain; charset=utf-8")

    def send_status(self, code: int) -> Response:
        """Finish with *code* and its reason phrase as the body."""
        self._status = code
        try:
            phrase = HTTPStatus(code).phrase
        except ValueError:
            phrase = str(code)
        return self._finish(phrase, self._content_type or "text/plain; charset=utf-8")

    def end(self) -> Response:
        """Finish with an empty body."""
        return self._finish("", self._content_type or "text/plain; charset=utf-8")

    async def send_file(self, path: str | Path, *, cache_control: str | None = None) -> Response:
        """Finish with the contents of *path*, read off the event loop."""
        file_path = Path(path)
        body = await anyio.to_thread.run_sync(file_path.read_bytes)
        if self._content_type is None:
            guessed, _ = mimetypes.guess_type(file_path.name)
            self.type(guessed or "application/octet-stream")
        if cache_control is not None:
            self.set("Cache-Control", cache_control)
        return self._finish(body, self._content_type or "application/octet-stream")

    async def format(self, handlers: Mapping[str, Callable[[], Any]]) -> Any:
        """Run the callable whose type the client accepts best.

        Keys are MIME types or short names (``html``, ``text``, ``json``).
        A ``default`` key runs when nothing matches; without one,
        ``NotAcceptable`` is raised. The chosen type becomes the
        Content-Type unless the callable sets another.
        """
        self.vary("Accept")
        offers = [key for key in handlers if key != "default"]
        chosen = best_match(self.request.headers.get("accept"), offers)
        if chosen is None:
            if "default" in handlers:
                return await invoke(handlers["default"])
            raise NotAcceptable(
                tuple(normalize_type(key) for key in offers),
                headers=(("Vary", "Accept"),),
            )
        self.type(chosen)
        return await invoke(handlers[chosen])

    def respond(self, value: Any) -> bool:
        """Finish with a handler's return value, if it is one.

        ``Response`` is adopted as-is; ``str``/``bytes``/``dict``/``list``
        go through ``send``. Returns False for anything else.
        """
        match value:
            case Response():
                if self.finished:
                    raise ResponseAlreadySent("A response was already sent for this request.")
                self.result = value
                return True
            case str() | bytes() | dict() | list():
                self.send(value)
                return True
        return False

    # -- Internal --

    def _finish(self, body: str | bytes, content_type: str) -> Response:
        if self.finished:
            msg = (
                f"A response was already sent for {self.request.method} "
                f"{self.request.path!r}."
            )
            raise ResponseAlreadySent(msg)
        self.result = Response(
            body=body,
            status=self._status,
            content_type=content_type,
            headers=tuple(self._headers),
        )
        return self.result
