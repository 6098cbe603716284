"""Static file serving middleware.

Serves files from a directory. Mount it with ``use()``; the mount prefix
is already stripped from ``request.path``, so the same middleware works
at the root or under ``/static``::

    app.use(serve_static("public"))
    app.use("/assets", serve_static("build/assets", cache_control="no-cache"))

Falls through to the next handler for anything it does not serve.
"""

from pathlib import Path
from urllib.parse import quote

from switchyard.context import RequestContext
from switchyard.errors import HTTPError, NotFound
from switchyard.http.builder import ResponseBuilder
from switchyard.routing.router import Next


class StaticFiles:
    """Middleware that serves static files from a directory.

    Security: resolves symlinks and verifies the final path is within
    the configured directory to prevent path traversal.
    """

    __slots__ = ("_cache_control", "_directory", "_fallthrough", "_index")

    def __init__(
        self,
        directory: str | Path,
        *,
        index: str | None = "index.html",
        fallthrough: bool = True,
        cache_control: str = "public, max-age=0",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._index = index
        self._fallthrough = fallthrough
        self._cache_control = cache_control

    @property
    def directory(self) -> Path:
        return self._directory

    async def __call__(
        self,
        request: RequestContext,
        response: ResponseBuilder,
        next: Next,
    ) -> None:
        """Serve a static file or fall through."""
        # Only serve GET and HEAD
        if request.method not in ("GET", "HEAD"):
            await next()
            return

        path = request.path
        relative = path.lstrip("/")

        # Resolve the file path and check for traversal
        file_path = (self._directory / relative).resolve() if relative else self._directory
        if not file_path.is_relative_to(self._directory):
            await next(HTTPError(403, "Forbidden"))
            return

        # Directory: try index file or redirect for trailing slash
        if file_path.is_dir():
            index_path = file_path / self._index if self._index else None
            if index_path is None or not index_path.is_file():
                await self._miss(request, next)
                return
            if not path.endswith("/"):
                response.redirect(quote(request.original_path) + "/", 301)
                return
            file_path = index_path

        if not file_path.is_file():
            await self._miss(request, next)
            return

        await response.send_file(file_path, cache_control=self._cache_control)

    async def _miss(self, request: RequestContext, next: Next) -> None:
        if self._fallthrough:
            await next()
        else:
            await next(NotFound(f"Cannot {request.method} {request.original_path}"))


def serve_static(
    directory: str | Path,
    *,
    index: str | None = "index.html",
    fallthrough: bool = True,
    cache_control: str = "public, max-age=0",
) -> StaticFiles:
    """Create static file middleware for *directory*."""
    return StaticFiles(
        directory,
        index=index,
        fallthrough=fallthrough,
        cache_control=cache_control,
    )
