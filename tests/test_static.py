"""Tests for switchyard.middleware.static — static file serving."""

import pytest

from switchyard.app import App
from switchyard.middleware.static import serve_static
from switchyard.testing import TestClient


@pytest.fixture
def static_dir(tmp_path):
    """Create temporary static files for testing."""
    static = tmp_path / "public"
    static.mkdir()

    (static / "style.css").write_text("body { color: red; }")
    (static / "index.html").write_text("<h1>Home</h1>")
    (static / "data.bin").write_bytes(b"\x00\x01\x02\x03")

    docs = static / "docs"
    docs.mkdir()
    (docs / "index.html").write_text("<h1>Docs</h1>")

    (static / "empty").mkdir()
    (tmp_path / "secret.txt").write_text("top secret")
    return static


async def fallback(request, response, next):
    response.status(404).send(f"fallback {request.path}")


class TestServeStatic:
    async def test_serves_file(self, static_dir) -> None:
        app = App()
        app.use(serve_static(static_dir))

        async with TestClient(app) as client:
            response = await client.get("/style.css")

        assert response.status == 200
        assert "text/css" in response.content_type
        assert response.text == "body { color: red; }"
        assert response.header("cache-control") == "public, max-age=0"

    async def test_binary_file(self, static_dir) -> None:
        app = App()
        app.use(serve_static(static_dir))

        async with TestClient(app) as client:
            response = await client.get("/data.bin")

        assert response.body_bytes == b"\x00\x01\x02\x03"

    async def test_root_index(self, static_dir) -> None:
        app = App()
        app.use(serve_static(static_dir))

        async with TestClient(app) as client:
            response = await client.get("/")

        assert response.text == "<h1>Home</h1>"

    async def test_directory_redirects_to_trailing_slash(self, static_dir) -> None:
        app = App()
        app.use(serve_static(static_dir))

        async with TestClient(app) as client:
            response = await client.get("/docs")
            assert response.status == 301
            assert response.header("location") == "/docs/"

            response = await client.get("/docs/")
            assert response.text == "<h1>Docs</h1>"

    async def test_directory_without_index_falls_through(self, static_dir) -> None:
        app = App()
        app.use(serve_static(static_dir))
        app.use(fallback)

        async with TestClient(app) as client:
            response = await client.get("/empty")

        assert response.text == "fallback /empty"

    async def test_missing_file_falls_through(self, static_dir) -> None:
        app = App()
        app.use(serve_static(static_dir))
        app.get("/hello", lambda request, response, next: response.send("route"))

        async with TestClient(app) as client:
            assert (await client.get("/hello")).text == "route"
            assert (await client.get("/missing.css")).status == 404

    async def test_no_fallthrough(self, static_dir) -> None:
        app = App()
        app.use(serve_static(static_dir, fallthrough=False))
        app.get("/hello", lambda request, response, next: response.send("route"))

        async with TestClient(app) as client:
            response = await client.get("/hello")

        assert response.status == 404

    async def test_traversal_forbidden(self, static_dir) -> None:
        app = App()
        app.use(serve_static(static_dir))

        async with TestClient(app) as client:
            response = await client.get("/../secret.txt")

        assert response.status == 403
        assert "top secret" not in response.text

    async def test_only_get_and_head(self, static_dir) -> None:
        app = App()
        app.use(serve_static(static_dir))
        app.use(fallback)

        async with TestClient(app) as client:
            assert (await client.post("/style.css")).text == "fallback /style.css"
            head = await client.head("/style.css")
            assert head.status == 200
            assert head.body_bytes == b""

    async def test_under_mount_prefix(self, static_dir) -> None:
        app = App()
        app.use("/static", serve_static(static_dir, cache_control="no-cache"))

        async with TestClient(app) as client:
            response = await client.get("/static/style.css")
            assert response.text == "body { color: red; }"
            assert response.header("cache-control") == "no-cache"

            response = await client.get("/static/docs")
            assert response.header("location") == "/static/docs/"

            assert (await client.get("/style.css")).status == 404
