"""Tests for the static site example."""

from switchyard.testing import TestClient


class TestStaticSiteApp:
    async def test_index(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/")
            assert response.status == 200
            assert "<h1>Static site</h1>" in response.text

    async def test_stylesheet_under_prefix(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/static/css/site.css")
            assert response.status == 200
            assert "text/css" in response.content_type
            assert response.header("cache-control") == "public, max-age=31536000"

    async def test_directory_redirect(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/docs")
            assert response.status == 301
            assert response.header("location") == "/docs/"

    async def test_falls_through_to_routes(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/api/ping")
            assert response.text == '{"pong": true}'

    async def test_missing_file(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/static/missing.css")
            assert response.status == 404
            assert response.text == "Cannot GET /static/missing.css"
