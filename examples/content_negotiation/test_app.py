"""Tests for the content negotiation example."""

from switchyard.testing import TestClient


class TestContentNegotiationApp:
    async def test_plain_text(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/book", headers={"Accept": "text/plain"})
            assert response.text == "The Wind in the Willows by Kenneth Grahame"
            assert response.content_type.startswith("text/plain")
            assert response.header("vary") == "Accept"

    async def test_html(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/book", headers={"Accept": "text/html"})
            assert response.text.startswith("<p><em>")
            assert "text/html" in response.content_type

    async def test_json_by_quality(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get(
                "/book",
                headers={"Accept": "text/html;q=0.5, application/json"},
            )
            assert "application/json" in response.content_type
            assert '"author": "Kenneth Grahame"' in response.text

    async def test_no_accept_picks_first(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/book")
            assert response.content_type.startswith("text/plain")

    async def test_not_acceptable(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/book", headers={"Accept": "image/png"})
            assert response.status == 406
            assert response.header("vary") == "Accept"

    async def test_default_handler(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/greeting", headers={"Accept": "image/png"})
            assert response.status == 200
            assert response.text == "hey"

    async def test_inline_accepts(self, example_app) -> None:
        async with TestClient(example_app) as client:
            as_json = await client.get("/inline", headers={"Accept": "application/json"})
            assert as_json.text == '{"inline": true}'
            as_html = await client.get("/inline", headers={"Accept": "text/html"})
            assert as_html.text == "<p>inline</p>"
