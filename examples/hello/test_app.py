"""Tests for the hello example."""

from switchyard.testing import TestClient


class TestHelloApp:
    """Verify every route in the hello example works through the ASGI pipeline."""

    async def test_index(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/")
            assert response.status == 200
            assert response.text == "Hello World!"

    async def test_greet_with_path_param(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/greet/alice")
            assert response.status == 200
            assert response.text == "Hello, alice!"

    async def test_json_response(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/api/status")
            assert "application/json" in response.content_type
            assert '"status": "ok"' in response.text

    async def test_custom_status_and_header(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/custom")
            assert response.status == 201
            assert response.text == "Created"
            assert response.header("x-custom") == "switchyard"

    async def test_wrong_method(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/")
            assert response.status == 404
            assert response.text == "Cannot POST /"
