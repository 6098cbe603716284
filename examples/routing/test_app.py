"""Tests for the routing example."""

from switchyard.testing import TestClient


class TestRoutingApp:
    async def test_root_and_literal_dot(self, example_app) -> None:
        async with TestClient(example_app) as client:
            assert (await client.get("/")).text == "root"
            assert (await client.get("/random.txt")).text == "random.txt"
            assert (await client.get("/randomXtxt")).status == 404

    async def test_named_params(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/users/34/books/8989")
            assert response.text == '{"userId": "34", "bookId": "8989"}'

    async def test_compound_params(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/flights/LAX-SFO")
            assert response.text == '{"from": "LAX", "to": "SFO"}'
            response = await client.get("/plantae/Prunus.persica")
            assert response.text == '{"genus": "Prunus", "species": "persica"}'

    async def test_constrained_param(self, example_app) -> None:
        async with TestClient(example_app) as client:
            assert (await client.get("/user/42")).text == "User 42"
            assert (await client.get("/user/abc")).status == 404

    async def test_regex_route(self, example_app) -> None:
        async with TestClient(example_app) as client:
            assert (await client.get("/butterfly")).text == "/.*fly$/"
            assert (await client.get("/dragonfly")).text == "/.*fly$/"
            assert (await client.get("/butterflyman")).status == 404

    async def test_handler_chains(self, example_app) -> None:
        async with TestClient(example_app) as client:
            assert (await client.get("/example/b")).text == "Hello from B! first ran"
            assert (await client.get("/example/c")).text == "Hello from C! CB0 CB1"
            assert (await client.get("/example/d")).text == "Hello from C! CB0 CB1"

    async def test_route_builder(self, example_app) -> None:
        async with TestClient(example_app) as client:
            assert (await client.get("/book")).text == "Get a random book"
            assert (await client.post("/book")).text == "Add a book"
            assert (await client.put("/book")).text == "Update the book"
            assert (await client.delete("/book")).status == 404

            options = await client.options("/book")
            assert options.header("allow") == "GET, HEAD, POST, PUT"

    async def test_mounted_router(self, example_app) -> None:
        async with TestClient(example_app) as client:
            assert (await client.get("/birds")).text == "Birds home page"
            assert (await client.get("/birds/")).text == "Birds home page"
            assert (await client.get("/birds/about")).text == "About birds"
            assert (await client.get("/birdsong")).status == 404
