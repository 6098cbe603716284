"""Routing — patterns, handler chains and a mounted router.

Demonstrates named and compound parameters, constrained parameters,
regular expression routes, multi-handler chains, ``route()`` chaining
and a sub-router mounted under a prefix.

Run:
    python app.py
"""

import re

from switchyard import App, Router

app = App()


app.get("/", lambda request, response, next: response.send("root"))
app.get("/random.txt", lambda request, response, next: response.send("random.txt"))


@app.get("/users/:userId/books/:bookId")
async def user_book(request, response, next):
    response.json(request.params)


@app.get("/flights/:from-:to")
async def flights(request, response, next):
    response.json(request.params)


@app.get("/plantae/:genus.:species")
async def plantae(request, response, next):
    response.json(request.params)


@app.get(r"/user/:userId(\d+)")
async def numeric_user(request, response, next):
    response.send(f"User {request.params['userId']}")


@app.get(re.compile(r"fly$"))
async def fly(request, response, next):
    response.send("/.*fly$/")


# -- Handler chains --


async def example_b_first(request, response, next):
    request.state["first"] = "ran"
    await next()


async def example_b_second(request, response, next):
    response.send(f"Hello from B! first {request.state['first']}")


app.get("/example/b", example_b_first, example_b_second)


async def cb0(request, response, next):
    request.state.setdefault("trail", []).append("CB0")
    await next()


async def cb1(request, response, next):
    request.state["trail"].append("CB1")
    await next()


async def cb2(request, response, next):
    response.send(f"Hello from C! {' '.join(request.state['trail'])}")


app.get("/example/c", [cb0, cb1, cb2])
app.get("/example/d", [cb0, cb1], cb2)


# -- One path, several methods --

(
    app.route("/book")
    .get(lambda request, response, next: response.send("Get a random book"))
    .post(lambda request, response, next: response.send("Add a book"))
    .put(lambda request, response, next: response.send("Update the book"))
)


# -- A modular router for bird pages --

birds = Router(name="birds")


async def timelog(request, response, next):
    request.state["birds_seen"] = True
    await next()


birds.use(timelog)
birds.get("/", lambda request, response, next: response.send("Birds home page"))
birds.get("/about", lambda request, response, next: response.send("About birds"))

app.mount("/birds", birds)


if __name__ == "__main__":
    app.run()
