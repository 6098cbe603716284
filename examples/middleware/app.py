"""Middleware — application-level middleware, skipping and error handling.

Demonstrates a logging middleware, a request-time stamp, a chain that
skips the rest of its route, a router-level gate that skips the whole
router, and an error handler that turns failures into a JSON body.

Run:
    python app.py
"""

import logging

from switchyard import App, HTTPError, Router, Signal, request_logger

logger = logging.getLogger("example.middleware")

app = App()
app.use(request_logger())


async def my_logger(request, response, next):
    logger.info("LOGGED %s", request.original_path)
    request.state.setdefault("seen_by", []).append("my_logger")
    await next()


def request_time(request, response, next):
    request.state["requested"] = request.state["request_time"]
    return Signal.CONTINUE


app.use(my_logger, request_time)


@app.get("/")
async def index(request, response, next):
    response.send(f"Hello World! seen by {', '.join(request.state['seen_by'])}")


# -- Skipping the rest of a route --


def special_gate(request, response, next):
    if request.params["id"] == "0":
        return Signal.SKIP_ROUTE
    return Signal.CONTINUE


app.get(
    "/user/:id",
    special_gate,
    lambda request, response, next: response.send("regular"),
)
app.get("/user/:id", lambda request, response, next: response.send("special"))


# -- Skipping a whole router --

admin = Router(name="admin")


def check_token(request, response, next):
    if request.headers.get("x-token") != "secret":
        return Signal.SKIP_ROUTER
    return Signal.CONTINUE


admin.use(check_token)
admin.get("/dashboard", lambda request, response, next: response.send("admin dashboard"))

app.mount("/admin", admin)
app.get("/admin/dashboard", lambda request, response, next: response.status(401).send("sign in"))


# -- Errors --


@app.get("/boom")
async def boom(request, response, next):
    raise RuntimeError("something broke")


@app.get("/teapot")
async def teapot(request, response, next):
    await next(HTTPError(418, "short and stout"))


async def json_errors(err, request, response, next):
    if isinstance(err, HTTPError):
        response.status(err.status).json({"error": err.detail})
    else:
        logger.exception("Unhandled error", exc_info=err)
        response.status(500).json({"error": "internal"})


app.use(json_errors)


if __name__ == "__main__":
    app.run()
