"""Hello World — the simplest switchyard app.

Demonstrates a route, a path parameter, JSON output and a returned
value standing in for a response.

Run:
    python app.py
"""

from switchyard import App

app = App()


@app.get("/")
async def index(request, response, next):
    response.send("Hello World!")


@app.get("/greet/:name")
def greet(request, response, next):
    return f"Hello, {request.params['name']}!"


@app.get("/api/status")
async def status(request, response, next):
    response.json({"status": "ok", "version": "0.1.0"})


@app.post("/custom")
async def custom(request, response, next):
    response.status(201).set("X-Custom", "switchyard").send("Created")


if __name__ == "__main__":
    app.run()
