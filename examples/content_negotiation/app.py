"""Content negotiation — one resource, several representations.

``response.format()`` picks a representation from the request's
``Accept`` header; ``request.accepts()`` answers the same question
inline.

Run:
    python app.py
"""

from switchyard import App

app = App()

BOOK = {"title": "The Wind in the Willows", "author": "Kenneth Grahame"}


@app.get("/book")
async def book(request, response, next):
    await response.format(
        {
            "text/plain": lambda: response.send(f"{BOOK['title']} by {BOOK['author']}"),
            "html": lambda: response.send(f"<p><em>{BOOK['title']}</em> by {BOOK['author']}</p>"),
            "json": lambda: response.json(BOOK),
        }
    )


@app.get("/greeting")
async def greeting(request, response, next):
    await response.format(
        {
            "json": lambda: response.json({"greeting": "hey"}),
            "default": lambda: response.status(200).type("text").send("hey"),
        }
    )


@app.get("/inline")
async def inline(request, response, next):
    if request.accepts("json", "html") == "json":
        response.json({"inline": True})
    else:
        response.send("<p>inline</p>")


if __name__ == "__main__":
    app.run()
