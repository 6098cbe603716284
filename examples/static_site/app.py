"""Static site — files from a directory, next to dynamic routes.

The same ``public/`` directory is served twice: at the root, where
misses fall through to the routes below, and under ``/static`` with
long-lived caching.

Run:
    python app.py
"""

from pathlib import Path

from switchyard import App, serve_static

PUBLIC_DIR = Path(__file__).parent / "public"

app = App()

app.use(serve_static(PUBLIC_DIR))
app.use("/static", serve_static(PUBLIC_DIR, cache_control="public, max-age=31536000"))


@app.get("/api/ping")
async def ping(request, response, next):
    response.json({"pong": True})


if __name__ == "__main__":
    app.run()
