"""Templates — kida rendering through ``response.render()``.

``app.locals`` holds values shared by every template,
``response.locals`` holds values for one request, and keyword arguments
to ``render()`` win over both.

Run:
    python app.py
"""

from pathlib import Path

from switchyard import App, AppConfig

TEMPLATES_DIR = Path(__file__).parent / "templates"

app = App(AppConfig(template_dir=TEMPLATES_DIR))
app.locals["site_name"] = "Switchyard"


async def load_birds(request, response, next):
    response.locals["birds"] = ["heron", "kestrel", "<script>"]
    await next()


async def index(request, response, next):
    response.render("index.html", title="Hey", message="Hello there!")


app.get("/", load_birds, index)


if __name__ == "__main__":
    app.run()
