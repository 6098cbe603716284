"""``switchyard routes`` — list registered routes.

Resolves an import string to an App and prints every registration in
dispatch order, with mounted routers expanded under their prefixes.
"""

import argparse
import sys

from switchyard.cli._resolve import resolve_app


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of METHOD, PATH and HANDLERS for ``args.app``."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows = [
        (info.method, info.path, ", ".join(info.handlers))
        for info in app.router.iter_routes()
    ]
    if not rows:
        print("No routes registered.")
        return

    # Column widths
    max_methods = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header

    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLERS"))
    sep_len = max_methods + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, path, handlers in rows:
        print(fmt.format(method, path, handlers))
