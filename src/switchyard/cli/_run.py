"""``switchyard run`` — start a pounce server for an app."""

import argparse
import sys

from switchyard.cli._resolve import resolve_app


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and serve it.

    CLI flags override the app's config.
    """
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    app._ensure_frozen()

    from switchyard.server.dev import run_server as start

    start(
        app,
        args.host or app.config.host,
        args.port or app.config.port,
        workers=args.workers if args.workers is not None else app.config.workers,
        reload=args.reload or app.config.debug,
        log_level=app.config.log_level,
        app_path=args.app,
    )
