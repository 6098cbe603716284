"""Switchyard CLI — serve an app and inspect its route table.

Entry point registered as ``switchyard`` in ``pyproject.toml``::

    [project.scripts]
    switchyard = "switchyard.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``switchyard`` command."""
    parser = argparse.ArgumentParser(
        prog="switchyard",
        description="Switchyard: Express-style routing for ASGI.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- switchyard run ---------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the server")
    run_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker count (ignored when reloading)",
    )
    run_parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart on code changes (defaults to the app's debug setting)",
    )

    # -- switchyard routes ------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from switchyard.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from switchyard.cli._routes import run_routes

        run_routes(args)
