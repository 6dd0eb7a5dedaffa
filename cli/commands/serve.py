"""Serve calendar feeds over HTTP."""

import typer
from typing_extensions import Annotated

from cli.context import get_context
from schedule_feed import create_app


def serve(
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Port to listen on")] = 5000,
    debug: Annotated[bool, typer.Option("--debug", help="Enable Flask debug mode")] = False,
) -> None:
    """Run the feed server (development server; use a WSGI server in production)."""
    ctx = get_context()
    app = create_app(ctx.config, ctx.repository)
    app.run(host=host, port=port, debug=debug)
