"""Render the calendar feed for a token."""

import logging
from pathlib import Path

import typer
from typing_extensions import Annotated

from cli.context import get_context
from cli.utils import exit_on_feed_error

logger = logging.getLogger(__name__)


def feed(
    token: Annotated[str, typer.Argument(help="Calendar token")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the ICS document to this file"),
    ] = None,
) -> None:
    """Render the ICS feed for TOKEN to stdout or a file."""
    ctx = get_context()

    with exit_on_feed_error():
        result = ctx.feed_service.get_feed(token)

    if not result.found:
        logger.error("Calendar token not found")
        raise typer.Exit(1)

    if output is None:
        typer.echo(result.body, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(result.body.encode("utf-8"))
    typer.echo(f"Calendar written to {output} ({result.event_count} events)")
