"""CLI command routing."""

import typer
from typing_extensions import Annotated

from cli import setup_logging
from cli.commands import bookings, feed, month, serve, token, upcoming
from cli.context import CLIContext, set_context

app = typer.Typer(
    help="Personal calendar feeds for the scheduling dashboard.",
    no_args_is_help=True,
)


@app.callback()
def callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show info messages")
    ] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only show errors")] = False,
) -> None:
    """Set up the shared context and logging for every command."""
    ctx = CLIContext(verbose=verbose, quiet=quiet)
    set_context(ctx)
    setup_logging(verbose=verbose, quiet=quiet, config=ctx.config)


app.command("token")(token)
app.command("feed")(feed)
app.command("upcoming")(upcoming)
app.command("bookings")(bookings)
app.command("month")(month)
app.command("serve")(serve)
