"""Print a user's calendar token and subscription URL."""

import typer
from typing_extensions import Annotated

from cli.context import get_context
from cli.display.console import console
from cli.utils import exit_on_feed_error


def token(
    user_id: Annotated[int, typer.Argument(help="User id")],
    url_only: Annotated[
        bool, typer.Option("--url", "-u", help="Print only the subscription URL")
    ] = False,
) -> None:
    """Print the calendar token and feed URL for a user."""
    ctx = get_context()
    authority = ctx.feed_service.authority

    with exit_on_feed_error():
        feed_url = authority.feed_url(user_id, ctx.config.base_url)
        user_token = authority.token_for(user_id)

    if url_only:
        console.print(feed_url, soft_wrap=True)
        return
    console.print(f"Token: {user_token}", soft_wrap=True)
    console.print(f"Feed:  {feed_url}", soft_wrap=True)
