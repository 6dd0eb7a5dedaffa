"""Show a month calendar grid for a user."""

import typer
from typing_extensions import Annotated

from cli.context import get_context
from cli.display import ScheduleRenderer
from cli.utils import exit_on_feed_error, local_now
from schedule_feed.aggregation import month_grid


def month(
    user_id: Annotated[int, typer.Argument(help="User id")],
    year: Annotated[int | None, typer.Option("--year", "-y", help="Year")] = None,
    month_number: Annotated[
        int | None, typer.Option("--month", "-m", min=1, max=12, help="Month (1-12)")
    ] = None,
) -> None:
    """Show the six-week month grid (Monday start, ISO week numbers)."""
    ctx = get_context()
    today = local_now().date()
    year = year or today.year
    month_number = month_number or today.month

    with exit_on_feed_error():
        events = ctx.feed_service.events_for_user(user_id)

    ScheduleRenderer().render_month(
        month_grid(year, month_number, events), title=f"{year}-{month_number:02d}"
    )
