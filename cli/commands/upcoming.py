"""Show a user's events for the next days."""

import typer
from typing_extensions import Annotated

from cli.context import get_context
from cli.display import ScheduleRenderer
from cli.utils import exit_on_feed_error, local_now
from schedule_feed.aggregation import upcoming as upcoming_events


def upcoming(
    user_id: Annotated[int, typer.Argument(help="User id")],
    days: Annotated[
        int | None,
        typer.Option("--days", "-d", help="Number of days to look ahead"),
    ] = None,
) -> None:
    """Show lectures, workshops and coachings in the next days (agenda view).

    Events that already ended today are left out.
    """
    ctx = get_context()
    if days is None:
        days = ctx.config.upcoming_days

    with exit_on_feed_error():
        events = ctx.feed_service.events_for_user(user_id)

    now = local_now()
    selected = upcoming_events(events, now, days=days)
    ScheduleRenderer().render_agenda(
        selected,
        title=f"Upcoming: user {user_id}",
        subtitle=f"{days} days" if days != 1 else "1 day",
        today=now.date(),
    )
