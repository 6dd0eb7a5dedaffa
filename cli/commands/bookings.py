"""List a user's booked coaching slots by week, day and time."""

import typer
from typing_extensions import Annotated

from cli.context import get_context
from cli.display import ScheduleRenderer
from cli.utils import exit_on_feed_error, local_now
from schedule_feed.aggregation import group_by_week_day_time, split_upcoming_past
from schedule_feed.models.event import EventKind


def bookings(
    user_id: Annotated[int, typer.Argument(help="User id")],
    show_all: Annotated[
        bool, typer.Option("--all", "-a", help="Include coachings that already started")
    ] = False,
) -> None:
    """List booked coaching slots grouped by ISO week, day and time slot."""
    ctx = get_context()

    with exit_on_feed_error():
        events = ctx.feed_service.events_for_user(user_id)

    coachings = [e for e in events if e.kind == EventKind.COACHING]
    if not show_all:
        coachings, _ = split_upcoming_past(coachings, local_now())

    ScheduleRenderer().render_bookings(
        group_by_week_day_time(coachings), title=f"Coaching bookings: user {user_id}"
    )
