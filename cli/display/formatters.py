"""Pure formatting functions for display output."""

from datetime import date

from schedule_feed.models.event import EventKind, EventModel

KIND_STYLES = {
    EventKind.LECTURE: "blue",
    EventKind.WORKSHOP: "green",
    EventKind.COACHING: "yellow",
}


def format_day_label(event_date: date, today: date) -> str:
    """Format a date as a human-readable day label.

    Returns:
        Formatted string like "TODAY (Thu Jan 16)" or "Mon Jan 19".
    """
    delta = (event_date - today).days
    if delta == 0:
        return f"TODAY ({event_date.strftime('%a %b %d')})"
    elif delta == 1:
        return f"Tomorrow ({event_date.strftime('%a %b %d')})"
    elif delta == -1:
        return f"Yesterday ({event_date.strftime('%a %b %d')})"
    return event_date.strftime("%a %b %d")


def format_time_range(event: EventModel) -> str:
    """Format the time range for an event, e.g. "08:00–12:00"."""
    return f"{event.start:%H:%M}–{event.end:%H:%M}"


def kind_style(event: EventModel) -> str:
    return KIND_STYLES.get(event.kind, "white")
