"""Group calendar events into day, week, month and upcoming views.

All functions are pure: they take a list of events plus a reference date
or instant and never mutate their input.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Iterable

from schedule_feed.event_source import to_local
from schedule_feed.models.event import EventModel

GRID_WEEKS = 6


@dataclass
class CalendarDay:
    """One cell of a calendar grid."""

    date: date
    in_month: bool = True
    events: list[EventModel] = field(default_factory=list)

    @property
    def key(self) -> str:
        return day_key(self.date)


@dataclass
class CalendarWeek:
    """A Monday-start week of calendar cells."""

    number: int
    days: list[CalendarDay]


@dataclass
class TimeGroup:
    """Events sharing the same start and end time on one day."""

    start: time
    end: time
    events: list[EventModel] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.start:%H:%M} - {self.end:%H:%M}"


@dataclass
class DayGroup:
    date: date
    slots: list[TimeGroup] = field(default_factory=list)


@dataclass
class WeekGroup:
    key: str
    days: list[DayGroup] = field(default_factory=list)

    @property
    def events(self) -> list[EventModel]:
        return [e for day in self.days for slot in day.slots for e in slot.events]


def day_key(d: date) -> str:
    """Calendar-day key ``YYYY-MM-DD``."""
    return d.isoformat()


def iso_week_number(d: date) -> int:
    """ISO 8601 week number (weeks start on Monday)."""
    return d.isocalendar()[1]


def iso_week_key(d: date) -> str:
    """ISO week key such as ``2025-W05``, using the ISO week-numbering year."""
    iso_year, week, _ = d.isocalendar()
    return f"{iso_year}-W{week:02d}"


def start_of_week(d: date) -> date:
    """Monday of the week containing ``d``."""
    return d - timedelta(days=d.weekday())


def event_sort_key(event: EventModel) -> tuple:
    """Stable ordering: date, start time, then id."""
    return (event.date, event.start, event.id)


def _time_label(t: time) -> str:
    return t.strftime("%H:%M")


def group_by_day(events: Iterable[EventModel]) -> dict[date, list[EventModel]]:
    """Partition events by calendar day.

    Days appear in first-seen order and events keep their input order;
    callers sort with ``event_sort_key`` when they need to.
    """
    by_day: dict[date, list[EventModel]] = defaultdict(list)
    for event in events:
        by_day[event.date].append(event)
    return dict(by_day)


def _calendar_day(d: date, by_day: dict[date, list[EventModel]], in_month: bool = True) -> CalendarDay:
    return CalendarDay(
        date=d,
        in_month=in_month,
        events=sorted(by_day.get(d, []), key=event_sort_key),
    )


def month_grid(year: int, month: int, events: Iterable[EventModel]) -> list[CalendarWeek]:
    """Build the six-week month view for ``year``/``month``.

    The grid starts on the Monday on or before the 1st and always spans
    42 days. Events outside the grid are not shown.
    """
    by_day = group_by_day(events)
    day = start_of_week(date(year, month, 1))

    weeks = []
    for _ in range(GRID_WEEKS):
        days = []
        for _ in range(7):
            days.append(_calendar_day(day, by_day, in_month=day.month == month))
            day += timedelta(days=1)
        weeks.append(CalendarWeek(number=iso_week_number(days[0].date), days=days))
    return weeks


def week_days(ref: date, events: Iterable[EventModel]) -> CalendarWeek:
    """The Monday-to-Sunday week containing ``ref``."""
    by_day = group_by_day(events)
    monday = start_of_week(ref)
    days = [_calendar_day(monday + timedelta(days=i), by_day) for i in range(7)]
    return CalendarWeek(number=iso_week_number(monday), days=days)


def day_events(ref: date, events: Iterable[EventModel]) -> list[EventModel]:
    """Events on a single day, ordered by start time then id."""
    return sorted((e for e in events if e.date == ref), key=event_sort_key)


def group_by_week_day_time(events: Iterable[EventModel]) -> list[WeekGroup]:
    """Nest events as ISO week -> day -> (start, end) time slot.

    Weeks are ordered by key, days chronologically and time slots by their
    ``HH:MM`` start label. Events inside a slot keep their input order.
    """
    tree: dict[str, dict[date, dict[tuple[time, time], list[EventModel]]]] = {}
    for event in events:
        days = tree.setdefault(iso_week_key(event.date), {})
        slots = days.setdefault(event.date, {})
        slots.setdefault((event.start, event.end), []).append(event)

    weeks = []
    for key in sorted(tree):
        week = WeekGroup(key=key)
        for day in sorted(tree[key]):
            slots = tree[key][day]
            ordered = sorted(slots, key=lambda pair: _time_label(pair[0]))
            week.days.append(
                DayGroup(
                    date=day,
                    slots=[TimeGroup(start=s, end=e, events=slots[(s, e)]) for s, e in ordered],
                )
            )
        weeks.append(week)
    return weeks


def upcoming(events: Iterable[EventModel], now: datetime, days: int = 7) -> list[EventModel]:
    """Events in the window ``[today, today + days]``.

    Events on today's date are kept only if they have not ended yet; events
    on later days are kept whatever their time of day. Sorted by date, then
    start time.
    """
    now = to_local(now)
    today = now.date()
    last = today + timedelta(days=days)

    selected = []
    for event in events:
        if event.date < today or event.date > last:
            continue
        if event.date == today and not event.ends_at > now:
            continue
        selected.append(event)
    return sorted(selected, key=lambda e: (e.date, e.start))


def split_upcoming_past(
    events: Iterable[EventModel], now: datetime
) -> tuple[list[EventModel], list[EventModel]]:
    """Split into events that have not started yet and events that have.

    Upcoming events are sorted soonest first, past events most recent first.
    """
    now = to_local(now)
    upcoming_events = []
    past_events = []
    for event in events:
        if event.starts_at >= now:
            upcoming_events.append(event)
        else:
            past_events.append(event)
    upcoming_events.sort(key=lambda e: (e.date, e.start))
    past_events.sort(key=lambda e: (e.date, e.start), reverse=True)
    return upcoming_events, past_events
