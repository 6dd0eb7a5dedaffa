"""ICS writer for personal calendar feeds."""

import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from icalendar import Calendar, Event, vText

from schedule_feed.constants import (
    APP_SLUG,
    CALENDAR_DESCRIPTION,
    CALENDAR_NAME,
    PRODID,
    SEQUENCE_MODULUS,
    TZID,
    UID_DOMAIN,
)
from schedule_feed.models.event import EventModel
from schedule_feed.output.escaping import escape_text
from schedule_feed.output.timezone import build_vtimezone

logger = logging.getLogger(__name__)


class IcalText(vText):
    """TEXT value escaped with ``escape_text``."""

    def to_ical(self) -> bytes:
        return escape_text(str(self)).encode(self.encoding)


def event_uid(event: EventModel) -> str:
    """Stable UID, identical across re-exports of the same record."""
    return f"{APP_SLUG}-{event.source}-{event.id}@{UID_DOMAIN}"


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps from the store are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def sequence_number(last_modified: datetime | None) -> int:
    """Update sequence derived from the record's last modification time.

    Whole epoch seconds modulo 1,000,000; two edits within the same second
    share a sequence number.
    """
    if last_modified is None:
        return 0
    return math.floor(_as_utc(last_modified).timestamp()) % SEQUENCE_MODULUS


class ICSWriter:
    """Writer for iCalendar feed documents.

    Properties are emitted in insertion order, so the layout of every
    VEVENT is fixed: UID, DTSTAMP, DTSTART, DTEND, SUMMARY, DESCRIPTION,
    LOCATION, STATUS, SEQUENCE, LAST-MODIFIED.
    """

    def __init__(self, timezone_rules: str = "fixed"):
        self.timezone_rules = timezone_rules

    def build_calendar(
        self, events: Iterable[EventModel], now: datetime | None = None
    ) -> Calendar:
        """Build the VCALENDAR component.

        Events that do not end after they start are skipped.
        """
        stamp = _as_utc(now) if now is not None else datetime.now(timezone.utc)

        cal = Calendar()
        cal.add("version", "2.0")
        cal.add("prodid", PRODID)
        cal.add("calscale", "GREGORIAN")
        cal.add("method", "PUBLISH")
        cal.add("X-WR-CALNAME", CALENDAR_NAME)
        cal.add("X-WR-CALDESC", CALENDAR_DESCRIPTION)
        cal.add("X-WR-TIMEZONE", TZID)
        cal.add_component(build_vtimezone(self.timezone_rules))

        written = 0
        skipped = 0
        for event_model in events:
            if not event_model.is_well_formed:
                skipped += 1
                logger.warning(
                    f"Skipping {event_model.source} {event_model.id}: "
                    f"end {event_model.end} is not after start {event_model.start}"
                )
                continue
            cal.add_component(self._build_event(event_model, stamp))
            written += 1

        logger.info(f"Serialized {written} events ({skipped} skipped)")
        return cal

    def to_ical(self, events: Iterable[EventModel], now: datetime | None = None) -> bytes:
        """Serialize events to iCalendar bytes (CRLF line endings)."""
        return self.build_calendar(events, now).to_ical(sorted=False)

    def render(self, events: Iterable[EventModel], now: datetime | None = None) -> str:
        """Serialize events to an iCalendar string."""
        return self.to_ical(events, now).decode("utf-8")

    def write(
        self, events: Iterable[EventModel], path: Path, now: datetime | None = None
    ) -> None:
        """Write the feed document to ``path``."""
        ical_content = self.to_ical(events, now)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(ical_content)

    def get_extension(self) -> str:
        """Returns file extension."""
        return "ics"

    def _build_event(self, event_model: EventModel, stamp: datetime) -> Event:
        event = Event()
        event.add("uid", event_uid(event_model))
        event.add("dtstamp", stamp)
        # Floating local times tied to the VTIMEZONE by TZID
        event.add("dtstart", event_model.starts_at, parameters={"TZID": TZID})
        event.add("dtend", event_model.ends_at, parameters={"TZID": TZID})
        event["SUMMARY"] = IcalText(event_model.title)
        if event_model.description:
            event["DESCRIPTION"] = IcalText(event_model.description)
        event["LOCATION"] = IcalText(event_model.location)
        event.add("status", "CONFIRMED")
        event.add("sequence", sequence_number(event_model.last_modified))
        if event_model.last_modified is not None:
            event.add("last-modified", _as_utc(event_model.last_modified))
        return event
