"""VTIMEZONE block for Europe/Vienna."""

import logging
from datetime import datetime, timedelta

from icalendar import Timezone, TimezoneDaylight, TimezoneStandard, vRecur

from schedule_feed.constants import TZID

logger = logging.getLogger(__name__)

TIMEZONE_RULES = ("fixed", "tzdb")


class OrderedRecur(vRecur):
    """RRULE value written in insertion order instead of canonical order."""

    def to_ical(self) -> bytes:
        parts = []
        for key, value in self.items():
            if isinstance(value, (list, tuple)):
                value = ",".join(str(v) for v in value)
            parts.append(f"{key}={value}")
        return ";".join(parts).encode("utf-8")


def _observance(component, start: datetime, month: int, offset_from: int, offset_to: int, name: str):
    component.add("dtstart", start)
    component["RRULE"] = OrderedRecur({"FREQ": "YEARLY", "BYMONTH": month, "BYDAY": "-1SU"})
    component.add("tzoffsetfrom", timedelta(hours=offset_from))
    component.add("tzoffsetto", timedelta(hours=offset_to))
    component.add("tzname", name)
    return component


def fixed_vtimezone() -> Timezone:
    """Hand-written Central European Time rule.

    Standard time starts on the last Sunday of October at 03:00 (+0200 to
    +0100), daylight time on the last Sunday of March at 02:00 (+0100 to
    +0200). Only valid while the EU keeps this rule.
    """
    tz = Timezone()
    tz.add("tzid", TZID)
    tz.add_component(
        _observance(TimezoneStandard(), datetime(1970, 10, 25, 3, 0, 0), 10, 2, 1, "CET")
    )
    tz.add_component(
        _observance(TimezoneDaylight(), datetime(1970, 3, 29, 2, 0, 0), 3, 1, 2, "CEST")
    )
    return tz


def tzdb_vtimezone() -> Timezone:
    """VTIMEZONE generated from the IANA timezone database."""
    return Timezone.from_tzid(TZID)


def build_vtimezone(rules: str = "fixed") -> Timezone:
    """Return the VTIMEZONE component for the configured rule source.

    Raises:
        ValueError: If ``rules`` is not "fixed" or "tzdb".
    """
    if rules == "fixed":
        return fixed_vtimezone()
    if rules == "tzdb":
        logger.debug(f"Generating VTIMEZONE for {TZID} from the tz database")
        return tzdb_vtimezone()
    raise ValueError(f"Unknown timezone rules: {rules}. Use one of {', '.join(TIMEZONE_RULES)}")
