from datetime import date, datetime, time, timedelta, timezone

import pytest
from icalendar import Calendar

from schedule_feed.models.event import EventKind
from schedule_feed.output.ics_writer import ICSWriter, event_uid, sequence_number
from schedule_feed.output.timezone import build_vtimezone

NOW = datetime(2025, 10, 2, 12, 0, tzinfo=timezone.utc)


def unfold(text):
    return text.replace("\r\n ", "")


def vevent_lines(body):
    """Property names of each VEVENT, in order."""
    events = []
    current = None
    for line in unfold(body).split("\r\n"):
        if line == "BEGIN:VEVENT":
            current = []
        elif line == "END:VEVENT":
            events.append(current)
            current = None
        elif current is not None:
            current.append(line.split(":", 1)[0].split(";", 1)[0])
    return events


@pytest.fixture
def writer():
    return ICSWriter()


@pytest.fixture
def lecture(make_event):
    return make_event(
        id=1,
        day=date(2025, 10, 3),
        start=time(15, 45),
        end=time(19, 15),
        title="Einführung in Data Science",
        course_title="Data Science",
        location="B309",
        description="Kurs: Data Science\nAnwesenheit: Pflicht",
        last_modified=datetime(2025, 10, 1, 8, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def coaching(make_event):
    return make_event(
        id=5,
        kind=EventKind.COACHING,
        day=date(2025, 10, 28),
        start=time(18, 30),
        end=time(19, 15),
        title="Data Science Coaching",
        location="Online",
    )


def test_calendar_header(writer):
    body = writer.render([], now=NOW)
    lines = body.split("\r\n")
    assert lines[:8] == [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//FH Wien Dashboard//Calendar Export//DE",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        "X-WR-CALNAME:FH Wien Dashboard",
        "X-WR-CALDESC:Termine aus dem FH Wien Dashboard",
        "X-WR-TIMEZONE:Europe/Vienna",
    ]
    assert lines[8] == "BEGIN:VTIMEZONE"
    assert body.endswith("END:VCALENDAR\r\n")


def test_uses_crlf_line_endings(writer, lecture):
    body = writer.render([lecture], now=NOW)
    assert "\n" not in body.replace("\r\n", "")


def test_lines_are_folded(writer, make_event):
    event = make_event(description="x" * 200)
    data = writer.to_ical([event], now=NOW)
    assert all(len(line) <= 75 for line in data.split(b"\r\n"))


def test_fixed_vtimezone(writer):
    body = writer.render([], now=NOW)
    vtimezone = body[body.index("BEGIN:VTIMEZONE") : body.index("END:VTIMEZONE")]
    assert "TZID:Europe/Vienna" in vtimezone

    standard = vtimezone[vtimezone.index("BEGIN:STANDARD") : vtimezone.index("END:STANDARD")]
    assert "DTSTART:19701025T030000" in standard
    assert "RRULE:FREQ=YEARLY;BYMONTH=10;BYDAY=-1SU" in standard
    assert "TZOFFSETFROM:+0200" in standard
    assert "TZOFFSETTO:+0100" in standard
    assert "TZNAME:CET" in standard

    daylight = vtimezone[vtimezone.index("BEGIN:DAYLIGHT") : vtimezone.index("END:DAYLIGHT")]
    assert "DTSTART:19700329T020000" in daylight
    assert "RRULE:FREQ=YEARLY;BYMONTH=3;BYDAY=-1SU" in daylight
    assert "TZOFFSETFROM:+0100" in daylight
    assert "TZOFFSETTO:+0200" in daylight
    assert "TZNAME:CEST" in daylight


def test_fixed_vtimezone_rules_parse(writer):
    cal = Calendar.from_ical(writer.to_ical([], now=NOW))
    standard = cal.walk("STANDARD")[0]
    daylight = cal.walk("DAYLIGHT")[0]
    assert standard["RRULE"]["FREQ"] == ["YEARLY"]
    assert standard["RRULE"]["BYMONTH"] == [10]
    assert standard["RRULE"]["BYDAY"] == ["-1SU"]
    assert daylight["RRULE"]["BYMONTH"] == [3]


def test_tzdb_vtimezone(make_event):
    body = ICSWriter(timezone_rules="tzdb").render([make_event()], now=NOW)
    assert "BEGIN:VTIMEZONE" in body
    assert "TZID:Europe/Vienna" in body
    assert "DTSTART;TZID=Europe/Vienna:20251003T090000" in body


def test_unknown_timezone_rules():
    with pytest.raises(ValueError):
        build_vtimezone("floating")


def test_event_fields(writer, lecture):
    body = unfold(writer.render([lecture], now=NOW))
    assert "UID:fhwien-session-1@dashboard.fhwien.ac.at" in body
    assert "DTSTAMP:20251002T120000Z" in body
    assert "DTSTART;TZID=Europe/Vienna:20251003T154500" in body
    assert "DTEND;TZID=Europe/Vienna:20251003T191500" in body
    assert "SUMMARY:Einführung in Data Science" in body
    assert "DESCRIPTION:Kurs: Data Science\\nAnwesenheit: Pflicht" in body
    assert "LOCATION:B309" in body
    assert "STATUS:CONFIRMED" in body
    assert "SEQUENCE:305600" in body
    assert "LAST-MODIFIED:20251001T080000Z" in body


def test_event_property_order(writer, lecture, coaching):
    events = vevent_lines(writer.render([lecture, coaching], now=NOW))
    assert events[0] == [
        "UID",
        "DTSTAMP",
        "DTSTART",
        "DTEND",
        "SUMMARY",
        "DESCRIPTION",
        "LOCATION",
        "STATUS",
        "SEQUENCE",
        "LAST-MODIFIED",
    ]
    assert events[1] == [
        "UID",
        "DTSTAMP",
        "DTSTART",
        "DTEND",
        "SUMMARY",
        "LOCATION",
        "STATUS",
        "SEQUENCE",
    ]


def test_text_values_are_escaped(writer, make_event):
    event = make_event(
        title="Projekt; Teil 1, Gruppe A",
        location="Raum\\B",
        description="Zeile eins\nZeile zwei",
    )
    body = unfold(writer.render([event], now=NOW))
    assert r"SUMMARY:Projekt\; Teil 1\, Gruppe A" in body
    assert r"LOCATION:Raum\\B" in body
    assert "DESCRIPTION:Zeile eins\\nZeile zwei" in body


def test_coaching_uid_namespace(coaching, make_event):
    """Sessions and coachings with the same id get different UIDs."""
    session = make_event(id=5)
    assert event_uid(coaching) == "fhwien-coaching-5@dashboard.fhwien.ac.at"
    assert event_uid(session) != event_uid(coaching)


def test_dst_transition_night_keeps_civil_time(writer, make_event):
    event = make_event(day=date(2025, 10, 25), start=time(2, 30), end=time(3, 15))
    body = writer.render([event], now=NOW)
    assert "DTSTART;TZID=Europe/Vienna:20251025T023000" in body
    assert "DTEND;TZID=Europe/Vienna:20251025T031500" in body


def test_sequence_number():
    epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert sequence_number(None) == 0
    assert sequence_number(epoch + timedelta(seconds=1000)) == 1000
    assert sequence_number(epoch + timedelta(seconds=1_000_001)) == 1
    assert sequence_number(epoch + timedelta(seconds=1000, milliseconds=999)) == 1000


def test_sequence_number_naive_is_utc():
    assert sequence_number(datetime(1970, 1, 1, 0, 16, 40)) == 1000


def test_sequence_defaults_to_zero(writer, coaching):
    body = writer.render([coaching], now=NOW)
    assert "SEQUENCE:0" in body
    assert "LAST-MODIFIED" not in body


def test_skips_malformed_events(writer, make_event, caplog):
    good = make_event(id=1)
    backwards = make_event(id=2, start=time(12, 0), end=time(11, 0))
    empty = make_event(id=3, start=time(12, 0), end=time(12, 0))
    body = writer.render([good, backwards, empty], now=NOW)
    assert body.count("BEGIN:VEVENT") == 1
    assert "fhwien-session-1@" in body
    assert "Skipping session 2" in caplog.text


def test_output_is_stable(writer, lecture, coaching):
    """Regenerating from unchanged data yields the same document."""
    first = writer.render([lecture, coaching], now=NOW)
    second = writer.render([lecture, coaching], now=NOW)
    assert first == second


def test_output_parses(writer, lecture, coaching):
    cal = Calendar.from_ical(writer.to_ical([lecture, coaching], now=NOW))
    events = cal.walk("VEVENT")
    assert len(events) == 2
    assert str(events[0]["SUMMARY"]) == "Einführung in Data Science"
    assert str(events[0]["DESCRIPTION"]) == "Kurs: Data Science\nAnwesenheit: Pflicht"
    assert events[0].decoded("DTSTART").replace(tzinfo=None) == datetime(2025, 10, 3, 15, 45)
    assert str(events[1]["LOCATION"]) == "Online"


def test_write(writer, lecture, tmp_path):
    path = tmp_path / "out" / "feed.ics"
    writer.write([lecture], path, now=NOW)
    assert path.read_bytes() == writer.to_ical([lecture], now=NOW)
    assert writer.get_extension() == "ics"
