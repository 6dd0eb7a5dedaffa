"""Output layer for calendar feed documents."""

from schedule_feed.output.escaping import escape_text, unescape_text
from schedule_feed.output.ics_writer import ICSWriter, event_uid, sequence_number
from schedule_feed.output.timezone import build_vtimezone

__all__ = [
    "ICSWriter",
    "build_vtimezone",
    "escape_text",
    "event_uid",
    "sequence_number",
    "unescape_text",
]
