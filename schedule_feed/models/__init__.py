"""Pydantic models for the calendar feed."""

from schedule_feed.models.event import (
    Attendance,
    EventKind,
    EventModel,
    LocationType,
    format_duration,
)
from schedule_feed.models.records import (
    CoachingSlotRecord,
    CourseRecord,
    LecturerRef,
    ScheduleSnapshot,
    SessionRecord,
    UserRecord,
)

__all__ = [
    "Attendance",
    "EventKind",
    "EventModel",
    "LocationType",
    "format_duration",
    "CoachingSlotRecord",
    "CourseRecord",
    "LecturerRef",
    "ScheduleSnapshot",
    "SessionRecord",
    "UserRecord",
]
