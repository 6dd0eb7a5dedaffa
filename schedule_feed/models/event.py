"""Normalized calendar event model with Pydantic v2 validation."""

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, computed_field, field_validator


class EventKind(str, Enum):
    """Kind of schedulable entity."""

    LECTURE = "lecture"
    WORKSHOP = "workshop"
    COACHING = "coaching"


class LocationType(str, Enum):
    """Where an event takes place."""

    ONLINE = "online"
    ON_CAMPUS = "on_campus"


class Attendance(str, Enum):
    """Attendance requirement."""

    MANDATORY = "mandatory"
    OPTIONAL = "optional"


def format_duration(minutes: int) -> str:
    """Format a duration in minutes the way the dashboard prints it.

    Examples: ``"1h 30m"``, ``"2h"``, ``"45m"``.
    """
    hours, rest = divmod(minutes, 60)
    if hours > 0 and rest > 0:
        return f"{hours}h {rest}m"
    if hours > 0:
        return f"{hours}h"
    return f"{rest}m"


class EventModel(BaseModel):
    """A single, fully materialized occurrence of a lecture, workshop or coaching.

    Instances are immutable and built fresh from collaborator records on
    every request. ``start`` and ``end`` are civil Europe/Vienna times on
    ``date``; an event never spans midnight.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    kind: EventKind
    course_id: int
    course_title: Optional[str] = None
    title: str
    date: date
    start: time
    end: time
    location: str = ""
    location_type: LocationType = LocationType.ON_CAMPUS
    attendance: Optional[Attendance] = None
    description: Optional[str] = None
    objectives: tuple[str, ...] = ()
    lecturer: Optional[str] = None
    last_modified: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        """Reject empty titles."""
        if not v or not v.strip():
            raise ValueError("title must not be empty")
        return v

    @computed_field
    @property
    def source(self) -> str:
        """Record namespace the id is unique within ("session" or "coaching")."""
        return "coaching" if self.kind == EventKind.COACHING else "session"

    @property
    def starts_at(self) -> datetime:
        """Naive local start datetime."""
        return datetime.combine(self.date, self.start)

    @property
    def ends_at(self) -> datetime:
        """Naive local end datetime."""
        return datetime.combine(self.date, self.end)

    @property
    def duration(self) -> timedelta:
        return self.ends_at - self.starts_at

    @property
    def duration_label(self) -> str:
        return format_duration(int(self.duration.total_seconds() // 60))

    @property
    def is_well_formed(self) -> bool:
        """True if the event ends strictly after it starts."""
        return self.end > self.start
