"""Raw schedule records as delivered by the data collaborator."""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from schedule_feed.models.event import Attendance, LocationType


class UserRecord(BaseModel):
    """A dashboard user (student or professor)."""

    id: int
    name: str
    initials: str = ""
    email: str = ""
    program: Optional[str] = None
    role: Optional[str] = None


class CourseRecord(BaseModel):
    """A course; ``programs`` lists the study programs it belongs to."""

    id: int
    title: str
    programs: list[str] = Field(default_factory=list)


class LecturerRef(BaseModel):
    """Simplified lecturer reference attached to a session."""

    name: str
    initials: str = ""


class SessionRecord(BaseModel):
    """A lecture or workshop occurrence.

    ``start_datetime``/``end_datetime`` are either naive Europe/Vienna civil
    times or aware instants.
    """

    id: int
    course_id: int
    type: Literal["lecture", "workshop"] = "lecture"
    title: str
    start_datetime: datetime
    end_datetime: datetime
    location: str = ""
    location_type: LocationType = LocationType.ON_CAMPUS
    attendance: Attendance = Attendance.MANDATORY
    objectives: list[str] = Field(default_factory=list)
    lecturer: Optional[LecturerRef] = None
    group_id: Optional[int] = None
    updated_at: Optional[datetime] = None


class CoachingSlotRecord(BaseModel):
    """A bookable coaching slot."""

    id: int
    course_id: int
    start_datetime: datetime
    end_datetime: datetime
    max_participants: int = 1
    participant_ids: list[int] = Field(default_factory=list)
    description: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ScheduleSnapshot(BaseModel):
    """Everything the feed needs, as stored in a JSON data file.

    Sessions and coaching slots stay raw so a single broken record is
    rejected during normalization instead of failing the whole snapshot.
    """

    users: list[UserRecord] = Field(default_factory=list)
    courses: list[CourseRecord] = Field(default_factory=list)
    sessions: list[dict[str, Any]] = Field(default_factory=list)
    coaching_slots: list[dict[str, Any]] = Field(default_factory=list)
