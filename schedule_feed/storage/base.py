"""Collaborator interface for schedule data."""

from typing import Any, Mapping, Protocol, Sequence

from schedule_feed.models.records import (
    CoachingSlotRecord,
    CourseRecord,
    SessionRecord,
    UserRecord,
)

RawSession = SessionRecord | Mapping[str, Any]
RawCoachingSlot = CoachingSlotRecord | Mapping[str, Any]


class ScheduleRepository(Protocol):
    """Protocol for the store the feed reads users and schedules from.

    Implementations raise ``CollaboratorError`` when the store cannot be
    read. Sessions and coaching slots may be returned unvalidated; the
    event source validates them one at a time.
    """

    def list_users(self, limit: int | None = None) -> list[UserRecord]:
        """Return users, at most ``limit`` of them."""
        ...

    def list_visible_sessions(self, user_id: int) -> Sequence[RawSession]:
        """Return the lectures/workshops visible to the user."""
        ...

    def list_visible_coaching_slots(self, user_id: int) -> Sequence[RawCoachingSlot]:
        """Return the coaching slots the user is booked on."""
        ...

    def list_courses(self) -> list[CourseRecord]:
        """Return all courses."""
        ...
