"""Normalize sessions and coaching slots into calendar events."""

import logging
from datetime import datetime
from typing import Any, Iterable, Mapping
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from schedule_feed.constants import TZID
from schedule_feed.exceptions import MalformedEventError
from schedule_feed.models.event import Attendance, EventKind, EventModel, LocationType
from schedule_feed.models.records import CoachingSlotRecord, CourseRecord, SessionRecord

logger = logging.getLogger(__name__)

UNKNOWN_COURSE_TITLE = "Unbekannter Kurs"
COACHING_LOCATION = "Online"

_LOCAL_TZ = ZoneInfo(TZID)


def to_local(value: datetime) -> datetime:
    """Convert an instant to naive Europe/Vienna civil time.

    Naive datetimes are taken to be civil time already.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(_LOCAL_TZ).replace(tzinfo=None)


class EventSource:
    """Turns collaborator records into ``EventModel`` instances.

    Course titles are looked up in the course list given at construction;
    unknown courses never fail normalization.
    """

    def __init__(self, courses: Iterable[CourseRecord] = ()):
        self.courses = {course.id: course for course in courses}

    def course_title(self, course_id: int) -> str | None:
        course = self.courses.get(course_id)
        return course.title if course else None

    def from_session(self, record: SessionRecord | Mapping[str, Any]) -> EventModel:
        """Normalize a lecture or workshop record.

        Raises:
            MalformedEventError: If the record is invalid or its times are unusable.
        """
        session = self._validate(SessionRecord, record)
        start, end = self._local_times(session.id, session.start_datetime, session.end_datetime)

        course_title = self.course_title(session.course_id)
        lecturer = session.lecturer.name if session.lecturer else None

        return self._build(
            id=session.id,
            kind=EventKind(session.type),
            course_id=session.course_id,
            course_title=course_title,
            title=session.title,
            date=start.date(),
            start=start.time(),
            end=end.time(),
            location=session.location,
            location_type=session.location_type,
            attendance=session.attendance,
            description=self._session_description(
                course_title, lecturer, session.attendance, session.objectives
            ),
            objectives=tuple(session.objectives),
            lecturer=lecturer,
            last_modified=session.updated_at,
        )

    def from_coaching_slot(
        self, record: CoachingSlotRecord | Mapping[str, Any]
    ) -> EventModel:
        """Normalize a coaching slot record.

        Coaching events are always reported as online, whatever the slot's
        own location says.

        Raises:
            MalformedEventError: If the record is invalid or its times are unusable.
        """
        slot = self._validate(CoachingSlotRecord, record)
        start, end = self._local_times(slot.id, slot.start_datetime, slot.end_datetime)

        course_title = self.course_title(slot.course_id)
        title = f"{course_title} Coaching" if course_title else "Coaching"
        description = slot.description or (
            f"Coaching-Termin für {course_title or UNKNOWN_COURSE_TITLE}"
        )

        return self._build(
            id=slot.id,
            kind=EventKind.COACHING,
            course_id=slot.course_id,
            course_title=course_title,
            title=title,
            date=start.date(),
            start=start.time(),
            end=end.time(),
            location=COACHING_LOCATION,
            location_type=LocationType.ONLINE,
            attendance=Attendance.OPTIONAL,
            description=description,
            last_modified=slot.updated_at,
        )

    def normalize(
        self,
        sessions: Iterable[SessionRecord | Mapping[str, Any]] = (),
        coaching_slots: Iterable[CoachingSlotRecord | Mapping[str, Any]] = (),
    ) -> list[EventModel]:
        """Normalize all records, skipping malformed ones.

        Sessions come first, then coaching slots, each in input order.
        """
        events: list[EventModel] = []
        skipped = 0
        for convert, records in (
            (self.from_session, sessions),
            (self.from_coaching_slot, coaching_slots),
        ):
            for record in records:
                try:
                    events.append(convert(record))
                except MalformedEventError as e:
                    skipped += 1
                    logger.warning(f"Skipping record: {e}")

        if skipped:
            logger.info(f"Normalized {len(events)} events, skipped {skipped}")
        return events

    @staticmethod
    def _validate(model, record):
        if isinstance(record, model):
            return record
        try:
            return model.model_validate(record)
        except ValidationError as e:
            record_id = record.get("id") if isinstance(record, Mapping) else None
            raise MalformedEventError(
                f"Invalid {model.__name__} {record_id!r}: {e.error_count()} validation error(s)"
            ) from e

    @staticmethod
    def _local_times(record_id: int, start: datetime, end: datetime):
        local_start = to_local(start)
        local_end = to_local(end)
        if local_end <= local_start:
            raise MalformedEventError(f"Record {record_id} ends before it starts")
        if local_end.date() != local_start.date():
            raise MalformedEventError(f"Record {record_id} spans midnight")
        return local_start, local_end

    @staticmethod
    def _build(**fields) -> EventModel:
        try:
            return EventModel(**fields)
        except ValidationError as e:
            raise MalformedEventError(
                f"Invalid event {fields.get('id')!r}: {e.error_count()} validation error(s)"
            ) from e

    @staticmethod
    def _session_description(
        course_title: str | None,
        lecturer: str | None,
        attendance: Attendance,
        objectives: list[str],
    ) -> str:
        lines = [f"Kurs: {course_title or UNKNOWN_COURSE_TITLE}"]
        if lecturer:
            lines.append(f"Dozent: {lecturer}")
        label = "Pflicht" if attendance == Attendance.MANDATORY else "Optional"
        lines.append(f"Anwesenheit: {label}")
        if objectives:
            lines.append("")
            lines.append("Lernziele:")
            lines.extend(objectives)
        return "\n".join(lines)
