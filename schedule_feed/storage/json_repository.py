"""Schedule repositories backed by a snapshot of users, courses and schedules."""

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError

from schedule_feed.exceptions import CollaboratorError
from schedule_feed.models.records import CourseRecord, ScheduleSnapshot, UserRecord

logger = logging.getLogger(__name__)


def _field(record: Mapping[str, Any], name: str) -> Any:
    return record.get(name) if isinstance(record, Mapping) else None


class InMemoryScheduleRepository:
    """Repository over a ``ScheduleSnapshot`` held in memory.

    Visibility follows the dashboard: a user sees the sessions of every
    course in their study program and the coaching slots they are booked on.
    """

    def __init__(self, snapshot: ScheduleSnapshot | None = None):
        self._snapshot = snapshot or ScheduleSnapshot()

    def snapshot(self) -> ScheduleSnapshot:
        return self._snapshot

    def list_users(self, limit: int | None = None) -> list[UserRecord]:
        users = list(self.snapshot().users)
        if limit is not None:
            users = users[:limit]
        return users

    def list_courses(self) -> list[CourseRecord]:
        return list(self.snapshot().courses)

    def get_user(self, user_id: int) -> UserRecord | None:
        return self._find_user(self.snapshot(), user_id)

    def list_visible_sessions(self, user_id: int) -> list[dict[str, Any]]:
        snapshot = self.snapshot()
        user = self._find_user(snapshot, user_id)
        if user is None:
            return []
        course_ids = {
            c.id for c in snapshot.courses if user.program and user.program in c.programs
        }
        return [s for s in snapshot.sessions if _field(s, "course_id") in course_ids]

    def list_visible_coaching_slots(self, user_id: int) -> list[dict[str, Any]]:
        return [
            slot
            for slot in self.snapshot().coaching_slots
            if user_id in (_field(slot, "participant_ids") or [])
        ]

    @staticmethod
    def _find_user(snapshot: ScheduleSnapshot, user_id: int) -> UserRecord | None:
        return next((u for u in snapshot.users if u.id == user_id), None)


class JSONScheduleRepository(InMemoryScheduleRepository):
    """Repository reading a JSON snapshot file.

    The file is re-read on every call so feeds always reflect the current
    data.
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)

    def snapshot(self) -> ScheduleSnapshot:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read schedule data from {self.path}: {e}")
            raise CollaboratorError(f"Failed to read schedule data: {e}") from e

        try:
            return ScheduleSnapshot.model_validate(data)
        except ValidationError as e:
            logger.error(f"Schedule data in {self.path} is invalid: {e}")
            raise CollaboratorError(f"Invalid schedule data: {e}") from e
