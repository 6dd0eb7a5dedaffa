"""Schedule data collaborators."""

from schedule_feed.storage.base import ScheduleRepository
from schedule_feed.storage.json_repository import (
    InMemoryScheduleRepository,
    JSONScheduleRepository,
)

__all__ = [
    "ScheduleRepository",
    "InMemoryScheduleRepository",
    "JSONScheduleRepository",
]
