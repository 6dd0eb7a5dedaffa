"""Personal calendar feed: token -> schedule data -> ICS document."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from schedule_feed.constants import ICS_CONTENT_TYPE, ICS_FILENAME
from schedule_feed.event_source import EventSource
from schedule_feed.exceptions import TokenNotFoundError
from schedule_feed.models.event import EventModel
from schedule_feed.output.ics_writer import ICSWriter
from schedule_feed.storage.base import ScheduleRepository
from schedule_feed.tokens import TokenAuthority, TokenIndex

logger = logging.getLogger(__name__)


class FeedStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class FeedResult:
    """Outcome of a feed request."""

    status: FeedStatus
    body: str | None = None
    content_type: str = ICS_CONTENT_TYPE
    filename: str = ICS_FILENAME
    last_modified: datetime | None = None
    event_count: int = 0

    @property
    def found(self) -> bool:
        return self.status == FeedStatus.OK

    @classmethod
    def not_found(cls) -> "FeedResult":
        return cls(status=FeedStatus.NOT_FOUND, content_type="text/plain")


class FeedService:
    """Builds a user's calendar document from current schedule data.

    Nothing is cached: each call re-reads the repository and re-serializes.
    Configuration and collaborator errors propagate to the caller.
    """

    def __init__(
        self,
        repository: ScheduleRepository,
        authority: TokenAuthority,
        writer: ICSWriter | None = None,
        index: TokenIndex | None = None,
    ):
        self.repository = repository
        self.authority = authority
        self.writer = writer or ICSWriter()
        self.index = index

    def resolve(self, token: str) -> int | None:
        """Map a token to a user id via the index or a linear scan."""
        if self.index is not None:
            return self.index.lookup(token)
        return self.authority.resolve_from(token, self.repository)

    def require_user(self, token: str) -> int:
        """Like ``resolve`` but raises TokenNotFoundError on a miss."""
        user_id = self.resolve(token)
        if user_id is None:
            raise TokenNotFoundError("Calendar token did not resolve to a user")
        return user_id

    def events_for_user(self, user_id: int) -> list[EventModel]:
        """Fetch and normalize every event visible to the user."""
        sessions = self.repository.list_visible_sessions(user_id)
        slots = self.repository.list_visible_coaching_slots(user_id)
        source = EventSource(self.repository.list_courses())
        return source.normalize(sessions, slots)

    def get_feed(self, token: str, now: datetime | None = None) -> FeedResult:
        """Render the full, unfiltered feed for the owner of ``token``."""
        try:
            user_id = self.require_user(token)
        except TokenNotFoundError as e:
            logger.info(str(e))
            return FeedResult.not_found()

        events = self.events_for_user(user_id)
        body = self.writer.render(events, now=now)
        logger.info(f"Generated calendar feed for user {user_id} with {len(events)} events")

        return FeedResult(
            status=FeedStatus.OK,
            body=body,
            last_modified=self._last_modified(events),
            event_count=len(events),
        )

    @staticmethod
    def _last_modified(events: list[EventModel]) -> datetime | None:
        stamps = []
        for event in events:
            if event.last_modified is None:
                continue
            stamp = event.last_modified
            if stamp.tzinfo is None:
                stamp = stamp.replace(tzinfo=timezone.utc)
            else:
                stamp = stamp.astimezone(timezone.utc)
            stamps.append(stamp)
        return max(stamps) if stamps else None
