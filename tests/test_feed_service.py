from datetime import datetime, timezone

import pytest

from schedule_feed import build_feed_service
from schedule_feed.exceptions import CollaboratorError, ConfigurationError, TokenNotFoundError
from schedule_feed.feed_service import FeedService, FeedStatus
from schedule_feed.storage.json_repository import JSONScheduleRepository
from schedule_feed.tokens import TokenAuthority, derive_token

from .conftest import SECRET

NOW = datetime(2025, 10, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(repository):
    return FeedService(repository, TokenAuthority(SECRET))


def test_feed_for_user(service):
    """One lecture and one coaching slot give two events with distinct UIDs."""
    result = service.get_feed(derive_token(1, SECRET), now=NOW)

    assert result.found
    assert result.status == FeedStatus.OK
    assert result.event_count == 2
    assert result.content_type == "text/calendar; charset=utf-8"
    assert result.filename == "fhwien-calendar.ics"

    body = result.body.replace("\r\n ", "")
    assert body.count("BEGIN:VEVENT") == 2
    assert "SUMMARY:Data Science Coaching" in body
    assert "LOCATION:Online" in body
    assert "LOCATION:B309" in body
    assert "UID:fhwien-session-1@dashboard.fhwien.ac.at" in body
    assert "UID:fhwien-coaching-5@dashboard.fhwien.ac.at" in body
    assert "DTSTART;TZID=Europe/Vienna:20251003T154500" in body
    assert "DTSTART;TZID=Europe/Vienna:20251028T183000" in body


def test_feed_uids_are_stable(service):
    token = derive_token(1, SECRET)
    first = service.get_feed(token, now=NOW).body
    second = service.get_feed(token, now=NOW).body
    assert first == second


def test_feed_only_contains_visible_events(service):
    """Sessions of courses outside the user's program are not included."""
    result = service.get_feed(derive_token(2, SECRET), now=NOW)
    assert result.event_count == 1
    assert "SUMMARY:Bilanzierung" in result.body


def test_feed_for_user_without_events(service):
    result = service.get_feed(derive_token(3, SECRET), now=NOW)
    assert result.found
    assert result.event_count == 0
    assert "BEGIN:VEVENT" not in result.body
    assert "BEGIN:VTIMEZONE" in result.body
    assert result.last_modified is None


def test_feed_last_modified_is_latest_update(service):
    result = service.get_feed(derive_token(1, SECRET), now=NOW)
    assert result.last_modified == datetime(2025, 10, 1, 8, 0, tzinfo=timezone.utc)
    assert result.last_modified.tzinfo is timezone.utc


@pytest.mark.parametrize("token", ["a" * 31, "not-hex-" * 4, derive_token(99, SECRET)])
def test_unknown_token_is_not_found(service, token):
    result = service.get_feed(token, now=NOW)
    assert not result.found
    assert result.status == FeedStatus.NOT_FOUND
    assert result.body is None


def test_require_user(service):
    assert service.require_user(derive_token(2, SECRET)) == 2
    with pytest.raises(TokenNotFoundError):
        service.require_user(derive_token(99, SECRET))


def test_missing_secret_raises(repository):
    service = FeedService(repository, TokenAuthority(None))
    with pytest.raises(ConfigurationError):
        service.get_feed("a" * 32)


def test_unreadable_data_raises(tmp_path):
    repository = JSONScheduleRepository(tmp_path / "missing.json")
    service = FeedService(repository, TokenAuthority(SECRET))
    with pytest.raises(CollaboratorError):
        service.get_feed(derive_token(1, SECRET))


def test_feed_reflects_current_data(data_file):
    """The data file is re-read for every feed."""
    repository = JSONScheduleRepository(data_file)
    service = FeedService(repository, TokenAuthority(SECRET))
    token = derive_token(1, SECRET)
    assert service.get_feed(token, now=NOW).event_count == 2

    data_file.write_text(
        data_file.read_text(encoding="utf-8").replace('"participant_ids": [1]', '"participant_ids": []'),
        encoding="utf-8",
    )
    assert service.get_feed(token, now=NOW).event_count == 1


def test_build_feed_service_with_index(config, repository):
    config = config.model_copy(update={"token_index": True, "timezone_rules": "tzdb"})
    service = build_feed_service(config, repository)
    assert service.index is not None
    assert service.index.min_rebuild_interval == 30.0
    assert service.writer.timezone_rules == "tzdb"
    assert service.get_feed(derive_token(1, SECRET), now=NOW).event_count == 2


def test_build_feed_service_defaults_to_data_file(config):
    service = build_feed_service(config)
    assert isinstance(service.repository, JSONScheduleRepository)
    assert service.index is None
    assert service.get_feed(derive_token(1, SECRET), now=NOW).found
