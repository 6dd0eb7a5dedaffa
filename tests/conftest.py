import json
from datetime import date, time

import pytest

from schedule_feed import create_app
from schedule_feed.config import FeedConfig
from schedule_feed.models.event import EventKind, EventModel
from schedule_feed.models.records import ScheduleSnapshot
from schedule_feed.storage.json_repository import InMemoryScheduleRepository

SECRET = "test-calendar-secret"


def schedule_data():
    """Raw schedule data as found in a JSON data file."""
    return {
        "users": [
            {"id": 1, "name": "Anna Muster", "initials": "AM", "program": "DTI", "role": "student"},
            {"id": 2, "name": "Bernd Beispiel", "initials": "BB", "program": "BWL", "role": "student"},
            {"id": 3, "name": "Clara Lehrer", "initials": "CL", "role": "professor"},
        ],
        "courses": [
            {"id": 10, "title": "Data Science", "programs": ["DTI"]},
            {"id": 11, "title": "Web Engineering", "programs": ["DTI"]},
            {"id": 12, "title": "Rechnungswesen", "programs": ["BWL"]},
        ],
        "sessions": [
            {
                "id": 1,
                "course_id": 10,
                "type": "lecture",
                "title": "Einführung in Data Science",
                "start_datetime": "2025-10-03T15:45:00",
                "end_datetime": "2025-10-03T19:15:00",
                "location": "B309",
                "location_type": "on_campus",
                "attendance": "mandatory",
                "objectives": ["Grundbegriffe kennen"],
                "lecturer": {"name": "Clara Lehrer", "initials": "CL"},
                "updated_at": "2025-10-01T08:00:00Z",
            },
            {
                "id": 2,
                "course_id": 12,
                "type": "lecture",
                "title": "Bilanzierung",
                "start_datetime": "2025-10-06T09:00:00",
                "end_datetime": "2025-10-06T12:15:00",
                "location": "A101",
            },
        ],
        "coaching_slots": [
            {
                "id": 5,
                "course_id": 10,
                "start_datetime": "2025-10-28T18:30:00",
                "end_datetime": "2025-10-28T19:15:00",
                "participant_ids": [1],
                "location": "Raum C2",
                "updated_at": "2025-09-20T10:30:00Z",
            },
        ],
    }


@pytest.fixture
def snapshot():
    return ScheduleSnapshot.model_validate(schedule_data())


@pytest.fixture
def repository(snapshot):
    return InMemoryScheduleRepository(snapshot)


@pytest.fixture
def data_file(tmp_path):
    """Schedule data written to a JSON file."""
    path = tmp_path / "schedule.json"
    path.write_text(json.dumps(schedule_data()), encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path, data_file):
    return FeedConfig(
        calendar_secret=SECRET,
        data_file=data_file,
        base_url="https://dashboard.example.org",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def app(config, repository):
    """Create and configure a Flask app for testing."""
    app = create_app(config, repository)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_event():
    """Factory for events with sensible defaults."""

    def _make_event(
        id=1,
        day=date(2025, 10, 3),
        start=time(9, 0),
        end=time(10, 0),
        kind=EventKind.LECTURE,
        title="Vorlesung",
        **fields,
    ):
        return EventModel(
            id=id,
            kind=kind,
            course_id=fields.pop("course_id", 10),
            title=title,
            date=day,
            start=start,
            end=end,
            **fields,
        )

    return _make_event
