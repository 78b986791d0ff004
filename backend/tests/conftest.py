"""
Test configuration and fixtures.

Provides in-memory fakes for the calendar engine and the store so the
routes can be exercised without Google or a database.
"""

from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from gcal import remote
from gcal.config import Config
from gcal.engine import Calendar, Env, Store, User
from gcal.errors import NotFoundError, UpstreamError
from gcal.main import create_app
from gcal.plugin import Plugin


class FakeStore(Store):
    def __init__(self):
        self.users = {}
        self.states = set()
        self.state_error: Optional[Exception] = None

    def load_user(self, mattermost_user_id: str) -> User:
        if mattermost_user_id not in self.users:
            raise NotFoundError("not found")
        return self.users[mattermost_user_id]

    def store_user(self, user: User) -> None:
        self.users[user.mattermost_user_id] = user

    def store_oauth2_state(self, state: str) -> None:
        if self.state_error is not None:
            raise self.state_error
        self.states.add(state)

    def verify_oauth2_state(self, state: str) -> None:
        if state not in self.states:
            raise NotFoundError("invalid oauth2 state")
        self.states.remove(state)


class FakeCalendar(Calendar):
    def __init__(self, events: Optional[List[remote.Event]] = None, error: Optional[Exception] = None):
        self.events = events or []
        self.error = error
        self.viewed = []
        self.created = []

    def view_calendar(self, user, start, end):
        if self.error is not None:
            raise self.error
        self.viewed.append((user, start, end))
        return list(self.events)

    def create_event(self, user, event, attendee_ids):
        if self.error is not None:
            raise self.error
        self.created.append((user, event, attendee_ids))
        return event.model_copy(update={"id": "evt-created", "weblink": "https://calendar.google.com/event?eid=abc"})


@pytest.fixture
def calendar():
    return FakeCalendar()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def config():
    return Config(
        site_url="",
        oauth2_client_id="client-id.apps.googleusercontent.com",
        oauth2_client_secret="client-secret",
    )


@pytest.fixture
def env(config, store, calendar):
    return Env(config=config, store=store, calendar_factory=lambda env, user_id: calendar)


@pytest.fixture
def plugin(env, monkeypatch):
    monkeypatch.delenv("AUTO_MIGRATE", raising=False)
    p = Plugin(env)
    p.on_activate()
    return p


@pytest.fixture
def client(plugin):
    """Test client for an activated plugin."""
    return TestClient(create_app(plugin))


@pytest.fixture
def auth_headers():
    return {"Mattermost-User-Id": "user-123"}


@pytest.fixture
def sample_event():
    return remote.Event(
        id="evt-1",
        subject="Standup",
        start=remote.DateTime(date_time="2024-03-15T09:00:00", time_zone="UTC"),
        end=remote.DateTime(date_time="2024-03-15T09:15:00", time_zone="UTC"),
        location=remote.Location(display_name="Room 4"),
        organizer=remote.Organizer(email_address=remote.EmailAddress(address="ann@example.com", name="Ann")),
        body=remote.ItemBody(content="Daily sync", content_type="text"),
        conference=remote.Conference(url="https://meet.google.com/abc-defg-hij"),
        weblink="https://calendar.google.com/event?eid=1",
    )


@pytest.fixture
def upstream_error():
    return UpstreamError("calendar unavailable")
