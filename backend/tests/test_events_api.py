"""Unit tests for the events request handlers."""

import json
from dataclasses import replace
from datetime import datetime, timezone

import pytest
from dateutil import tz

from gcal.convert import format_timestamp
from gcal.errors import AuthenticationError, UpstreamError, ValidationError
from gcal.events_api import EventsAPI


def _body(**overrides):
    payload = {
        "subject": "Sync",
        "date": "2024-03-15",
        "start_time": "09:00",
        "end_time": "09:30",
        "all_day": False,
    }
    payload.update(overrides)
    return json.dumps(payload).encode()


@pytest.fixture
def api(env):
    return EventsAPI(env)


class TestGetEvents:
    def test_requires_user(self, api):
        with pytest.raises(AuthenticationError, match="Not authorized"):
            api.get_events("", "today")

    def test_passes_window_and_keeps_order(self, api, calendar, sample_event):
        later = sample_event.model_copy(update={"id": "evt-0", "subject": "Later"})
        calendar.events = [later, sample_event]
        now = datetime(2024, 3, 15, 8, 0, tzinfo=timezone.utc)

        resp = api.get_events("user-123", "week", now=now)

        assert [e.id for e in resp.events] == ["evt-0", "evt-1"]
        user, start, end = calendar.viewed[0]
        assert user.mattermost_user_id == "user-123"
        assert start == datetime(2024, 3, 15, tzinfo=timezone.utc)
        assert end.date().isoformat() == "2024-03-22"

    def test_empty_result_is_list(self, api):
        assert api.get_events("user-123").events == []

    def test_engine_error(self, api, calendar):
        calendar.error = RuntimeError("token expired")
        with pytest.raises(UpstreamError, match="token expired"):
            api.get_events("user-123")


class TestCreateEvent:
    def test_scenario_sync(self, api, calendar):
        resp = api.create_event("user-123", _body())

        assert resp.event.subject == "Sync"
        assert resp.event.isAllDay is False
        assert resp.event.start == format_timestamp(datetime(2024, 3, 15, 9, 0, tzinfo=tz.tzlocal()))
        assert resp.event.end == format_timestamp(datetime(2024, 3, 15, 9, 30, tzinfo=tz.tzlocal()))
        assert resp.call_link == ""

        _, event, attendees = calendar.created[0]
        assert event.location is None
        assert event.body is None
        assert event.attendees is None
        assert event.start.time_zone == ""
        assert attendees == []

    def test_requires_user(self, api, calendar):
        with pytest.raises(AuthenticationError):
            api.create_event(None, _body())
        assert calendar.created == []

    @pytest.mark.parametrize("raw", [b"", b"{not json", b"[]", b'{"subject": ["x"]}', b'{"attendees": "a@b.c"}'])
    def test_invalid_body(self, api, raw):
        with pytest.raises(ValidationError, match="Invalid request body"):
            api.create_event("user-123", raw)

    def test_unknown_fields_ignored_and_nulls_tolerated(self, api):
        resp = api.create_event("user-123", _body(extra="x", attendees=None))
        assert resp.event.subject == "Sync"

    def test_subject_required(self, api):
        with pytest.raises(ValidationError, match="Subject is required"):
            api.create_event("user-123", _body(subject=""))

    def test_parser_error_message(self, api, calendar):
        with pytest.raises(ValidationError, match="invalid start_time: cannot parse time: 25:61"):
            api.create_event("user-123", _body(start_time="25:61"))
        assert calendar.created == []

    def test_optional_fields(self, api, calendar):
        api.create_event(
            "user-123",
            _body(
                location="Room 4",
                description="Agenda",
                attendees=["a@example.com", "b@example.com"],
                channel_id="chan-1",
            ),
        )

        _, event, attendees = calendar.created[0]
        assert event.location.display_name == "Room 4"
        assert event.body.content == "Agenda"
        assert event.body.content_type == "text"
        assert [a.email_address.address for a in event.attendees] == ["a@example.com", "b@example.com"]
        assert attendees == ["a@example.com", "b@example.com"]

    def test_all_day(self, api, calendar):
        resp = api.create_event("user-123", _body(all_day=True, start_time="", end_time=""))
        _, event, _ = calendar.created[0]
        assert event.is_all_day is True
        assert resp.event.isAllDay is True
        assert event.end.time() == datetime(2024, 3, 15, 23, 59, 59, tzinfo=tz.tzlocal())

    def test_call_link_without_site_url(self, api, calendar):
        resp = api.create_event("user-123", _body(add_mattermost_call=True))

        assert resp.call_link == "/plugins/com.fambear.calls/new"
        _, event, _ = calendar.created[0]
        assert event.body.content == "\U0001F4DE Join Mattermost Call: /plugins/com.fambear.calls/new"

    def test_call_link_appended_after_description(self, env, calendar):
        api = EventsAPI(replace(env, config=replace(env.config, site_url="https://chat.example.com")))

        resp = api.create_event("user-123", _body(add_mattermost_call=True, description="Agenda"))

        assert resp.call_link == "https://chat.example.com/plugins/com.fambear.calls/new"
        _, event, _ = calendar.created[0]
        assert event.body.content == (
            "Agenda\n\n\U0001F4DE Join Mattermost Call: https://chat.example.com/plugins/com.fambear.calls/new"
        )

    def test_engine_error(self, api, calendar):
        calendar.error = UpstreamError("quota exceeded")
        with pytest.raises(UpstreamError, match="quota exceeded"):
            api.create_event("user-123", _body())

    def test_round_trip_preserves_fields(self, api):
        resp = api.create_event("user-123", _body(start_time="2:30 PM", end_time="3:00PM"))
        assert resp.event.subject == "Sync"
        assert resp.event.start == format_timestamp(datetime(2024, 3, 15, 14, 30, tzinfo=tz.tzlocal()))
        assert resp.event.end == format_timestamp(datetime(2024, 3, 15, 15, 0, tzinfo=tz.tzlocal()))
