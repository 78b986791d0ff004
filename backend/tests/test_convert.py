"""Tests for provider event → DTO conversion and envelope serialization."""

from datetime import datetime, timedelta, timezone

from gcal import remote
from gcal.convert import event_to_dto, format_timestamp
from gcal.schemas import CreateEventResponse, EventDTO, EventsResponse


def test_full_event(sample_event):
    dto = event_to_dto(sample_event)

    assert dto.id == "evt-1"
    assert dto.subject == "Standup"
    assert dto.start == "2024-03-15T09:00:00Z"
    assert dto.end == "2024-03-15T09:15:00Z"
    assert dto.location == "Room 4"
    assert dto.organizer == "Ann"
    assert dto.description == "Daily sync"
    assert dto.conference == "https://meet.google.com/abc-defg-hij"
    assert dto.webLink == "https://calendar.google.com/event?eid=1"
    assert dto.isAllDay is False


def test_every_optional_field_absent():
    dto = event_to_dto(remote.Event())

    assert dto == EventDTO()
    for field in ("id", "subject", "start", "end", "location", "webLink", "organizer", "description", "conference"):
        assert getattr(dto, field) == ""
    assert dto.isAllDay is False


def test_organizer_without_email_address():
    dto = event_to_dto(remote.Event(organizer=remote.Organizer()))
    assert dto.organizer == ""


def test_conversion_is_idempotent(sample_event):
    assert event_to_dto(sample_event) == event_to_dto(sample_event)


def test_offset_timestamps_keep_offset():
    event = remote.Event(start=remote.DateTime(date_time="2024-03-15T09:00:00+02:00"))
    assert event_to_dto(event).start == "2024-03-15T09:00:00+02:00"


def test_naive_timestamp_uses_zone_name():
    event = remote.Event(start=remote.DateTime(date_time="2024-07-01T09:00:00", time_zone="Europe/Berlin"))
    assert event_to_dto(event).start == "2024-07-01T09:00:00+02:00"


def test_format_drops_subseconds():
    dt = datetime(2024, 3, 15, 23, 59, 59, 999999, tzinfo=timezone(timedelta(hours=-4)))
    assert format_timestamp(dt) == "2024-03-15T23:59:59-04:00"


class TestEnvelopes:
    def test_empty_fields_are_omitted(self):
        assert event_to_dto(remote.Event(id="x")).model_dump() == {
            "id": "x",
            "subject": "",
            "start": "",
            "end": "",
            "isAllDay": False,
        }

    def test_error_only(self):
        assert EventsResponse(error="Not authorized").model_dump() == {"error": "Not authorized"}
        assert CreateEventResponse(error="Subject is required").model_dump() == {"error": "Subject is required"}

    def test_empty_events_list_is_kept(self):
        assert EventsResponse(events=[]).model_dump() == {"events": []}

    def test_call_link_omitted_when_empty(self):
        data = CreateEventResponse(event=EventDTO(id="e"), call_link="").model_dump()
        assert "call_link" not in data
        assert data["event"]["id"] == "e"
