# backend/gcal/schemas.py
from __future__ import annotations

from typing import Any, ClassVar, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_serializer


class OmitEmptyModel(BaseModel):
    """Drops the fields named in ``omit_empty`` from JSON when they are None or ""."""

    omit_empty: ClassVar[FrozenSet[str]] = frozenset()

    @model_serializer(mode="wrap")
    def serialize_omit_empty(self, handler) -> dict[str, Any]:
        data = handler(self)
        return {k: v for k, v in data.items() if not (k in self.omit_empty and v in (None, ""))}


class EventDTO(OmitEmptyModel):
    """Simplified event for the frontend."""
    omit_empty = frozenset({"location", "webLink", "organizer", "description", "conference"})

    id: str = ""
    subject: str = ""
    start: str = ""
    end: str = ""
    location: str = ""
    isAllDay: bool = False
    webLink: str = ""
    organizer: str = ""
    description: str = ""
    conference: str = ""


class EventsResponse(OmitEmptyModel):
    omit_empty = frozenset({"events", "timezone", "error"})

    events: Optional[List[EventDTO]] = None
    timezone: str = ""
    error: str = ""


class CreateEventRequest(BaseModel):
    """Create form payload. Unknown keys are ignored, missing keys are zero values."""
    model_config = ConfigDict(extra="ignore")

    subject: str = ""
    all_day: bool = False
    attendees: List[str] = []
    date: str = ""
    start_time: str = ""
    end_time: str = ""
    description: str = ""
    location: str = ""
    channel_id: str = ""  # accepted for compatibility, unused
    add_mattermost_call: bool = False

    @field_validator("attendees", mode="before")
    @classmethod
    def null_attendees_as_empty(cls, v):
        return [] if v is None else v


class CreateEventResponse(OmitEmptyModel):
    omit_empty = frozenset({"event", "call_link", "error"})

    event: Optional[EventDTO] = None
    call_link: str = ""
    error: str = ""
