# backend/gcal/convert.py
from __future__ import annotations

from datetime import datetime

from . import remote
from .schemas import EventDTO


def format_timestamp(dt: datetime) -> str:
    """RFC 3339 with second precision; UTC is written as Z."""
    return dt.isoformat(timespec="seconds").replace("+00:00", "Z")


def event_to_dto(event: remote.Event) -> EventDTO:
    """Flatten a provider event; every missing nested field becomes ""."""
    dto = EventDTO(
        id=event.id,
        subject=event.subject,
        isAllDay=event.is_all_day,
        webLink=event.weblink,
    )
    if event.start is not None:
        dto.start = format_timestamp(event.start.time())
    if event.end is not None:
        dto.end = format_timestamp(event.end.time())
    if event.location is not None:
        dto.location = event.location.display_name
    if event.organizer is not None and event.organizer.email_address is not None:
        dto.organizer = event.organizer.email_address.name
    if event.body is not None:
        dto.description = event.body.content
    if event.conference is not None:
        dto.conference = event.conference.url
    return dto
