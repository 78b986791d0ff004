# backend/gcal/remote.py
"""Provider-shaped calendar records passed to and from the calendar engine."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo

from dateutil.parser import isoparse
from pydantic import BaseModel


class DateTime(BaseModel):
    """A wall-clock timestamp plus an optional IANA zone name."""
    date_time: str
    time_zone: str = ""

    @classmethod
    def from_datetime(cls, dt: datetime, tz_name: str = "") -> "DateTime":
        return cls(date_time=dt.isoformat(), time_zone=tz_name)

    def time(self) -> datetime:
        dt = isoparse(self.date_time)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=ZoneInfo(self.time_zone) if self.time_zone else timezone.utc)
        return dt


class EmailAddress(BaseModel):
    address: str = ""
    name: str = ""


class Attendee(BaseModel):
    email_address: Optional[EmailAddress] = None
    type: str = ""


class Organizer(BaseModel):
    email_address: Optional[EmailAddress] = None


class Location(BaseModel):
    display_name: str = ""


class ItemBody(BaseModel):
    content: str = ""
    content_type: str = ""


class Conference(BaseModel):
    url: str = ""
    application: str = ""


class Event(BaseModel):
    id: str = ""
    subject: str = ""
    is_all_day: bool = False
    start: Optional[DateTime] = None
    end: Optional[DateTime] = None
    location: Optional[Location] = None
    organizer: Optional[Organizer] = None
    body: Optional[ItemBody] = None
    conference: Optional[Conference] = None
    weblink: str = ""
    attendees: Optional[List[Attendee]] = None
