# backend/gcal/google.py
"""Calendar engine backed by the Google Calendar v3 API."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Dict, List, Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from . import remote
from .engine import Calendar, Env, User
from .errors import NotFoundError, UpstreamError

log = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.settings.readonly",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
]

PRIMARY_CALENDAR = "primary"


def load_credentials(env: Env, user: User) -> Credentials:
    """Credentials for a stored user, refreshed and written back when expired."""
    if not user.oauth2_token:
        raise UpstreamError(f"user {user.mattermost_user_id} has no stored credentials")
    creds = Credentials.from_authorized_user_info(json.loads(user.oauth2_token), SCOPES)
    if not creds.valid and creds.refresh_token:
        log.info("refreshing google token for user %s", user.mattermost_user_id)
        creds.refresh(Request())
        env.store.store_user(replace(user, oauth2_token=creds.to_json()))
    return creds


# ───────────────────────── Google JSON ↔ remote.Event ─────────────────
def _date_time(
    raw: Dict[str, Any], default_tz: str, end: bool = False, wall_tz: Optional[tzinfo] = None,
) -> Optional[remote.DateTime]:
    if not raw:
        return None
    tz_name = raw.get("timeZone") or default_tz
    if "dateTime" in raw:
        return remote.DateTime(date_time=raw["dateTime"], time_zone=tz_name)
    if "date" in raw:
        d = date.fromisoformat(raw["date"])
        # all-day ends are exclusive in Google; report the last second of the previous day
        wall = datetime.combine(d - timedelta(days=1), time(23, 59, 59)) if end else datetime.combine(d, time(0, 0))
        if not tz_name and wall_tz is not None:
            wall = wall.replace(tzinfo=wall_tz)
        return remote.DateTime(date_time=wall.isoformat(), time_zone=tz_name)
    return None


def _conference_url(item: Dict[str, Any]) -> str:
    if item.get("hangoutLink"):
        return item["hangoutLink"]
    for ep in (item.get("conferenceData") or {}).get("entryPoints", []):
        if ep.get("entryPointType") == "video" and ep.get("uri"):
            return ep["uri"]
    return ""


def event_from_google(
    item: Dict[str, Any], default_tz: str = "", wall_tz: Optional[tzinfo] = None,
) -> remote.Event:
    """
    Convert a Google event resource. All-day dates carry no zone of their own;
    they are placed in ``default_tz`` (a zone name) or, failing that, ``wall_tz``.
    """
    start = item.get("start") or {}
    event = remote.Event(
        id=item.get("id", ""),
        subject=item.get("summary", ""),
        is_all_day="date" in start and "dateTime" not in start,
        start=_date_time(start, default_tz, wall_tz=wall_tz),
        end=_date_time(item.get("end") or {}, default_tz, end=True, wall_tz=wall_tz),
        weblink=item.get("htmlLink", ""),
    )
    if item.get("location"):
        event.location = remote.Location(display_name=item["location"])
    organizer = item.get("organizer")
    if organizer:
        event.organizer = remote.Organizer(
            email_address=remote.EmailAddress(
                address=organizer.get("email", ""),
                name=organizer.get("displayName", ""),
            )
        )
    if item.get("description"):
        event.body = remote.ItemBody(content=item["description"], content_type="text")
    url = _conference_url(item)
    if url:
        event.conference = remote.Conference(url=url, application="Google Meet")
    if item.get("attendees"):
        event.attendees = [
            remote.Attendee(
                email_address=remote.EmailAddress(address=a.get("email", ""), name=a.get("displayName", "")),
                type="optional" if a.get("optional") else "required",
            )
            for a in item["attendees"]
        ]
    return event


def event_to_google(event: remote.Event) -> Dict[str, Any]:
    body: Dict[str, Any] = {"summary": event.subject}
    if event.start is not None and event.end is not None:
        if event.is_all_day:
            body["start"] = {"date": event.start.time().date().isoformat()}
            body["end"] = {"date": (event.end.time().date() + timedelta(days=1)).isoformat()}
        else:
            body["start"] = {"dateTime": event.start.time().isoformat()}
            body["end"] = {"dateTime": event.end.time().isoformat()}
            if event.start.time_zone:
                body["start"]["timeZone"] = event.start.time_zone
            if event.end.time_zone:
                body["end"]["timeZone"] = event.end.time_zone
    if event.location is not None:
        body["location"] = event.location.display_name
    if event.body is not None:
        body["description"] = event.body.content
    if event.attendees:
        body["attendees"] = [
            {"email": a.email_address.address}
            for a in event.attendees
            if a.email_address is not None
        ]
    return body


class GoogleCalendar(Calendar):
    def __init__(self, env: Env, mattermost_user_id: str):
        self.env = env
        self.mattermost_user_id = mattermost_user_id

    def _service(self, user: User):
        try:
            stored = self.env.store.load_user(user.mattermost_user_id)
        except NotFoundError as e:
            raise UpstreamError(f"user {user.mattermost_user_id} is not connected") from e
        try:
            creds = load_credentials(self.env, stored)
        except GoogleAuthError as e:
            raise UpstreamError(f"failed to refresh credentials: {e}") from e
        return build("calendar", "v3", credentials=creds, cache_discovery=False)

    def view_calendar(self, user: User, start: datetime, end: datetime) -> List[remote.Event]:
        service = self._service(user)
        events: List[remote.Event] = []
        page_token = None
        try:
            while True:
                result = (
                    service.events()
                    .list(
                        calendarId=PRIMARY_CALENDAR,
                        timeMin=start.isoformat(),
                        timeMax=end.isoformat(),
                        singleEvents=True,
                        orderBy="startTime",
                        pageToken=page_token,
                    )
                    .execute()
                )
                tz_name = result.get("timeZone", "")
                events.extend(event_from_google(item, tz_name) for item in result.get("items", []))
                page_token = result.get("nextPageToken")
                if not page_token:
                    break
        except HttpError as e:
            raise UpstreamError(f"failed to list events: {e}") from e
        return events

    def create_event(self, user: User, event: remote.Event, attendee_ids: List[str]) -> remote.Event:
        service = self._service(user)
        try:
            created = (
                service.events()
                .insert(
                    calendarId=PRIMARY_CALENDAR,
                    body=event_to_google(event),
                    sendUpdates="all" if attendee_ids else "none",
                )
                .execute()
            )
        except HttpError as e:
            raise UpstreamError(f"failed to create event: {e}") from e
        # echo all-day dates back in the zone the event was built in
        wall_tz = event.start.time().tzinfo if event.start is not None else None
        return event_from_google(created, wall_tz=wall_tz)


def new_calendar(env: Env, mattermost_user_id: str) -> Calendar:
    return GoogleCalendar(env, mattermost_user_id)
