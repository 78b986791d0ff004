# backend/gcal/events_api.py
"""List and create calendar events on behalf of a Mattermost user."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

import pydantic

from . import remote
from .config import CALLS_NEW_PATH
from .convert import event_to_dto
from .engine import Env, User
from .errors import AuthenticationError, UpstreamError, ValidationError
from .schemas import CreateEventRequest, CreateEventResponse, EventDTO, EventsResponse
from .timeutil import RANGE_TODAY, parse_date_times, resolve_range

log = logging.getLogger(__name__)

CALL_LINK_LABEL = "\U0001F4DE Join Mattermost Call: "


def _require_user(mattermost_user_id: Optional[str]) -> str:
    if not mattermost_user_id:
        raise AuthenticationError("Not authorized")
    return mattermost_user_id


class EventsAPI:
    """Request handlers bound to one configuration snapshot."""

    def __init__(self, env: Env):
        self.env = env

    def get_events(
        self,
        mattermost_user_id: Optional[str],
        range_token: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> EventsResponse:
        user_id = _require_user(mattermost_user_id)
        start, end = resolve_range(range_token or RANGE_TODAY, now)
        return EventsResponse(events=self._events_for_user(user_id, start, end))

    def _events_for_user(self, user_id: str, start: datetime, end: datetime) -> List[EventDTO]:
        try:
            events = self.env.calendar(user_id).view_calendar(User(user_id), start, end)
        except Exception as e:
            log.warning("view calendar failed for user %s: %s", user_id, e)
            raise UpstreamError(str(e)) from e
        return [event_to_dto(ev) for ev in events or []]

    def call_link(self) -> str:
        site_url = self.env.config.site_url
        if not site_url:
            return CALLS_NEW_PATH
        return f"{site_url}{CALLS_NEW_PATH}"

    def create_event(self, mattermost_user_id: Optional[str], body: bytes) -> CreateEventResponse:
        user_id = _require_user(mattermost_user_id)

        try:
            req = CreateEventRequest.model_validate_json(body or b"")
        except pydantic.ValidationError as e:
            raise ValidationError("Invalid request body") from e

        if not req.subject:
            raise ValidationError("Subject is required")

        start, end = parse_date_times(req.date, req.start_time, req.end_time, req.all_day)

        description = req.description
        call_link = ""
        if req.add_mattermost_call:
            call_link = self.call_link()
            if description:
                description += "\n\n"
            description += CALL_LINK_LABEL + call_link

        event = build_event(req, start, end, description)

        try:
            created = self.env.calendar(user_id).create_event(User(user_id), event, req.attendees)
        except Exception as e:
            log.warning("create event failed for user %s: %s", user_id, e)
            raise UpstreamError(str(e)) from e

        log.info("created event %s for user %s", created.id, user_id)
        return CreateEventResponse(event=event_to_dto(created), call_link=call_link)


def build_event(req: CreateEventRequest, start: datetime, end: datetime, description: str) -> remote.Event:
    event = remote.Event(
        subject=req.subject,
        is_all_day=req.all_day,
        start=remote.DateTime.from_datetime(start),
        end=remote.DateTime.from_datetime(end),
    )
    if req.location:
        event.location = remote.Location(display_name=req.location)
    if description:
        event.body = remote.ItemBody(content=description, content_type="text")
    if req.attendees:
        event.attendees = [
            remote.Attendee(email_address=remote.EmailAddress(address=email))
            for email in req.attendees
        ]
    return event
