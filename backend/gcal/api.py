# backend/gcal/api.py
"""
Routes served ahead of the base plugin.

``/oauth2/connect`` is intercepted to force the consent prompt; the events
routes go to the published ``EventsAPI``. Anything else, and the events
routes before activation, falls through to the base plugin.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.types import ASGIApp, Receive, Scope, Send

from . import oauth
from .errors import CalendarAPIError
from .plugin import Plugin
from .timeutil import RANGE_TODAY, RANGE_TOMORROW, RANGE_WEEK

oauth_router = APIRouter()
events_router = APIRouter()


class DelegateResponse(Response):
    """Hands the untouched request over to another ASGI app."""

    def __init__(self, app: ASGIApp):
        super().__init__()
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.app(scope, receive, send)


def current_plugin(request: Request) -> Plugin:
    return request.app.state.plugin


def mattermost_user_id(
    user_id: Optional[str] = Header(default=None, alias="Mattermost-User-Id"),
) -> Optional[str]:
    """Caller identity set by the trusted upstream proxy; not verified here."""
    return user_id


def json_envelope(model, status_code: int = 200) -> JSONResponse:
    return JSONResponse(model.model_dump(), status_code=status_code)


# ───────────────────────── OAuth2 connect ───────────────────────────
@oauth_router.get("/oauth2/connect")
def oauth2_connect(
    user_id: Optional[str] = Depends(mattermost_user_id),
    plugin: Plugin = Depends(current_plugin),
):
    try:
        url = oauth.connect_url(plugin.env, user_id)
    except CalendarAPIError as e:
        return PlainTextResponse(e.message, status_code=e.status_code)
    except Exception as e:
        return PlainTextResponse(str(e), status_code=500)
    return RedirectResponse(url, status_code=302)


# ───────────────────────── Events ───────────────────────────────────
# Routes are bound to their method. A request with another method on these
# paths is only a partial match, so the catch-all "/" mount takes it and the
# base plugin answers (404). The events handlers never see another method.
def _get_events(plugin: Plugin, user_id: Optional[str], range_token: Optional[str]) -> Response:
    handler = plugin.events_api
    if handler is None:
        return DelegateResponse(plugin.base.app)
    return json_envelope(handler.get_events(user_id, range_token))


@events_router.get("/events")
def get_events(
    range_token: Optional[str] = Query(default=None, alias="range"),
    user_id: Optional[str] = Depends(mattermost_user_id),
    plugin: Plugin = Depends(current_plugin),
):
    return _get_events(plugin, user_id, range_token or RANGE_TODAY)


@events_router.get("/events/today")
def get_today_events(
    user_id: Optional[str] = Depends(mattermost_user_id),
    plugin: Plugin = Depends(current_plugin),
):
    return _get_events(plugin, user_id, RANGE_TODAY)


@events_router.get("/events/tomorrow")
def get_tomorrow_events(
    user_id: Optional[str] = Depends(mattermost_user_id),
    plugin: Plugin = Depends(current_plugin),
):
    return _get_events(plugin, user_id, RANGE_TOMORROW)


@events_router.get("/events/week")
def get_week_events(
    user_id: Optional[str] = Depends(mattermost_user_id),
    plugin: Plugin = Depends(current_plugin),
):
    return _get_events(plugin, user_id, RANGE_WEEK)


@events_router.post("/events/create")
async def create_event(
    request: Request,
    user_id: Optional[str] = Depends(mattermost_user_id),
    plugin: Plugin = Depends(current_plugin),
):
    handler = plugin.events_api
    if handler is None:
        return DelegateResponse(plugin.base.app)
    body = await request.body()
    resp = await run_in_threadpool(handler.create_event, user_id, body)
    return json_envelope(resp)
