# backend/gcal/oauth.py
"""
OAuth2 connect/complete flow against Google.

The connect step always asks for consent so that Google issues a refresh
token on every connection, not only on the first one.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build

from .config import FULL_PATH_OAUTH2_REDIRECT, Config
from .engine import Env, User
from .errors import AuthenticationError, ConflictError, NotFoundError, UpstreamError, ValidationError
from .google import SCOPES

log = logging.getLogger(__name__)

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"


def build_flow(config: Config, state: Optional[str] = None) -> Flow:
    redirect_uri = config.plugin_url + FULL_PATH_OAUTH2_REDIRECT
    return Flow.from_client_config(
        {
            "web": {
                "client_id": config.oauth2_client_id,
                "client_secret": config.oauth2_client_secret,
                "auth_uri": AUTH_URI,
                "token_uri": TOKEN_URI,
                "redirect_uris": [redirect_uri],
            }
        },
        scopes=SCOPES,
        state=state,
        redirect_uri=redirect_uri,
        autogenerate_code_verifier=False,
    )


def new_state(mattermost_user_id: str) -> str:
    return f"{uuid.uuid4().hex[:15]}_{mattermost_user_id}"


def connect_url(env: Env, mattermost_user_id: Optional[str]) -> str:
    """Provision a single-use state token and return the consent URL to redirect to."""
    if not mattermost_user_id:
        raise AuthenticationError("Not authorized")

    try:
        user = env.store.load_user(mattermost_user_id)
    except Exception as e:
        # only a successful lookup counts as connected
        log.debug("load user %s: %s", mattermost_user_id, e)
        user = None
    if user is not None:
        raise ConflictError(f'{{"error":"user is already connected to {user.remote_mail}"}}')

    state = new_state(mattermost_user_id)
    env.store.store_oauth2_state(state)

    url, _ = build_flow(env.config, state).authorization_url(
        access_type="offline",
        prompt="consent",
    )
    log.info("starting oauth2 connect for user %s", mattermost_user_id)
    return url


def fetch_remote_user(credentials) -> dict:
    service = build("oauth2", "v2", credentials=credentials, cache_discovery=False)
    return service.userinfo().get().execute()


def complete(env: Env, mattermost_user_id: Optional[str], code: str, state: str) -> User:
    """Exchange the authorization code and store the connected user."""
    if not mattermost_user_id:
        raise AuthenticationError("Not authorized")
    if not code:
        raise ValidationError("missing authorization code")

    try:
        env.store.verify_oauth2_state(state)
    except NotFoundError as e:
        raise ValidationError("missing stored state") from e
    if not state.endswith("_" + mattermost_user_id):
        raise AuthenticationError("Not authorized, user ID mismatch.")

    flow = build_flow(env.config, state)
    try:
        flow.fetch_token(code=code)
        info = fetch_remote_user(flow.credentials)
    except Exception as e:
        raise UpstreamError(f"failed to complete oauth2 flow: {e}") from e

    user = User(
        mattermost_user_id=mattermost_user_id,
        remote_id=info.get("id", ""),
        remote_mail=info.get("email", ""),
        oauth2_token=flow.credentials.to_json(),
    )
    env.store.store_user(user)
    log.info("user %s connected as %s", mattermost_user_id, user.remote_mail)
    return user
