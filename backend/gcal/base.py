# backend/gcal/base.py
"""
The base plugin: everything that is not an events route or the OAuth2
connect interception is served from here.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig
from fastapi import Depends, FastAPI, Header, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from . import oauth
from .db import DB_URL, get_db
from .engine import Env
from .errors import CalendarAPIError

log = logging.getLogger(__name__)


# ───────────────────────── DB migrations (optional) ─────────────────
def run_migrations() -> None:
    app_dir = Path(__file__).resolve().parent
    cfg = AlembicConfig()
    cfg.set_main_option("script_location", str(app_dir / "migrations"))
    cfg.set_main_option("sqlalchemy.url", DB_URL)
    command.upgrade(cfg, "head")


class BasePlugin:
    def __init__(self, env: Env):
        self.env = env
        self.app = FastAPI(title="Google Calendar base plugin")
        self._register_routes()

    def on_activate(self) -> None:
        if os.getenv("AUTO_MIGRATE") == "1":
            log.info("running database migrations")
            run_migrations()

    def on_configuration_change(self, env: Env) -> None:
        self.env = env

    def _register_routes(self) -> None:
        app = self.app

        # ───────────────────────── Lifecycle & health ───────────────
        @app.get("/health")
        def health_check():
            return {"status": "ok"}

        @app.get("/")
        def read_root():
            return {"message": f"{self.env.config.plugin_id} is running."}

        @app.get("/dbcheck")
        def dbcheck(db: Session = Depends(get_db)):
            db.execute(text("SELECT 1"))
            return {"db": "ok"}

        # ───────────────────────── OAuth2 completion ────────────────
        @app.get("/oauth2/complete")
        def oauth2_complete(
            code: str = Query(default=""),
            state: str = Query(default=""),
            mattermost_user_id: str | None = Header(default=None, alias="Mattermost-User-Id"),
        ):
            try:
                user = oauth.complete(self.env, mattermost_user_id, code, state)
            except CalendarAPIError as e:
                return PlainTextResponse(e.message, status_code=e.status_code)
            return PlainTextResponse(f"Successfully connected to Google Calendar as {user.remote_mail}.")
