import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# ── local modules ───────────────────────────────────────────────────
from .api import events_router, oauth_router
from .config import Config, load_config
from .engine import Env
from .errors import CalendarAPIError
from .google import new_calendar
from .plugin import Plugin
from .store import SQLStore
# ────────────────────────────────────────────────────────────────────

API_PREFIX = "/api/v1"


def configure_logging(config: Config) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(plugin: Plugin) -> FastAPI:
    app = FastAPI(title="Google Calendar events API")
    app.state.plugin = plugin

    # ───────────────────────── CORS ─────────────────────────────────
    if plugin.env.config.extra_cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(plugin.env.config.extra_cors_origins),
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
            max_age=86400,
        )

    # ───────────────────────── Errors ───────────────────────────────
    @app.exception_handler(CalendarAPIError)
    async def calendar_api_error(request: Request, exc: CalendarAPIError):
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    # ───────────────────────── Lifecycle ────────────────────────────
    @app.on_event("startup")
    def on_startup():
        plugin.on_activate()

    # connect interception first, then the events API, then the base plugin
    app.include_router(oauth_router)
    app.include_router(events_router, prefix=API_PREFIX)
    app.mount("/", plugin.base.app, name="base")
    return app


def build_default_app() -> FastAPI:
    config = load_config()
    configure_logging(config)
    env = Env(config=config, store=SQLStore(), calendar_factory=new_calendar)
    return create_app(Plugin(env))


app = build_default_app()
