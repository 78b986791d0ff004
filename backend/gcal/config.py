# backend/gcal/config.py
"""Plugin configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

DEFAULT_PLUGIN_ID = "com.mattermost.gcal"
PLUGIN_VERSION = "0.1.0"

# Path served by the Calls plugin to start a new call.
CALLS_NEW_PATH = "/plugins/com.fambear.calls/new"
FULL_PATH_OAUTH2_REDIRECT = "/oauth2/complete"


def _clean(s: str | None) -> str | None:
    return s.strip().rstrip("/") if s and s.strip() else None


@dataclass(frozen=True)
class Config:
    plugin_id: str = DEFAULT_PLUGIN_ID
    plugin_version: str = PLUGIN_VERSION
    site_url: str = ""
    oauth2_client_id: str = ""
    oauth2_client_secret: str = ""
    log_level: str = "INFO"
    extra_cors_origins: Tuple[str, ...] = ()

    @property
    def plugin_url(self) -> str:
        """Public URL of this plugin, empty when no site URL is configured."""
        if not self.site_url:
            return ""
        return f"{self.site_url}/plugins/{self.plugin_id}"


def load_config(environ: Optional[dict] = None) -> Config:
    env = os.environ if environ is None else environ
    return Config(
        plugin_id=_clean(env.get("GCAL_PLUGIN_ID")) or DEFAULT_PLUGIN_ID,
        site_url=_clean(env.get("GCAL_SITE_URL")) or "",
        oauth2_client_id=(env.get("GCAL_OAUTH2_CLIENT_ID") or "").strip(),
        oauth2_client_secret=(env.get("GCAL_OAUTH2_CLIENT_SECRET") or "").strip(),
        log_level=(_clean(env.get("LOG_LEVEL")) or "INFO").upper(),
        extra_cors_origins=tuple(x for x in (_clean(p) for p in env.get("EXTRA_CORS_ORIGINS", "").split(",")) if x),
    )
