# backend/gcal/plugin.py
"""
Plugin lifecycle.

Wraps the base plugin and publishes an ``EventsAPI`` built from the current
``Env`` snapshot. Lifecycle hooks replace the snapshot wholesale under a
writer lock; request handlers only read the published reference.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Optional

from .base import BasePlugin
from .config import Config, load_config
from .engine import Env
from .events_api import EventsAPI

log = logging.getLogger(__name__)


class Plugin:
    def __init__(self, env: Env, base: Optional[BasePlugin] = None):
        self.env = env
        self.base = base or BasePlugin(env)
        self._env_lock = threading.Lock()
        self._events_api: Optional[EventsAPI] = None

    @property
    def events_api(self) -> Optional[EventsAPI]:
        """The published handler, or None before activation."""
        return self._events_api

    def _publish(self, env: Env) -> None:
        handler = EventsAPI(env)
        with self._env_lock:
            self.env = env
            self._events_api = handler

    def on_activate(self) -> None:
        self.base.on_activate()
        self._publish(self.env)
        log.info("plugin %s activated", self.env.config.plugin_id)

    def on_configuration_change(self, config: Optional[Config] = None) -> None:
        env = replace(self.env, config=config or load_config())
        self.base.on_configuration_change(env)
        self._publish(env)
        log.info("configuration reloaded")
