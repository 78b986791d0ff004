# backend/gcal/engine.py
"""
Seams to the calendar engine.

``Calendar`` reads and writes a user's provider calendar, ``Store`` keeps
connected users and OAuth2 state tokens. ``Env`` bundles them with the
configuration as one immutable snapshot.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from . import remote
from .config import Config


@dataclass(frozen=True)
class User:
    mattermost_user_id: str
    remote_id: str = ""
    remote_mail: str = ""
    oauth2_token: Optional[str] = None  # serialized credentials JSON


class Store(abc.ABC):
    @abc.abstractmethod
    def load_user(self, mattermost_user_id: str) -> User:
        """Return the connected user or raise NotFoundError."""

    @abc.abstractmethod
    def store_user(self, user: User) -> None: ...

    @abc.abstractmethod
    def store_oauth2_state(self, state: str) -> None: ...

    @abc.abstractmethod
    def verify_oauth2_state(self, state: str) -> None:
        """Consume a state token; raise NotFoundError if it was never issued."""


class Calendar(abc.ABC):
    @abc.abstractmethod
    def view_calendar(self, user: User, start: datetime, end: datetime) -> List[remote.Event]: ...

    @abc.abstractmethod
    def create_event(self, user: User, event: remote.Event, attendee_ids: List[str]) -> remote.Event: ...


@dataclass(frozen=True)
class Env:
    config: Config
    store: Store
    # builds the calendar engine acting for one user
    calendar_factory: Callable[["Env", str], Calendar]

    def calendar(self, mattermost_user_id: str) -> Calendar:
        return self.calendar_factory(self, mattermost_user_id)
