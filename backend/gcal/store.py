# backend/gcal/store.py
"""SQLAlchemy-backed store for connected users and OAuth2 state tokens."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .db import SessionLocal
from .engine import Store, User
from .errors import NotFoundError, UpstreamError
from .models import OAuth2StateRow, UserRow


class SQLStore(Store):
    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    def _session(self) -> Session:
        return self.session_factory()

    def load_user(self, mattermost_user_id: str) -> User:
        with self._session() as db:
            row = db.get(UserRow, mattermost_user_id)
            if row is None:
                raise NotFoundError(f"user {mattermost_user_id} is not connected")
            return User(
                mattermost_user_id=row.mattermost_user_id,
                remote_id=row.remote_id,
                remote_mail=row.remote_mail,
                oauth2_token=row.oauth2_token,
            )

    def store_user(self, user: User) -> None:
        try:
            with self._session() as db:
                row = db.get(UserRow, user.mattermost_user_id)
                if row is None:
                    row = UserRow(mattermost_user_id=user.mattermost_user_id)
                    db.add(row)
                row.remote_id = user.remote_id
                row.remote_mail = user.remote_mail
                row.oauth2_token = user.oauth2_token
                db.commit()
        except SQLAlchemyError as e:
            raise UpstreamError(f"failed to store user: {e}") from e

    def store_oauth2_state(self, state: str) -> None:
        try:
            with self._session() as db:
                db.add(OAuth2StateRow(state=state))
                db.commit()
        except SQLAlchemyError as e:
            raise UpstreamError(f"failed to store oauth2 state: {e}") from e

    def verify_oauth2_state(self, state: str) -> None:
        with self._session() as db:
            row = db.get(OAuth2StateRow, state)
            if row is None:
                raise NotFoundError("invalid oauth2 state")
            db.delete(row)
            db.commit()
