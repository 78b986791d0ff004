from __future__ import annotations
from typing import Optional
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRow(Base):
    __tablename__ = "users"

    mattermost_user_id: Mapped[str]           = mapped_column(String(64), primary_key=True)
    remote_id:          Mapped[str]           = mapped_column(String(255), nullable=False, default="")
    remote_mail:        Mapped[str]           = mapped_column(String(255), nullable=False, default="")
    oauth2_token:       Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at:         Mapped[datetime]      = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)


class OAuth2StateRow(Base):
    __tablename__ = "oauth2_states"

    state:      Mapped[str]      = mapped_column(String(128), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
