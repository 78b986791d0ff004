"""create users and oauth2_states tables

Revision ID: 3b7c2d9a51e0
Revises:
Create Date: 2026-10-17 10:12:04.511203
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3b7c2d9a51e0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("mattermost_user_id", sa.String(length=64), primary_key=True),
        sa.Column("remote_id",   sa.String(length=255), nullable=False, server_default=""),
        sa.Column("remote_mail", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("oauth2_token", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "oauth2_states",
        sa.Column("state", sa.String(length=128), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

def downgrade() -> None:
    op.drop_table("oauth2_states")
    op.drop_table("users")
