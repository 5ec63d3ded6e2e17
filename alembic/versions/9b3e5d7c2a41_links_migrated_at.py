"""track the one-time youtubelinks -> external_links migration

Revision ID: 9b3e5d7c2a41
Revises: 4f1c2a9e7b10
Create Date: 2026-10-19 14:02:11.530917

Run scripts/migrate_youtube_links.py after upgrading to persist the derived
links for existing rows.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "9b3e5d7c2a41"
down_revision: Union[str, None] = "4f1c2a9e7b10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("assignments", sa.Column("links_migrated_at", sa.DateTime(timezone=True), nullable=True))


def downgrade() -> None:
    op.drop_column("assignments", "links_migrated_at")
