"""initial schema: users, assignments, drafts, audit events

Revision ID: 4f1c2a9e7b10
Revises:
Create Date: 2026-10-19 09:12:40.118204
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "4f1c2a9e7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="student"),
        sa.Column("grade", sa.String(40), nullable=True),
        sa.Column("school_name", sa.String(200), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("role IN ('student','teacher','admin','public')", name="ck_users_role"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "assignments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("student_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("teacher_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(255), nullable=False, server_default=""),
        sa.Column("subject", sa.String(80), nullable=False, server_default=""),
        sa.Column("grade", sa.String(40), nullable=False, server_default=""),
        sa.Column("artifact_type", sa.String(80), nullable=False, server_default=""),
        sa.Column("month", sa.String(20), nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="DRAFT"),
        sa.Column("is_team_work", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("team_contribution", sa.Text(), nullable=True),
        sa.Column("is_original_work", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("originality_explanation", sa.Text(), nullable=True),
        sa.Column("selected_skills", JSONType, nullable=False),
        sa.Column("skills_justification", sa.Text(), nullable=True),
        sa.Column("pride_reason", sa.Text(), nullable=True),
        sa.Column("creation_process", sa.Text(), nullable=True),
        sa.Column("learnings", sa.Text(), nullable=True),
        sa.Column("challenges", sa.Text(), nullable=True),
        sa.Column("improvements", sa.Text(), nullable=True),
        sa.Column("acknowledgments", sa.Text(), nullable=True),
        sa.Column("files", JSONType, nullable=False),
        sa.Column("external_links", JSONType, nullable=False),
        sa.Column("youtubelinks", JSONType, nullable=False),
        sa.Column("feedback", JSONType, nullable=True),
        sa.Column("current_revision", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("revision_history", JSONType, nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "status IN ('DRAFT','SUBMITTED','UNDER_REVIEW','NEEDS_REVISION','APPROVED','REJECTED')",
            name="ck_assignments_status",
        ),
        sa.CheckConstraint(
            "(status <> 'DRAFT') OR (submitted_at IS NULL AND verified_at IS NULL)",
            name="ck_assignments_ts_draft",
        ),
        sa.CheckConstraint(
            "(status IN ('DRAFT','NEEDS_REVISION')) OR (submitted_at IS NOT NULL)",
            name="ck_assignments_ts_submitted",
        ),
        sa.CheckConstraint("current_revision >= 0", name="ck_assignments_revision"),
    )
    op.create_index("ix_assignments_student_id", "assignments", ["student_id"])
    op.create_index("ix_assignments_teacher_id", "assignments", ["teacher_id"])
    op.create_index("ix_assignments_status", "assignments", ["status"])

    op.create_table(
        "assignment_drafts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("draft_key", sa.String(120), nullable=False),
        sa.Column("step", sa.String(40), nullable=False, server_default="basic-info"),
        sa.Column("payload", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "draft_key", name="uq_assignment_drafts_user_key"),
    )

    op.create_table(
        "audit_events",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("actor_user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("entity_type", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("event_metadata", JSONType, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_audit_events_entity", "audit_events", ["entity_type", "entity_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_events_entity", table_name="audit_events")
    op.drop_table("audit_events")
    op.drop_table("assignment_drafts")
    op.drop_index("ix_assignments_status", table_name="assignments")
    op.drop_index("ix_assignments_teacher_id", table_name="assignments")
    op.drop_index("ix_assignments_student_id", table_name="assignments")
    op.drop_table("assignments")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
