import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column
import sqlalchemy as sa

from portfolio.db.base import Base
from portfolio.db.types import JSONType, utcnow


class Assignment(Base):
    __tablename__ = "assignments"
    __table_args__ = (
        CheckConstraint(
            "status IN ('DRAFT','SUBMITTED','UNDER_REVIEW','NEEDS_REVISION','APPROVED','REJECTED')",
            name="ck_assignments_status",
        ),
        # DRAFT => never submitted or verified
        CheckConstraint(
            "(status <> 'DRAFT') OR (submitted_at IS NULL AND verified_at IS NULL)",
            name="ck_assignments_ts_draft",
        ),
        # anything past the student's hand-off must carry submitted_at
        CheckConstraint(
            "(status IN ('DRAFT','NEEDS_REVISION')) OR (submitted_at IS NOT NULL)",
            name="ck_assignments_ts_submitted",
        ),
        CheckConstraint("current_revision >= 0", name="ck_assignments_revision"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    teacher_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    subject: Mapped[str] = mapped_column(String(80), nullable=False, default="")
    grade: Mapped[str] = mapped_column(String(40), nullable=False, default="")
    artifact_type: Mapped[str] = mapped_column(String(80), nullable=False, default="")
    month: Mapped[str] = mapped_column(String(20), nullable=False, default="")

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="DRAFT", index=True)

    is_team_work: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    team_contribution: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_original_work: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    originality_explanation: Mapped[str | None] = mapped_column(Text, nullable=True)

    selected_skills: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    skills_justification: Mapped[str | None] = mapped_column(Text, nullable=True)
    pride_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    creation_process: Mapped[str | None] = mapped_column(Text, nullable=True)
    learnings: Mapped[str | None] = mapped_column(Text, nullable=True)
    challenges: Mapped[str | None] = mapped_column(Text, nullable=True)
    improvements: Mapped[str | None] = mapped_column(Text, nullable=True)
    acknowledgments: Mapped[str | None] = mapped_column(Text, nullable=True)

    # artifacts
    files: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    external_links: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    # legacy, read-only: migrated into external_links until links_migrated_at is stamped
    youtubelinks: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    links_migrated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # list of feedback items; older rows hold a single object
    feedback: Mapped[list | dict | None] = mapped_column(JSONType, nullable=True)

    current_revision: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    revision_history: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
        onupdate=utcnow,
    )
