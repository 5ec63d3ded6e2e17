import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from portfolio.db.base import Base
from portfolio.db.types import utcnow


class AssignmentDraft(Base):
    __tablename__ = "assignment_drafts"
    __table_args__ = (
        UniqueConstraint("user_id", "draft_key", name="uq_assignment_drafts_user_key"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # one per browser session / wizard instance
    draft_key: Mapped[str] = mapped_column(String(120), nullable=False)

    step: Mapped[str] = mapped_column(String(40), nullable=False, default="basic-info")

    # raw JSON text; unreadable payloads are discarded on load
    payload: Mapped[str] = mapped_column(Text, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
