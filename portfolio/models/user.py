import uuid
from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column
import sqlalchemy as sa

from portfolio.db.base import Base
from portfolio.db.types import utcnow


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "role IN ('student','teacher','admin','public')",
            name="ck_users_role",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)

    role: Mapped[str] = mapped_column(String(20), nullable=False, default="student")
    grade: Mapped[str | None] = mapped_column(String(40), nullable=True)
    school_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=sa.func.now(), onupdate=utcnow, nullable=False
    )
