from datetime import datetime
from typing import Any

from pydantic import BaseModel


class PortfolioItemOut(BaseModel):
    """Public view of an approved artifact. No feedback, no revision history."""
    id: str
    title: str
    subject: str
    grade: str
    artifact_type: str
    month: str
    is_team_work: bool
    selected_skills: list[str]
    skills_justification: str | None
    pride_reason: str | None
    files: list[dict[str, Any]]
    externalLinks: list[dict[str, Any]]
    verified_at: datetime | None


class PortfolioOut(BaseModel):
    student_id: str
    full_name: str
    grade: str | None
    school_name: str | None
    items: list[PortfolioItemOut]
