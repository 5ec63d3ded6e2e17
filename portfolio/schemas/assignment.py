from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portfolio.workflow.taxonomy import MONTHS, QUESTION_LABELS, AssignmentStatus


class FileRef(BaseModel):
    url: str
    name: str = ""
    type: str = ""
    size: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    is_process_documentation: bool = False


class ExternalLink(BaseModel):
    url: str = ""
    title: str = ""
    type: str = "link"


class AssignmentFields(BaseModel):
    """Student-editable fields. `youtubelinks` is legacy and not accepted."""
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=255)
    subject: str | None = None
    grade: str | None = None
    artifact_type: str | None = None
    month: str | None = None

    is_team_work: bool | None = None
    team_contribution: str | None = None
    is_original_work: bool | None = None
    originality_explanation: str | None = None

    selected_skills: list[str] | None = None
    skills_justification: str | None = None
    pride_reason: str | None = None
    creation_process: str | None = None
    learnings: str | None = None
    challenges: str | None = None
    improvements: str | None = None
    acknowledgments: str | None = None

    files: list[FileRef] | None = None
    externalLinks: list[ExternalLink] | None = None

    @field_validator("month")
    @classmethod
    def _known_month(cls, v: str | None) -> str | None:
        if v and v not in MONTHS:
            raise ValueError("Must be a valid month")
        return v

    @field_validator("selected_skills")
    @classmethod
    def _unique_skills(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        return list(dict.fromkeys(v))


class AssignmentCreate(AssignmentFields):
    teacher_id: str | None = None


class AssignmentUpdate(AssignmentFields):
    pass


class AssignmentOut(BaseModel):
    id: str
    student_id: str
    teacher_id: str | None
    status: AssignmentStatus

    title: str
    subject: str
    grade: str
    artifact_type: str
    month: str

    is_team_work: bool
    team_contribution: str | None
    is_original_work: bool
    originality_explanation: str | None

    selected_skills: list[str]
    skills_justification: str | None
    pride_reason: str | None
    creation_process: str | None
    learnings: str | None
    challenges: str | None
    improvements: str | None
    acknowledgments: str | None

    files: list[dict[str, Any]]
    externalLinks: list[dict[str, Any]]
    youtubelinks: list[dict[str, Any]]

    feedback: list[dict[str, Any]]
    current_revision: int
    revision_history: list[dict[str, Any]]

    submitted_at: datetime | None
    verified_at: datetime | None
    created_at: datetime | None
    updated_at: datetime | None


class ReviewPayload(BaseModel):
    decision: Literal["APPROVED", "NEEDS_REVISION", "REJECTED"]
    text: str = ""
    selected_skills: list[str] = Field(default_factory=list)
    skills_justification: str = ""
    # question id -> comment text
    question_comments: dict[str, str] = Field(default_factory=dict)

    @field_validator("question_comments")
    @classmethod
    def _known_questions(cls, v: dict[str, str]) -> dict[str, str]:
        unknown = sorted(k for k in v if k not in QUESTION_LABELS)
        if unknown:
            raise ValueError(f"Unknown question ids: {', '.join(unknown)}")
        return v
