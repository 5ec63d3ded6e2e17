from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.orm import Session

from portfolio.db.types import utcnow
from portfolio.models.assignment import Assignment
from portfolio.workflow.migration import migrate_assignment_data, normalize_feedback
from portfolio.workflow.taxonomy import AssignmentStatus, parse_status

# form field name -> column name, where they differ
_FIELD_TO_COLUMN = {"externalLinks": "external_links"}
_COLUMN_TO_FIELD = {v: k for k, v in _FIELD_TO_COLUMN.items()}

EDITABLE_FIELDS = (
    "title",
    "subject",
    "grade",
    "artifact_type",
    "month",
    "is_team_work",
    "team_contribution",
    "is_original_work",
    "originality_explanation",
    "selected_skills",
    "skills_justification",
    "pride_reason",
    "creation_process",
    "learnings",
    "challenges",
    "improvements",
    "acknowledgments",
    "files",
    "externalLinks",
)

# text answers a student may clear by sending null
NULLABLE_FIELDS = frozenset(
    {
        "team_contribution",
        "originality_explanation",
        "skills_justification",
        "pride_reason",
        "creation_process",
        "learnings",
        "challenges",
        "improvements",
        "acknowledgments",
    }
)

_VALUE_COLUMNS = (
    "student_id",
    "teacher_id",
    "status",
    "title",
    "subject",
    "grade",
    "artifact_type",
    "month",
    "is_team_work",
    "team_contribution",
    "is_original_work",
    "originality_explanation",
    "selected_skills",
    "skills_justification",
    "pride_reason",
    "creation_process",
    "learnings",
    "challenges",
    "improvements",
    "acknowledgments",
    "files",
    "external_links",
    "youtubelinks",
    "feedback",
    "current_revision",
    "revision_history",
    "submitted_at",
    "verified_at",
    "created_at",
    "updated_at",
)


def assignment_to_values(a: Assignment) -> dict[str, Any]:
    """Canonical form values for a stored row (legacy shapes migrated)."""
    raw: dict[str, Any] = {"id": str(a.id)}
    for col in _VALUE_COLUMNS:
        value = getattr(a, col)
        if isinstance(value, uuid.UUID):
            value = str(value)
        raw[_COLUMN_TO_FIELD.get(col, col)] = value
    raw["status"] = parse_status(a.status or AssignmentStatus.DRAFT).value
    raw["feedback"] = normalize_feedback(a.feedback)
    if a.links_migrated_at is not None:
        # externalLinks is authoritative once persisted, even when emptied
        raw["youtubelinks"] = []
    return migrate_assignment_data(raw)


def _column_value(value: Any) -> Any:
    if isinstance(value, AssignmentStatus):
        return value.value
    return value


class AssignmentRepository:
    """Record store for assignments. Last write wins; no version checks."""

    def __init__(self, db: Session):
        self.db = db

    def create_assignment(self, data: dict[str, Any]) -> Assignment:
        a = Assignment(
            student_id=data["student_id"],
            teacher_id=data.get("teacher_id"),
            status=AssignmentStatus.DRAFT.value,
            selected_skills=[],
            files=[],
            external_links=[],
            youtubelinks=[],
            links_migrated_at=utcnow(),
            revision_history=[],
            current_revision=0,
        )
        for field in EDITABLE_FIELDS:
            if field in data and data[field] is not None:
                setattr(a, _FIELD_TO_COLUMN.get(field, field), data[field])
        self.db.add(a)
        self.db.flush()
        return a

    def update_assignment(self, assignment_id: uuid.UUID | str, patch: dict[str, Any]) -> Assignment | None:
        a = self.get_assignment(assignment_id)
        if a is None:
            return None
        self.apply(a, patch)
        return a

    def migrate_links(self, a: Assignment) -> bool:
        """
        Persist the externalLinks derived from legacy youtubelinks and stamp
        the row so the derivation never runs for it again. Returns False when
        the row was already migrated.
        """
        if a.links_migrated_at is not None:
            return False
        values = migrate_assignment_data(
            {"externalLinks": a.external_links, "youtubelinks": a.youtubelinks}
        )
        a.external_links = values["externalLinks"]
        a.links_migrated_at = utcnow()
        self.db.flush()
        return True

    def apply(self, a: Assignment, patch: dict[str, Any]) -> Assignment:
        self.migrate_links(a)
        for field, value in patch.items():
            setattr(a, _FIELD_TO_COLUMN.get(field, field), _column_value(value))
        a.updated_at = utcnow()
        self.db.flush()
        return a

    def get_assignment(self, assignment_id: uuid.UUID | str) -> Assignment | None:
        try:
            key = assignment_id if isinstance(assignment_id, uuid.UUID) else uuid.UUID(str(assignment_id))
        except ValueError:
            return None
        return self.db.get(Assignment, key)

    def list_assignments(
        self,
        *,
        student_id: uuid.UUID | None = None,
        teacher_id: uuid.UUID | None = None,
        include_unassigned: bool = False,
        statuses: list[str] | None = None,
        subject: str | None = None,
        month: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Assignment], int]:
        q = self.db.query(Assignment)
        if student_id:
            q = q.filter(Assignment.student_id == student_id)
        if teacher_id:
            if include_unassigned:
                q = q.filter((Assignment.teacher_id == teacher_id) | (Assignment.teacher_id.is_(None)))
            else:
                q = q.filter(Assignment.teacher_id == teacher_id)
        if statuses:
            q = q.filter(Assignment.status.in_(statuses))
        if subject:
            q = q.filter(Assignment.subject == subject)
        if month:
            q = q.filter(Assignment.month == month)

        total = q.count()
        rows = q.order_by(Assignment.created_at.desc(), Assignment.id).offset(offset).limit(limit).all()
        return rows, total

