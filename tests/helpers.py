from datetime import datetime, timezone

from portfolio.models.assignment import Assignment
from portfolio.models.user import User

FILE_REF = {
    "url": "http://testserver/uploads/poster.pdf",
    "name": "poster.pdf",
    "type": "application/pdf",
    "size": 1024,
    "is_process_documentation": False,
}


def auth(user: User) -> dict[str, str]:
    return {"X-User-Email": user.email}


def create_user(db, email: str, role="student", full_name="User", grade=None, is_active=True) -> User:
    u = User(email=email, full_name=full_name, role=role, grade=grade, is_active=is_active)
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def complete_values(**overrides) -> dict:
    """Form values that satisfy every content step."""
    values = {
        "title": "Solar Oven",
        "subject": "sci",
        "grade": "8",
        "artifact_type": "Project",
        "month": "March",
        "is_team_work": False,
        "is_original_work": True,
        "selected_skills": ["creativity", "research"],
        "skills_justification": "I researched reflective materials.",
        "pride_reason": "It actually cooked rice.",
        "creation_process": "Sketched, built, tested.",
        "learnings": "Insulation matters.",
        "challenges": "Cloudy days.",
        "improvements": "Better glass.",
        "files": [dict(FILE_REF)],
    }
    values.update(overrides)
    return values


def create_assignment(db, student: User, teacher: User | None = None, status="DRAFT", **fields) -> Assignment:
    """Insert a row directly, stamping timestamps the status requires."""
    now = datetime.now(timezone.utc)
    a = Assignment(
        student_id=student.id,
        teacher_id=teacher.id if teacher else None,
        status=status,
        **fields,
    )
    if status not in ("DRAFT", "NEEDS_REVISION"):
        a.submitted_at = fields.get("submitted_at", now)
    if status in ("APPROVED", "REJECTED", "NEEDS_REVISION"):
        a.verified_at = fields.get("verified_at", now)
    db.add(a)
    db.commit()
    db.refresh(a)
    return a
