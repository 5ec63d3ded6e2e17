"""
Seed a local database with demo users and one assignment per status.

    python scripts/seed_demo.py

Reads DATABASE_URL from the environment or .env. Safe to run twice.
"""
import sys
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.orm import Session

sys.path.append(str(Path(__file__).resolve().parents[1]))
load_dotenv()

from portfolio.db.session import SessionLocal  # noqa: E402
from portfolio.models.assignment import Assignment  # noqa: E402
from portfolio.models.user import User  # noqa: E402
from portfolio.workflow.migration import create_feedback_item  # noqa: E402
from portfolio.workflow.taxonomy import AssignmentStatus  # noqa: E402

DEMO_VALUES = {
    "subject": "sci",
    "grade": "8",
    "artifact_type": "Project",
    "month": "March",
    "is_team_work": False,
    "is_original_work": True,
    "selected_skills": ["creativity", "research", "problem-solving"],
    "skills_justification": "I compared three reflector designs before building.",
    "pride_reason": "It boiled water on a winter afternoon.",
    "creation_process": "Sketches, a cardboard prototype, then the final build.",
    "learnings": "Insulation mattered more than the reflector angle.",
    "challenges": "Cloudy weeks delayed testing.",
    "improvements": "A double-glazed lid.",
    "external_links": [{"url": "https://www.youtube.com/watch?v=demo", "title": "Demo run", "type": "youtube"}],
}


def get_or_create_user(db: Session, email: str, full_name: str, role: str, grade: str | None = None) -> User:
    u = db.query(User).filter(User.email == email).one_or_none()
    if u:
        return u
    u = User(email=email, full_name=full_name, role=role, grade=grade, is_active=True)
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def get_or_create_assignment(db: Session, student: User, teacher: User, status: AssignmentStatus) -> Assignment:
    title = f"Solar Oven ({status.value.replace('_', ' ').title()})"
    a = (
        db.query(Assignment)
        .filter(Assignment.student_id == student.id, Assignment.title == title)
        .one_or_none()
    )
    if a:
        return a

    now = datetime.now(timezone.utc)
    a = Assignment(
        student_id=student.id,
        teacher_id=teacher.id,
        title=title,
        status=status.value,
        files=[],
        youtubelinks=[],
        links_migrated_at=now,
        revision_history=[],
        current_revision=0,
        **DEMO_VALUES,
    )
    if status is not AssignmentStatus.DRAFT:
        a.submitted_at = now
    if status in (AssignmentStatus.APPROVED, AssignmentStatus.REJECTED, AssignmentStatus.NEEDS_REVISION):
        a.verified_at = now
        a.feedback = [create_feedback_item(teacher_id=str(teacher.id), text="Thanks, reviewed.", now=now)]
    if status is AssignmentStatus.NEEDS_REVISION:
        a.current_revision = 1
        a.revision_history = [{"revision": 0, "status": "SUBMITTED", "captured_at": now.isoformat(), "values": {}}]

    db.add(a)
    db.commit()
    db.refresh(a)
    return a


def main():
    db = SessionLocal()
    try:
        student = get_or_create_user(db, "student@local.test", "Student Local", "student", grade="8")
        teacher = get_or_create_user(db, "teacher@local.test", "Teacher Local", "teacher")
        get_or_create_user(db, "admin@local.test", "Admin Local", "admin")

        for status in AssignmentStatus:
            a = get_or_create_assignment(db, student, teacher, status)
            print(f"{status.value:<15} {a.id}")

        print("\nTry:")
        print('  curl -H "X-User-Email: student@local.test" http://localhost:8000/assignments')
    finally:
        db.close()


if __name__ == "__main__":
    main()
