import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from portfolio.db.session import get_db
from portfolio.models.assignment import Assignment
from portfolio.models.user import User
from portfolio.schemas.portfolio import PortfolioItemOut, PortfolioOut
from portfolio.services.assignments import assignment_to_values
from portfolio.workflow.taxonomy import AssignmentStatus

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


@router.get("/{student_id}", response_model=PortfolioOut)
def get_portfolio(student_id: str, db: Session = Depends(get_db)):
    """Public portfolio: only work a teacher has approved is listed."""
    try:
        key = uuid.UUID(student_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="Student not found")

    student = db.get(User, key)
    if not student or student.role != "student" or not student.is_active:
        raise HTTPException(status_code=404, detail="Student not found")

    rows = (
        db.query(Assignment)
        .filter(
            Assignment.student_id == student.id,
            Assignment.status == AssignmentStatus.APPROVED.value,
        )
        .order_by(Assignment.verified_at.desc(), Assignment.id)
        .all()
    )
    return PortfolioOut(
        student_id=str(student.id),
        full_name=student.full_name,
        grade=student.grade,
        school_name=student.school_name,
        items=[PortfolioItemOut(**assignment_to_values(a)) for a in rows],
    )
