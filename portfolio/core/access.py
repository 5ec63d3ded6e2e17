from fastapi import HTTPException

from portfolio.models.assignment import Assignment
from portfolio.models.user import User
from portfolio.workflow.taxonomy import AssignmentStatus, parse_status


def is_owner(user: User, assignment: Assignment) -> bool:
    return assignment.student_id == user.id


def is_private_draft(assignment: Assignment) -> bool:
    return parse_status(assignment.status or AssignmentStatus.DRAFT) is AssignmentStatus.DRAFT


def can_review(user: User, assignment: Assignment) -> bool:
    if user.role == "admin":
        return True
    if user.role != "teacher":
        return False
    # unassigned work can be picked up by any teacher
    return assignment.teacher_id is None or assignment.teacher_id == user.id


def assert_user_is_owner(user: User, assignment: Assignment):
    if not is_owner(user, assignment):
        raise HTTPException(status_code=403, detail="Only the owning student can perform this action")


def assert_user_is_reviewer(user: User, assignment: Assignment):
    if not can_review(user, assignment):
        raise HTTPException(status_code=403, detail="Only the reviewing teacher can perform this action")


def assert_user_can_view(user: User, assignment: Assignment):
    if is_owner(user, assignment) or user.role == "admin":
        return
    # drafts stay private to the student, even from the assigned teacher
    if can_review(user, assignment) and not is_private_draft(assignment):
        return
    raise HTTPException(status_code=404, detail="Assignment not found")
