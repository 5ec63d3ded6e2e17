import uuid

import pytest
from fastapi import HTTPException

from portfolio.core.access import (
    assert_user_can_view,
    assert_user_is_owner,
    assert_user_is_reviewer,
    can_review,
    is_owner,
)
from portfolio.core.rbac import require_roles
from portfolio.core.security import RequestContext
from portfolio.models.assignment import Assignment
from portfolio.models.user import User


def _user(role: str) -> User:
    return User(id=uuid.uuid4(), email=f"{role}@local.test", full_name=role.title(), role=role, is_active=True)


def _assignment(student: User, teacher: User | None = None) -> Assignment:
    return Assignment(id=uuid.uuid4(), student_id=student.id, teacher_id=teacher.id if teacher else None)


def test_require_roles_allows_listed_roles():
    dep = require_roles("teacher", "admin")
    ctx = RequestContext(db=None, user=_user("admin"))
    assert dep(ctx) is ctx


def test_require_roles_forbids_others():
    dep = require_roles("admin")
    with pytest.raises(HTTPException) as exc:
        dep(RequestContext(db=None, user=_user("teacher")))
    assert exc.value.status_code == 403


def test_owner_and_reviewer_rules():
    student = _user("student")
    teacher = _user("teacher")
    other_teacher = _user("teacher")
    admin = _user("admin")

    assigned = _assignment(student, teacher)
    unassigned = _assignment(student)

    assert is_owner(student, assigned)
    assert not is_owner(teacher, assigned)

    assert can_review(teacher, assigned)
    assert not can_review(other_teacher, assigned)
    assert can_review(other_teacher, unassigned)
    assert can_review(admin, assigned)
    assert not can_review(student, unassigned)
    assert not can_review(_user("public"), unassigned)


def test_assertions_raise_http_errors():
    student = _user("student")
    stranger = _user("student")
    a = _assignment(student)

    assert_user_is_owner(student, a)
    assert_user_can_view(student, a)

    with pytest.raises(HTTPException) as exc:
        assert_user_is_owner(stranger, a)
    assert exc.value.status_code == 403

    with pytest.raises(HTTPException) as exc:
        assert_user_is_reviewer(stranger, a)
    assert exc.value.status_code == 403

    # invisible rather than forbidden
    with pytest.raises(HTTPException) as exc:
        assert_user_can_view(stranger, a)
    assert exc.value.status_code == 404


def test_drafts_are_visible_to_owner_and_admin_only():
    student = _user("student")
    teacher = _user("teacher")
    draft = _assignment(student, teacher)
    draft.status = "DRAFT"

    assert_user_can_view(student, draft)
    assert_user_can_view(_user("admin"), draft)
    with pytest.raises(HTTPException) as exc:
        assert_user_can_view(teacher, draft)
    assert exc.value.status_code == 404

    draft.status = "SUBMITTED"
    assert_user_can_view(teacher, draft)
