from __future__ import annotations

import logging
from dataclasses import dataclass

import jwt
from sqlalchemy.orm import Session

from portfolio.models.user import User

logger = logging.getLogger(__name__)

# roles issued by the school workspace -> local roles
_ROLE_MAP = {
    "STUDENT": "student",
    "TEACHER": "teacher",
    "ADMIN": "admin",
    "PARENT": "public",
}

ROLE_ENTRY_POINTS = {
    "student": "/student/dashboard",
    "teacher": "/teacher/dashboard",
    "admin": "/admin",
    "public": "/",
}


class SSOError(Exception):
    pass


@dataclass(frozen=True)
class SSOClaims:
    email: str
    full_name: str
    role: str
    grade: str | None = None
    school_name: str | None = None


def decode_sso_token(token: str | None, secret: str | None) -> SSOClaims:
    if not token:
        raise SSOError("No SSO token provided")
    if not secret:
        raise SSOError("SSO shared secret not configured")

    try:
        data = jwt.decode(token, secret, algorithms=["HS256"])
    except jwt.PyJWTError as e:
        raise SSOError(f"Invalid SSO token: {e}") from e

    email = data.get("email")
    if not email:
        raise SSOError("SSO token has no email")
    role = _ROLE_MAP.get(str(data.get("role", "")).upper())
    if role is None:
        raise SSOError(f"Unsupported SSO role: {data.get('role')!r}")

    return SSOClaims(
        email=email,
        full_name=data.get("full_name") or email,
        role=role,
        grade=data.get("grade"),
        school_name=data.get("school_name"),
    )


def upsert_sso_user(db: Session, claims: SSOClaims) -> User:
    user = db.query(User).filter(User.email == claims.email).one_or_none()
    if user is None:
        user = User(email=claims.email, full_name=claims.full_name, role=claims.role, is_active=True)
        db.add(user)
        logger.info("created user %s from SSO", claims.email)
    else:
        user.full_name = claims.full_name
        user.role = claims.role
    if claims.grade:
        user.grade = claims.grade
    if claims.school_name:
        user.school_name = claims.school_name
    db.flush()
    return user


def entry_point_for(role: str) -> str:
    return ROLE_ENTRY_POINTS.get(role, "/")
