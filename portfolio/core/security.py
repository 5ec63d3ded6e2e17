from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Cookie, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from portfolio.core.config import settings
from portfolio.db.session import get_db
from portfolio.models.user import User


def issue_session_token(user: User, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    claims = {
        "sub": user.email,
        "iat": now,
        "exp": now + timedelta(minutes=settings.SESSION_TTL_MINUTES),
    }
    return jwt.encode(claims, settings.SSO_SHARED_SECRET, algorithm="HS256")


def _email_from_session(token: str | None) -> str | None:
    if not token or not settings.SSO_SHARED_SECRET:
        return None
    try:
        claims = jwt.decode(
            token,
            settings.SSO_SHARED_SECRET,
            algorithms=["HS256"],
            options={"require": ["exp", "sub"]},
        )
    except jwt.PyJWTError:
        return None
    return claims.get("sub")


def get_current_user(
    x_user_email: str | None = Header(default=None),
    session_token: str | None = Cookie(default=None, alias=settings.SESSION_COOKIE_NAME),
    db: Session = Depends(get_db),
) -> User:
    """
    DEV AUTH: pass X-User-Email header to simulate logged-in user.
    Example: X-User-Email: student@local.test
    Only honored when settings.dev_auth_enabled (APP_ENV=local by default).
    Browsers coming through SSO carry a signed session cookie instead.
    """
    dev_email = x_user_email if settings.dev_auth_enabled else None
    email = dev_email or _email_from_session(session_token)
    if not email:
        detail = "Missing X-User-Email header (dev auth)" if settings.dev_auth_enabled else "Not signed in"
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

    user = db.query(User).filter(User.email == email).one_or_none()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid or inactive user")
    return user


@dataclass
class RequestContext:
    """Per-request session: the DB session and the signed-in user."""
    db: Session
    user: User

    @property
    def role(self) -> str:
        return self.user.role


def get_request_context(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> RequestContext:
    return RequestContext(db=db, user=user)
