import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from portfolio.core.config import settings
from portfolio.core.security import issue_session_token
from portfolio.db.session import get_db
from portfolio.services.sso import SSOError, decode_sso_token, entry_point_for, upsert_sso_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sso", tags=["sso"])


def _error_redirect(reason: str) -> RedirectResponse:
    resp = RedirectResponse(f"{settings.SSO_ERROR_URL}?{urlencode({'reason': reason})}", status_code=303)
    resp.delete_cookie(settings.SESSION_COOKIE_NAME)
    return resp


@router.get("/login")
def sso_login(token: str | None = Query(default=None), db: Session = Depends(get_db)):
    """
    Entry from the school workspace. A valid signed token signs the user in
    (creating them on first visit) and lands them on their role's dashboard.
    """
    try:
        claims = decode_sso_token(token, settings.SSO_SHARED_SECRET)
    except SSOError as e:
        logger.warning("SSO login rejected: %s", e)
        return _error_redirect(str(e))

    user = upsert_sso_user(db, claims)
    if not user.is_active:
        return _error_redirect("Account is inactive")

    resp = RedirectResponse(entry_point_for(user.role), status_code=303)
    resp.set_cookie(
        settings.SESSION_COOKIE_NAME,
        issue_session_token(user),
        httponly=True,
        samesite="lax",
        secure=settings.APP_ENV != "local",
        max_age=settings.SESSION_TTL_MINUTES * 60,
    )
    logger.info("SSO login for %s as %s", user.email, user.role)
    return resp


@router.get("/error")
def sso_error(reason: str = Query(default="Sign-in failed")):
    return {"status": "error", "message": reason}
