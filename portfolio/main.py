import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from portfolio.api.assignments import router as assignments_router
from portfolio.api.audit import router as audit_router
from portfolio.api.drafts import router as drafts_router
from portfolio.api.health import router as health_router
from portfolio.api.me import router as me_router
from portfolio.api.portfolio import router as portfolio_router
from portfolio.api.root import router as root_router
from portfolio.api.sso import router as sso_router
from portfolio.api.steps import router as steps_router
from portfolio.core.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Student Portfolio")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
def database_error_handler(request: Request, exc: SQLAlchemyError):
    # nothing was saved; the client keeps its values and may retry
    logger.exception("database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=503,
        content={"detail": "Could not save changes, please try again", "retryable": True},
    )


app.include_router(root_router)
app.include_router(health_router)
app.include_router(me_router)
app.include_router(steps_router)
app.include_router(assignments_router)
app.include_router(drafts_router)
app.include_router(portfolio_router)
app.include_router(sso_router)
app.include_router(audit_router)
