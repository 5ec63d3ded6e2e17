import logging
from typing import Any

from sqlalchemy.orm import Session

from portfolio.models.assignment import Assignment
from portfolio.models.audit_event import AuditEvent
from portfolio.models.user import User

logger = logging.getLogger(__name__)


def log_event(
    *,
    db: Session,
    actor: User | None,
    action: str,
    entity_type: str,
    entity_id,
    metadata: dict[str, Any] | None = None,
):
    db.add(
        AuditEvent(
            actor_user_id=actor.id if actor else None,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            event_metadata=metadata,
        )
    )
    logger.debug("audit %s %s/%s", action, entity_type, entity_id)


def log_assignment_transition(
    *,
    db: Session,
    actor: User,
    action: str,
    assignment: Assignment,
    prev_status: str,
    extra: dict[str, Any] | None = None,
):
    log_event(
        db=db,
        actor=actor,
        action=action,
        entity_type="assignment",
        entity_id=assignment.id,
        metadata={
            "student_id": str(assignment.student_id),
            "from": prev_status,
            "to": assignment.status,
            "revision": assignment.current_revision,
            **(extra or {}),
        },
    )
