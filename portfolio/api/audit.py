import uuid

from fastapi import APIRouter, Depends, HTTPException, Query

from portfolio.core.rbac import require_roles
from portfolio.core.security import RequestContext
from portfolio.models.audit_event import AuditEvent

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("")
def list_audit_events(
    entity_type: str | None = Query(default=None),
    entity_id: str | None = Query(default=None),
    action: str | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    ctx: RequestContext = Depends(require_roles("admin")),
):
    q = ctx.db.query(AuditEvent)

    if entity_type:
        q = q.filter(AuditEvent.entity_type == entity_type)
    if entity_id:
        try:
            q = q.filter(AuditEvent.entity_id == uuid.UUID(entity_id))
        except ValueError:
            raise HTTPException(status_code=400, detail="entity_id must be a UUID")
    if action:
        q = q.filter(AuditEvent.action == action)

    rows = q.order_by(AuditEvent.created_at.desc()).limit(limit).all()

    return [
        {
            "id": str(r.id),
            "actor_user_id": str(r.actor_user_id) if r.actor_user_id else None,
            "action": r.action,
            "entity_type": r.entity_type,
            "entity_id": str(r.entity_id),
            "metadata": r.event_metadata,
            "created_at": r.created_at,
        }
        for r in rows
    ]
