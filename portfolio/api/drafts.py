from fastapi import APIRouter, Depends, HTTPException

from portfolio.core.security import RequestContext, get_request_context
from portfolio.db.types import utcnow
from portfolio.schemas.drafts import DraftIn, DraftOut, DraftSaveResult
from portfolio.workflow.drafts import DraftStore

router = APIRouter(prefix="/drafts", tags=["drafts"])


@router.put("/{draft_key}", response_model=DraftSaveResult)
def save_draft(draft_key: str, payload: DraftIn, ctx: RequestContext = Depends(get_request_context)):
    """
    Autosave. Always answers 200; `saved=false` means the write failed and the
    client should keep its own copy and retry later.
    """
    saved = DraftStore(ctx.db, ctx.user.id, draft_key).save_draft(payload.values, payload.step)
    return DraftSaveResult(draft_key=draft_key, saved=saved, saved_at=utcnow())


@router.get("/{draft_key}", response_model=DraftOut)
def load_draft(draft_key: str, ctx: RequestContext = Depends(get_request_context)):
    draft = DraftStore(ctx.db, ctx.user.id, draft_key).load_draft()
    if draft is None:
        raise HTTPException(status_code=404, detail="Draft not found")
    return DraftOut(draft_key=draft_key, values=draft.values, step=draft.step)


@router.delete("/{draft_key}", status_code=204)
def clear_draft(draft_key: str, ctx: RequestContext = Depends(get_request_context)):
    DraftStore(ctx.db, ctx.user.id, draft_key).clear_draft()
