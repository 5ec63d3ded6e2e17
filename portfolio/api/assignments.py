import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from portfolio.core.access import (
    assert_user_can_view,
    assert_user_is_owner,
    assert_user_is_reviewer,
)
from portfolio.core.audit import log_assignment_transition, log_event
from portfolio.core.config import settings
from portfolio.core.security import RequestContext, get_request_context
from portfolio.models.assignment import Assignment
from portfolio.models.user import User
from portfolio.schemas.assignment import AssignmentCreate, AssignmentOut, AssignmentUpdate, ReviewPayload
from portfolio.schemas.pagination import PaginatedResponse, PaginationMeta
from portfolio.schemas.steps import StepStateOut, WizardStateOut
from portfolio.schemas.validation import (
    SanityReport,
    StepCompleteness,
    ValidationError,
    ValidationPreviewResponse,
)
from portfolio.services.assignments import NULLABLE_FIELDS, AssignmentRepository, assignment_to_values
from portfolio.services.notifications import (
    Notification,
    NotificationDispatcher,
    get_notification_dispatcher,
)
from portfolio.services.storage import ALLOWED_CONTENT_TYPES, BlobStore, get_blob_store
from portfolio.workflow.drafts import DraftStore
from portfolio.workflow.migration import create_feedback_item
from portfolio.workflow.sanity import get_sanity_issues
from portfolio.workflow.state_machine import (
    EDITABLE_STATUSES,
    CannotSubmitError,
    InvalidTransitionError,
    SubmissionStateMachine,
)
from portfolio.workflow.taxonomy import STEPS, AssignmentStatus, parse_status
from portfolio.workflow.validation import (
    find_step_for_fields,
    is_step_complete,
    is_step_navigation_complete,
    submission_issues,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assignments", tags=["assignments"])

_REVIEW_ACTIONS = {
    AssignmentStatus.APPROVED: "ASSIGNMENT_APPROVED",
    AssignmentStatus.NEEDS_REVISION: "ASSIGNMENT_REVISION_REQUESTED",
    AssignmentStatus.REJECTED: "ASSIGNMENT_REJECTED",
}


def get_state_machine() -> SubmissionStateMachine:
    return SubmissionStateMachine()


def assignment_to_out(a: Assignment) -> AssignmentOut:
    return AssignmentOut(**assignment_to_values(a))


def _get_assignment_or_404(db: Session, assignment_id: str) -> Assignment:
    a = AssignmentRepository(db).get_assignment(assignment_id)
    if not a:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return a


def _is_uuid(raw: str) -> bool:
    try:
        uuid.UUID(str(raw))
    except ValueError:
        return False
    return True


def _assert_editable(a: Assignment):
    status = parse_status(a.status)
    if status not in EDITABLE_STATUSES:
        raise HTTPException(
            status_code=409,
            detail=f"Assignment is {status.value} and can no longer be edited",
        )


def _transition_conflict(e: InvalidTransitionError) -> HTTPException:
    return HTTPException(status_code=409, detail=str(e))


def _notify(
    background: BackgroundTasks,
    dispatcher: NotificationDispatcher,
    notification: Notification,
):
    # delivered after the response; failures are logged by the dispatcher
    background.add_task(dispatcher.dispatch, notification)


@router.post("", response_model=AssignmentOut, status_code=201)
def create_assignment(
    payload: AssignmentCreate | None = None,
    draft_key: str | None = Query(default=None, description="Draft to discard when starting over"),
    ctx: RequestContext = Depends(get_request_context),
):
    if ctx.user.role != "student":
        raise HTTPException(status_code=403, detail="Only students can start a submission")

    payload = payload or AssignmentCreate()
    data = payload.model_dump(mode="json", exclude_unset=True)

    teacher_id = data.pop("teacher_id", None)
    if teacher_id:
        teacher = ctx.db.get(User, uuid.UUID(teacher_id)) if _is_uuid(teacher_id) else None
        if not teacher or teacher.role != "teacher":
            raise HTTPException(status_code=400, detail="teacher_id is not a teacher")
        data["teacher_id"] = teacher.id

    if not data.get("grade") and ctx.user.grade:
        data["grade"] = ctx.user.grade

    a = AssignmentRepository(ctx.db).create_assignment({**data, "student_id": ctx.user.id})

    if draft_key:
        DraftStore(ctx.db, ctx.user.id, draft_key).clear_draft()

    log_event(
        db=ctx.db,
        actor=ctx.user,
        action="ASSIGNMENT_CREATED",
        entity_type="assignment",
        entity_id=a.id,
        metadata={"student_id": str(a.student_id), "status": a.status},
    )
    return assignment_to_out(a)


@router.get("")
def list_assignments(
    status: str | None = Query(default=None, description="Filter by status"),
    subject: str | None = Query(default=None),
    month: str | None = Query(default=None),
    student_id: str | None = Query(default=None, description="Admins and teachers only"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    include_pagination: bool = Query(default=False, description="Include pagination metadata"),
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Students see their own work. Teachers see submitted work assigned to them
    or not yet picked up by anyone. Admins see everything.
    """
    statuses = None
    if status:
        try:
            statuses = [parse_status(status).value]
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown status: {status}")

    student_filter = None
    if student_id:
        if not _is_uuid(student_id):
            raise HTTPException(status_code=400, detail="student_id must be a UUID")
        student_filter = uuid.UUID(student_id)

    repo = AssignmentRepository(ctx.db)
    role = ctx.user.role
    if role == "student":
        rows, total = repo.list_assignments(
            student_id=ctx.user.id, statuses=statuses, subject=subject, month=month, limit=limit, offset=offset
        )
    elif role == "teacher":
        # drafts stay private to the student
        visible = [s.value for s in AssignmentStatus if s is not AssignmentStatus.DRAFT]
        allowed = [s for s in (statuses or visible) if s in visible]
        if not allowed:
            return _page([], 0, limit, offset, include_pagination)
        rows, total = repo.list_assignments(
            student_id=student_filter,
            teacher_id=ctx.user.id,
            include_unassigned=True,
            statuses=allowed,
            subject=subject,
            month=month,
            limit=limit,
            offset=offset,
        )
    elif role == "admin":
        rows, total = repo.list_assignments(
            student_id=student_filter, statuses=statuses, subject=subject, month=month, limit=limit, offset=offset
        )
    else:
        raise HTTPException(status_code=403, detail="Forbidden")

    return _page([assignment_to_out(a) for a in rows], total, limit, offset, include_pagination)


def _page(items: list[AssignmentOut], total: int, limit: int, offset: int, include_pagination: bool):
    if include_pagination:
        return PaginatedResponse[AssignmentOut](
            items=items,
            pagination=PaginationMeta.for_page(total=total, limit=limit, offset=offset, returned=len(items)),
        )
    return items


@router.get("/{assignment_id}", response_model=AssignmentOut)
def get_assignment(assignment_id: str, ctx: RequestContext = Depends(get_request_context)):
    a = _get_assignment_or_404(ctx.db, assignment_id)
    assert_user_can_view(ctx.user, a)
    return assignment_to_out(a)


@router.patch("/{assignment_id}", response_model=AssignmentOut)
def update_assignment(
    assignment_id: str,
    payload: AssignmentUpdate,
    ctx: RequestContext = Depends(get_request_context),
):
    a = _get_assignment_or_404(ctx.db, assignment_id)
    assert_user_is_owner(ctx.user, a)
    _assert_editable(a)

    patch = {
        k: v
        for k, v in payload.model_dump(mode="json", exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    if not patch:
        return assignment_to_out(a)

    AssignmentRepository(ctx.db).apply(a, patch)
    log_event(
        db=ctx.db,
        actor=ctx.user,
        action="ASSIGNMENT_UPDATED",
        entity_type="assignment",
        entity_id=a.id,
        metadata={"fields": sorted(patch.keys()), "status": a.status},
    )
    return assignment_to_out(a)


@router.get("/{assignment_id}/steps", response_model=WizardStateOut)
def get_wizard_state(
    assignment_id: str,
    ctx: RequestContext = Depends(get_request_context),
    machine: SubmissionStateMachine = Depends(get_state_machine),
):
    a = _get_assignment_or_404(ctx.db, assignment_id)
    assert_user_can_view(ctx.user, a)

    values = assignment_to_values(a)
    status = parse_status(a.status)
    return WizardStateOut(
        assignment_id=str(a.id),
        status=status,
        editable=status in EDITABLE_STATUSES,
        suggested_step=machine.first_incomplete_step(status, values),
        steps=[
            StepStateOut(
                id=s.step.id,
                title=s.step.title,
                header=s.step.header,
                description=s.step.description,
                visible=s.visible,
                enabled=s.enabled,
                complete=s.complete,
            )
            for s in machine.step_states(status, values)
        ],
    )


@router.post("/{assignment_id}/validate", response_model=ValidationPreviewResponse)
def validate_assignment(assignment_id: str, ctx: RequestContext = Depends(get_request_context)):
    """
    Preview what still blocks submission, plus advisory sanity warnings.
    Nothing is persisted.
    """
    a = _get_assignment_or_404(ctx.db, assignment_id)
    assert_user_can_view(ctx.user, a)

    values = assignment_to_values(a)
    errors = [ValidationError(**i.as_dict()) for i in submission_issues(values)]
    return ValidationPreviewResponse(
        valid=not errors,
        errors=errors,
        steps=[
            StepCompleteness(
                step=s.id,
                navigation_complete=is_step_navigation_complete(s.id, values),
                complete=is_step_complete(s.id, values),
            )
            for s in STEPS
        ],
        warnings=get_sanity_issues(values),
    )


@router.get("/{assignment_id}/sanity", response_model=SanityReport)
def sanity_check(assignment_id: str, ctx: RequestContext = Depends(get_request_context)):
    a = _get_assignment_or_404(ctx.db, assignment_id)
    assert_user_can_view(ctx.user, a)
    return SanityReport(assignment_id=str(a.id), issues=get_sanity_issues(assignment_to_values(a)))


@router.post("/{assignment_id}/submit", response_model=AssignmentOut)
def submit_assignment(
    assignment_id: str,
    background: BackgroundTasks,
    draft_key: str | None = Query(default=None, description="Local draft to clear on success"),
    ctx: RequestContext = Depends(get_request_context),
    machine: SubmissionStateMachine = Depends(get_state_machine),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    a = _get_assignment_or_404(ctx.db, assignment_id)
    assert_user_is_owner(ctx.user, a)

    prev = a.status
    try:
        transition = machine.submit(prev, assignment_to_values(a))
    except InvalidTransitionError as e:
        raise _transition_conflict(e)
    except CannotSubmitError as e:
        # point the wizard at the first step that needs attention
        step = find_step_for_fields(i.field for i in e.issues)
        raise HTTPException(
            status_code=400,
            detail={
                "message": "Cannot submit",
                "step": step.value if step else None,
                "errors": [i.as_dict() for i in e.issues],
            },
        )

    AssignmentRepository(ctx.db).apply(a, transition.changes)

    if draft_key:
        DraftStore(ctx.db, ctx.user.id, draft_key).clear_draft()
    DraftStore.clear_all_for_user(ctx.db, ctx.user.id, str(a.id))

    log_assignment_transition(
        db=ctx.db,
        actor=ctx.user,
        action="ASSIGNMENT_SUBMITTED",
        assignment=a,
        prev_status=prev,
    )

    if a.teacher_id:
        _notify(background, dispatcher, Notification("submission", str(a.id), str(a.teacher_id)))
    else:
        logger.info("assignment %s submitted with no reviewing teacher", a.id)

    return assignment_to_out(a)


@router.post("/{assignment_id}/start-review", response_model=AssignmentOut)
def start_review(
    assignment_id: str,
    ctx: RequestContext = Depends(get_request_context),
    machine: SubmissionStateMachine = Depends(get_state_machine),
):
    a = _get_assignment_or_404(ctx.db, assignment_id)
    assert_user_is_reviewer(ctx.user, a)
    assert_user_can_view(ctx.user, a)

    prev = a.status
    try:
        transition = machine.start_review(prev)
    except InvalidTransitionError as e:
        raise _transition_conflict(e)

    patch = dict(transition.changes)
    if a.teacher_id is None and ctx.user.role == "teacher":
        patch["teacher_id"] = ctx.user.id
    AssignmentRepository(ctx.db).apply(a, patch)

    log_assignment_transition(
        db=ctx.db,
        actor=ctx.user,
        action="ASSIGNMENT_REVIEW_STARTED",
        assignment=a,
        prev_status=prev,
    )
    return assignment_to_out(a)


@router.post("/{assignment_id}/review", response_model=AssignmentOut)
def review_assignment(
    assignment_id: str,
    payload: ReviewPayload,
    background: BackgroundTasks,
    ctx: RequestContext = Depends(get_request_context),
    machine: SubmissionStateMachine = Depends(get_state_machine),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    a = _get_assignment_or_404(ctx.db, assignment_id)
    assert_user_is_reviewer(ctx.user, a)
    assert_user_can_view(ctx.user, a)

    values = assignment_to_values(a)
    teacher_id = str(ctx.user.id)
    feedback_item = create_feedback_item(
        teacher_id=teacher_id,
        text=payload.text,
        selected_skills=payload.selected_skills,
        skills_justification=payload.skills_justification,
        question_comments=_question_comments(payload, teacher_id),
    )

    prev = a.status
    try:
        transition = machine.review(prev, payload.decision, values, feedback_item)
    except InvalidTransitionError as e:
        raise _transition_conflict(e)

    patch = dict(transition.changes)
    if a.teacher_id is None and ctx.user.role == "teacher":
        patch["teacher_id"] = ctx.user.id
    AssignmentRepository(ctx.db).apply(a, patch)

    log_assignment_transition(
        db=ctx.db,
        actor=ctx.user,
        action=_REVIEW_ACTIONS[transition.to_status],
        assignment=a,
        prev_status=prev,
        extra={"question_comments": sorted(payload.question_comments.keys())},
    )
    _notify(background, dispatcher, Notification("verification", str(a.id), str(a.student_id)))
    return assignment_to_out(a)


def _question_comments(payload: ReviewPayload, teacher_id: str) -> dict[str, dict]:
    stamp = datetime.now(timezone.utc).isoformat()
    return {
        qid: {
            "id": str(uuid.uuid4()),
            "comment": comment,
            "timestamp": stamp,
            "teacher_id": teacher_id,
            "question_id": qid,
        }
        for qid, comment in payload.question_comments.items()
        if comment.strip()
    }


@router.post("/{assignment_id}/files", response_model=AssignmentOut, status_code=201)
def upload_file(
    assignment_id: str,
    file: UploadFile = File(...),
    is_process_documentation: bool = Form(default=False),
    ctx: RequestContext = Depends(get_request_context),
    store: BlobStore = Depends(get_blob_store),
):
    a = _get_assignment_or_404(ctx.db, assignment_id)
    assert_user_is_owner(ctx.user, a)
    _assert_editable(a)

    content_type = file.content_type or "application/octet-stream"
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(status_code=415, detail=f"Unsupported file type: {content_type}")

    data = file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File is too large")
    if not data:
        raise HTTPException(status_code=400, detail="File is empty")

    url = store.upload_file(data, content_type)
    stamp = datetime.now(timezone.utc).isoformat()
    ref = {
        "url": url,
        "name": file.filename or "",
        "type": content_type,
        "size": len(data),
        "created_at": stamp,
        "updated_at": stamp,
        "is_process_documentation": is_process_documentation,
    }
    AssignmentRepository(ctx.db).apply(a, {"files": [*(a.files or []), ref]})

    log_event(
        db=ctx.db,
        actor=ctx.user,
        action="FILE_UPLOADED",
        entity_type="assignment",
        entity_id=a.id,
        metadata={"url": url, "name": ref["name"], "size": ref["size"]},
    )
    return assignment_to_out(a)


@router.delete("/{assignment_id}/files", response_model=AssignmentOut)
def delete_file(
    assignment_id: str,
    url: str = Query(..., description="URL of the stored file"),
    ctx: RequestContext = Depends(get_request_context),
    store: BlobStore = Depends(get_blob_store),
):
    a = _get_assignment_or_404(ctx.db, assignment_id)
    assert_user_is_owner(ctx.user, a)
    _assert_editable(a)

    files = list(a.files or [])
    remaining = [f for f in files if not (isinstance(f, dict) and f.get("url") == url)]
    if len(remaining) == len(files):
        raise HTTPException(status_code=404, detail="File not found on this assignment")

    AssignmentRepository(ctx.db).apply(a, {"files": remaining})
    if not store.delete_file(url):
        logger.warning("stored blob for %s was not removed", url)

    log_event(
        db=ctx.db,
        actor=ctx.user,
        action="FILE_DELETED",
        entity_type="assignment",
        entity_id=a.id,
        metadata={"url": url},
    )
    return assignment_to_out(a)
