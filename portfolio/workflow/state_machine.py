from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence

from portfolio.workflow.migration import normalize_feedback
from portfolio.workflow.taxonomy import (
    CONTENT_STEPS,
    ENTRY_STEPS,
    STEPS,
    AssignmentStatus,
    StepConfig,
    StepId,
    parse_status,
)
from portfolio.workflow.validation import (
    FieldIssue,
    is_step_complete,
    is_step_navigation_complete,
    submission_issues,
)

logger = logging.getLogger(__name__)

S = AssignmentStatus

TRANSITIONS: dict[AssignmentStatus, frozenset[AssignmentStatus]] = {
    S.DRAFT: frozenset({S.SUBMITTED}),
    S.NEEDS_REVISION: frozenset({S.SUBMITTED}),
    S.SUBMITTED: frozenset({S.UNDER_REVIEW, S.APPROVED, S.NEEDS_REVISION, S.REJECTED}),
    S.UNDER_REVIEW: frozenset({S.APPROVED, S.NEEDS_REVISION, S.REJECTED}),
    S.APPROVED: frozenset(),
    S.REJECTED: frozenset(),
}

EDITABLE_STATUSES = frozenset({S.DRAFT, S.NEEDS_REVISION})
REVIEW_DECISIONS = frozenset({S.APPROVED, S.NEEDS_REVISION, S.REJECTED})
REVIEWABLE_STATUSES = frozenset({S.SUBMITTED, S.UNDER_REVIEW})

_LOCKED_STEPS = (StepId.ASSIGNMENT_PREVIEW, StepId.TEACHER_FEEDBACK)

# Fields copied into revision_history when a teacher asks for changes.
SNAPSHOT_FIELDS = (
    "title",
    "subject",
    "grade",
    "artifact_type",
    "month",
    "is_team_work",
    "team_contribution",
    "is_original_work",
    "originality_explanation",
    "selected_skills",
    "skills_justification",
    "pride_reason",
    "creation_process",
    "learnings",
    "challenges",
    "improvements",
    "acknowledgments",
    "files",
    "externalLinks",
)


class WorkflowError(Exception):
    pass


class InvalidTransitionError(WorkflowError):
    def __init__(self, from_status: AssignmentStatus, to_status: AssignmentStatus):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Cannot move assignment from {from_status.value} to {to_status.value}")


class CannotSubmitError(WorkflowError):
    def __init__(self, issues: Sequence[FieldIssue]):
        self.issues = list(issues)
        fields = ", ".join(sorted({i.field for i in self.issues}))
        super().__init__(f"Cannot submit: missing or invalid {fields}")


@dataclass(frozen=True)
class StepState:
    step: StepConfig
    visible: bool
    enabled: bool
    complete: bool


@dataclass
class Transition:
    from_status: AssignmentStatus
    to_status: AssignmentStatus
    changes: dict[str, Any] = field(default_factory=dict)


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


class SubmissionStateMachine:
    """
    Step visibility and status transitions for the submission wizard.

    Pure: it reads form values and returns the changes a transition implies.
    Persisting them (and any side effects) is the caller's job.
    """

    def __init__(self, steps: Sequence[StepConfig] = STEPS):
        self.steps = tuple(steps)

    # ---- steps -------------------------------------------------------

    def visible_steps(self, status: AssignmentStatus | str) -> list[StepConfig]:
        status = parse_status(status)
        if status in EDITABLE_STATUSES:
            ids = set(ENTRY_STEPS)
            if status is S.NEEDS_REVISION:
                ids.add(StepId.TEACHER_FEEDBACK)
        else:
            ids = set(_LOCKED_STEPS)
        return [s for s in self.steps if s.id in ids]

    def is_step_enabled(self, step: StepId | str, status: AssignmentStatus | str, values: dict[str, Any]) -> bool:
        step = StepId(step)
        status = parse_status(status)
        if step not in {s.id for s in self.visible_steps(status)}:
            return False
        if status not in EDITABLE_STATUSES:
            return True
        if step in (StepId.BASIC_INFO, StepId.TEACHER_FEEDBACK):
            return True
        for prior in ENTRY_STEPS[: ENTRY_STEPS.index(step)]:
            if not is_step_navigation_complete(prior, values):
                return False
        return True

    def is_step_done(self, step: StepId | str, status: AssignmentStatus | str, values: dict[str, Any]) -> bool:
        step = StepId(step)
        status = parse_status(status)
        if step is StepId.TEACHER_FEEDBACK:
            return status is not S.DRAFT and bool(normalize_feedback((values or {}).get("feedback")))
        if step is StepId.ASSIGNMENT_PREVIEW:
            return status is not S.DRAFT
        if status not in EDITABLE_STATUSES:
            return True
        return is_step_complete(step, values)

    def step_states(self, status: AssignmentStatus | str, values: dict[str, Any]) -> list[StepState]:
        visible = {s.id for s in self.visible_steps(status)}
        return [
            StepState(
                step=s,
                visible=s.id in visible,
                enabled=self.is_step_enabled(s.id, status, values),
                complete=self.is_step_done(s.id, status, values),
            )
            for s in self.steps
        ]

    def next_step(self, current: StepId | str, status: AssignmentStatus | str, values: dict[str, Any]) -> StepId | None:
        current = StepId(current)
        visible = [s.id for s in self.visible_steps(status)]
        if current not in visible or current == visible[-1]:
            return None
        if not is_step_navigation_complete(current, values):
            logger.debug("cannot advance past %s: step incomplete", current.value)
            return None
        return visible[visible.index(current) + 1]

    def previous_step(self, current: StepId | str, status: AssignmentStatus | str) -> StepId | None:
        current = StepId(current)
        visible = [s.id for s in self.visible_steps(status)]
        if current not in visible:
            return None
        idx = visible.index(current)
        return visible[idx - 1] if idx > 0 else None

    def first_incomplete_step(self, status: AssignmentStatus | str, values: dict[str, Any]) -> StepId:
        status = parse_status(status)
        if status not in EDITABLE_STATUSES:
            return StepId.TEACHER_FEEDBACK
        for step in CONTENT_STEPS:
            if not is_step_complete(step, values):
                return step
        return StepId.REVIEW_SUBMIT

    # ---- statuses ----------------------------------------------------

    def can_transition(self, from_status: AssignmentStatus | str, to_status: AssignmentStatus | str) -> bool:
        return parse_status(to_status) in TRANSITIONS[parse_status(from_status)]

    def _check(self, from_status: AssignmentStatus, to_status: AssignmentStatus) -> None:
        if not self.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    def submit(
        self,
        status: AssignmentStatus | str,
        values: dict[str, Any],
        now: datetime | None = None,
    ) -> Transition:
        status = parse_status(status)
        self._check(status, S.SUBMITTED)

        issues = submission_issues(values)
        if issues:
            raise CannotSubmitError(issues)

        logger.info("assignment %s: %s -> SUBMITTED", (values or {}).get("id"), status.value)
        return Transition(
            from_status=status,
            to_status=S.SUBMITTED,
            changes={"status": S.SUBMITTED, "submitted_at": _now(now)},
        )

    def start_review(self, status: AssignmentStatus | str) -> Transition:
        status = parse_status(status)
        self._check(status, S.UNDER_REVIEW)
        return Transition(from_status=status, to_status=S.UNDER_REVIEW, changes={"status": S.UNDER_REVIEW})

    def review(
        self,
        status: AssignmentStatus | str,
        decision: AssignmentStatus | str,
        values: dict[str, Any],
        feedback_item: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> Transition:
        status = parse_status(status)
        decision = parse_status(decision)
        if decision not in REVIEW_DECISIONS or status not in REVIEWABLE_STATUSES:
            raise InvalidTransitionError(status, decision)
        self._check(status, decision)

        values = values or {}
        now = _now(now)
        feedback = normalize_feedback(values.get("feedback"))
        if feedback_item:
            feedback.append(feedback_item)

        changes: dict[str, Any] = {
            "status": decision,
            "verified_at": now,
            "feedback": feedback,
        }

        if decision is S.NEEDS_REVISION:
            revision = int(values.get("current_revision") or 0)
            history = list(values.get("revision_history") or [])
            history.append(self.snapshot(values, status, now))
            changes["current_revision"] = revision + 1
            changes["revision_history"] = history

        logger.info("assignment %s: %s -> %s", values.get("id"), status.value, decision.value)
        return Transition(from_status=status, to_status=decision, changes=changes)

    @staticmethod
    def snapshot(values: dict[str, Any], status: AssignmentStatus, now: datetime) -> dict[str, Any]:
        submitted_at = values.get("submitted_at")
        if isinstance(submitted_at, datetime):
            submitted_at = submitted_at.isoformat()
        return {
            "revision": int(values.get("current_revision") or 0),
            "status": status.value,
            "submitted_at": submitted_at,
            "captured_at": now.isoformat(),
            "values": {k: copy.deepcopy(values.get(k)) for k in SNAPSHOT_FIELDS},
        }
