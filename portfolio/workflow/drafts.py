from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portfolio.db.types import utcnow
from portfolio.models.assignment_draft import AssignmentDraft
from portfolio.workflow.migration import migrate_assignment_data
from portfolio.workflow.taxonomy import StepId

logger = logging.getLogger(__name__)


@dataclass
class Draft:
    values: dict[str, Any]
    step: StepId


class DraftStore:
    """
    Best-effort store for in-progress wizard state, one row per (user, draft_key).

    Writes never raise: a failed save is logged and reported as False so the
    caller can keep the values it already holds. Concurrent writers to the
    same key simply overwrite each other.
    """

    def __init__(self, db: Session, user_id: uuid.UUID, draft_key: str):
        self.db = db
        self.user_id = user_id
        self.draft_key = draft_key

    def _row(self) -> AssignmentDraft | None:
        return (
            self.db.query(AssignmentDraft)
            .filter(
                AssignmentDraft.user_id == self.user_id,
                AssignmentDraft.draft_key == self.draft_key,
            )
            .one_or_none()
        )

    def save_draft(self, values: dict[str, Any], step: StepId | str) -> bool:
        try:
            payload = json.dumps(values, default=str)
            step = StepId(step)
        except (TypeError, ValueError):
            logger.warning("draft %s not saved: payload not serializable", self.draft_key, exc_info=True)
            return False

        try:
            with self.db.begin_nested():
                row = self._row()
                if row is None:
                    row = AssignmentDraft(user_id=self.user_id, draft_key=self.draft_key)
                    self.db.add(row)
                row.payload = payload
                row.step = step.value
                row.updated_at = utcnow()
                self.db.flush()
        except SQLAlchemyError:
            logger.exception("draft %s not saved", self.draft_key)
            return False
        return True

    def load_draft(self) -> Draft | None:
        try:
            row = self._row()
        except SQLAlchemyError:
            logger.exception("draft %s could not be read", self.draft_key)
            return None
        if row is None:
            return None

        try:
            values = json.loads(row.payload)
            step = StepId(row.step)
            if not isinstance(values, dict):
                raise ValueError("draft payload is not an object")
        except ValueError:
            logger.warning("discarding corrupt draft %s", self.draft_key)
            self.clear_draft()
            return None

        return Draft(values=migrate_assignment_data(values), step=step)

    def clear_draft(self) -> None:
        try:
            with self.db.begin_nested():
                row = self._row()
                if row is not None:
                    self.db.delete(row)
                    self.db.flush()
        except SQLAlchemyError:
            logger.exception("draft %s could not be cleared", self.draft_key)

    @classmethod
    def clear_all_for_user(cls, db: Session, user_id: uuid.UUID, assignment_id: str) -> int:
        """
        Drop every draft of this user that belongs to the given assignment.
        Used once a submission leaves the student's hands.
        """
        removed = 0
        try:
            with db.begin_nested():
                rows = db.query(AssignmentDraft).filter(AssignmentDraft.user_id == user_id).all()
                for row in rows:
                    try:
                        draft_id = json.loads(row.payload).get("id")
                    except (ValueError, AttributeError):
                        continue
                    if draft_id and str(draft_id) == assignment_id:
                        db.delete(row)
                        removed += 1
                db.flush()
        except SQLAlchemyError:
            logger.exception("drafts for assignment %s could not be cleared", assignment_id)
        return removed
