from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from portfolio.workflow.taxonomy import StepId


class DraftIn(BaseModel):
    values: dict[str, Any] = Field(default_factory=dict)
    step: StepId = StepId.BASIC_INFO


class DraftOut(BaseModel):
    draft_key: str
    values: dict[str, Any]
    step: StepId


class DraftSaveResult(BaseModel):
    draft_key: str
    saved: bool
    saved_at: datetime
