from pydantic import BaseModel

from portfolio.workflow.taxonomy import StepId


class ValidationError(BaseModel):
    """Individual validation error"""
    field: str
    step: StepId
    code: str  # required, artifact_required, too_many, unknown_skill
    message: str


class StepCompleteness(BaseModel):
    step: StepId
    navigation_complete: bool
    complete: bool


class ValidationPreviewResponse(BaseModel):
    """Response from validation preview endpoint"""
    valid: bool
    errors: list[ValidationError]
    steps: list[StepCompleteness]
    warnings: list[str]  # Non-blocking sanity issues


class SanityReport(BaseModel):
    assignment_id: str
    issues: list[str]
