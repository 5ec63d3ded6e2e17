from pydantic import BaseModel

from portfolio.workflow.taxonomy import AssignmentStatus, StepId


class StepOut(BaseModel):
    id: StepId
    title: str
    header: str
    description: str


class StepStateOut(StepOut):
    visible: bool
    enabled: bool
    complete: bool


class WizardStateOut(BaseModel):
    assignment_id: str
    status: AssignmentStatus
    editable: bool
    suggested_step: StepId
    steps: list[StepStateOut]


class TaxonomyOut(BaseModel):
    steps: list[StepOut]
    statuses: dict[str, str]
    months: list[str]
    subjects: dict[str, str]
    skills: dict[str, str]
    max_selected_skills: int
    questions: dict[str, str]
