from fastapi import APIRouter

from portfolio.schemas.steps import StepOut, TaxonomyOut
from portfolio.workflow.taxonomy import (
    MAX_SELECTED_SKILLS,
    MONTHS,
    QUESTION_LABELS,
    SKILLS,
    STATUS_DISPLAY_NAMES,
    STEPS,
    SUBJECTS,
)

router = APIRouter(tags=["taxonomy"])


def _step_out(s) -> StepOut:
    return StepOut(id=s.id, title=s.title, header=s.header, description=s.description)


@router.get("/steps", response_model=list[StepOut])
def list_steps():
    return [_step_out(s) for s in STEPS]


@router.get("/taxonomy", response_model=TaxonomyOut)
def get_taxonomy():
    """Everything the submission form needs to render its pickers."""
    return TaxonomyOut(
        steps=[_step_out(s) for s in STEPS],
        statuses={s.value: name for s, name in STATUS_DISPLAY_NAMES.items()},
        months=list(MONTHS),
        subjects=dict(SUBJECTS),
        skills=dict(SKILLS),
        max_selected_skills=MAX_SELECTED_SKILLS,
        questions=dict(QUESTION_LABELS),
    )
