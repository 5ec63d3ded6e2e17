from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Literal

from portfolio.workflow.markup import is_blank
from portfolio.workflow.taxonomy import (
    CONTENT_STEPS,
    MAX_SELECTED_SKILLS,
    SKILLS,
    StepId,
    get_question_label,
)


@dataclass(frozen=True)
class FieldEquals:
    """Condition: true when values[field] == value."""
    field: str
    value: Any


Condition = FieldEquals


def evaluate_condition(condition: Condition | None, values: dict[str, Any]) -> bool:
    if condition is None:
        return True
    if isinstance(condition, FieldEquals):
        return values.get(condition.field) == condition.value
    raise TypeError(f"Unsupported condition: {condition!r}")


@dataclass(frozen=True)
class FieldRequirement:
    field: str
    kind: Literal["text", "list", "bool"] = "text"
    required_when: Condition | None = None


@dataclass(frozen=True)
class FieldIssue:
    field: str
    step: StepId
    code: str  # required, artifact_required, too_many, unknown_skill
    message: str

    def as_dict(self) -> dict[str, str]:
        return {
            "field": self.field,
            "step": self.step.value,
            "code": self.code,
            "message": self.message,
        }


STEP_REQUIREMENTS: dict[StepId, tuple[FieldRequirement, ...]] = {
    StepId.BASIC_INFO: (
        FieldRequirement("title"),
        FieldRequirement("artifact_type"),
        FieldRequirement("subject"),
        FieldRequirement("month"),
    ),
    StepId.ROLE_ORIGINALITY: (
        FieldRequirement("is_team_work", kind="bool"),
        FieldRequirement("team_contribution", required_when=FieldEquals("is_team_work", True)),
        FieldRequirement("is_original_work", kind="bool"),
        FieldRequirement(
            "originality_explanation",
            required_when=FieldEquals("is_original_work", False),
        ),
    ),
    StepId.SKILLS_REFLECTION: (
        FieldRequirement("selected_skills", kind="list"),
        FieldRequirement("skills_justification"),
        FieldRequirement("pride_reason"),
    ),
    StepId.PROCESS_CHALLENGES: (
        FieldRequirement("creation_process"),
        FieldRequirement("learnings"),
        FieldRequirement("challenges"),
        FieldRequirement("improvements"),
    ),
}

_ALWAYS_COMPLETE = (StepId.ASSIGNMENT_PREVIEW, StepId.TEACHER_FEEDBACK)


def _as_values(values: Any) -> dict[str, Any]:
    return values if isinstance(values, dict) else {}


def _is_filled(req: FieldRequirement, value: Any) -> bool:
    if req.kind == "bool":
        return isinstance(value, bool)
    if req.kind == "list":
        return isinstance(value, (list, tuple, set)) and len(value) > 0
    if value is None or isinstance(value, (bool, list, dict)):
        return False
    return not is_blank(value)


def _link_has_url(link: Any) -> bool:
    return isinstance(link, dict) and bool(str(link.get("url") or "").strip())


def has_artifact(values: Any) -> bool:
    """At least one file, external link or legacy YouTube link."""
    values = _as_values(values)
    files = values.get("files")
    if isinstance(files, list) and any(files):
        return True
    for key in ("externalLinks", "youtubelinks"):
        links = values.get(key)
        if isinstance(links, list) and any(_link_has_url(link) for link in links):
            return True
    return False


def _required_issues(step: StepId, values: dict[str, Any]) -> list[FieldIssue]:
    issues: list[FieldIssue] = []
    for req in STEP_REQUIREMENTS.get(step, ()):
        if not evaluate_condition(req.required_when, values):
            continue
        if not _is_filled(req, values.get(req.field)):
            label = get_question_label(req.field)
            issues.append(FieldIssue(req.field, step, "required", f"{label} is required"))
    return issues


def _skill_issues(values: dict[str, Any]) -> list[FieldIssue]:
    skills = values.get("selected_skills")
    if not isinstance(skills, (list, tuple, set)):
        return []
    issues: list[FieldIssue] = []
    if len(skills) > MAX_SELECTED_SKILLS:
        issues.append(
            FieldIssue(
                "selected_skills",
                StepId.SKILLS_REFLECTION,
                "too_many",
                f"Too many selected skills (limit {MAX_SELECTED_SKILLS})",
            )
        )
    unknown = sorted({str(s) for s in skills if s not in SKILLS})
    if unknown:
        issues.append(
            FieldIssue(
                "selected_skills",
                StepId.SKILLS_REFLECTION,
                "unknown_skill",
                f"Unknown skills: {', '.join(unknown)}",
            )
        )
    return issues


def navigation_issues(step: StepId | str, values: Any) -> list[FieldIssue]:
    step = StepId(step)
    values = _as_values(values)
    if step in _ALWAYS_COMPLETE:
        return []
    if step is StepId.REVIEW_SUBMIT:
        out: list[FieldIssue] = []
        for prior in CONTENT_STEPS:
            out.extend(navigation_issues(prior, values))
        return out
    return _required_issues(step, values)


def missing_fields(step: StepId | str, values: Any) -> list[FieldIssue]:
    """Everything that keeps `step` from being fully complete."""
    step = StepId(step)
    values = _as_values(values)
    if step in _ALWAYS_COMPLETE:
        return []
    if step is StepId.REVIEW_SUBMIT:
        out: list[FieldIssue] = []
        for prior in CONTENT_STEPS:
            out.extend(missing_fields(prior, values))
        return out

    issues = _required_issues(step, values)
    if step is StepId.BASIC_INFO and not has_artifact(values):
        issues.append(
            FieldIssue(
                "files",
                step,
                "artifact_required",
                "Attach at least one file, YouTube link, or external link",
            )
        )
    if step is StepId.SKILLS_REFLECTION:
        issues.extend(_skill_issues(values))
    return issues


def is_step_navigation_complete(step: StepId | str, values: Any) -> bool:
    return not navigation_issues(step, values)


def is_step_complete(step: StepId | str, values: Any) -> bool:
    return not missing_fields(step, values)


def submission_issues(values: Any) -> list[FieldIssue]:
    out: list[FieldIssue] = []
    for step in CONTENT_STEPS:
        out.extend(missing_fields(step, values))
    return out


def find_step_for_fields(fields: Iterable[str]) -> StepId | None:
    """
    First content step owning any of the given field names.
    Artifact fields belong to basic-info. Returns None for an empty input.
    """
    fields = set(fields)
    if not fields:
        return None
    for step in CONTENT_STEPS:
        owned = {r.field for r in STEP_REQUIREMENTS[step]}
        if step is StepId.BASIC_INFO:
            owned |= {"files", "externalLinks", "youtubelinks"}
        if owned & fields:
            return step
    return StepId.BASIC_INFO
