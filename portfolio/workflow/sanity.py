from __future__ import annotations

from typing import Any

from portfolio.workflow.markup import is_blank
from portfolio.workflow.taxonomy import MAX_SELECTED_SKILLS
from portfolio.workflow.validation import has_artifact

REFLECTION_FIELDS = (
    "skills_justification",
    "pride_reason",
    "creation_process",
    "learnings",
    "challenges",
    "improvements",
    "acknowledgments",
)


def get_sanity_issues(values: dict[str, Any] | None) -> list[str]:
    """
    Advisory audit of a submission. Never blocks a transition; an empty list
    means nothing looked off.
    """
    if not values:
        return ["No data provided"]

    issues: list[str] = []

    if is_blank(values.get("title")):
        issues.append("Missing title")
    if is_blank(values.get("subject")):
        issues.append("Missing subject")
    if is_blank(values.get("artifact_type")):
        issues.append("Missing artifact type")

    if not has_artifact(values):
        issues.append("No artifact provided (file, YouTube, or external link)")

    skills = values.get("selected_skills")
    if isinstance(skills, (list, tuple, set)) and len(skills) > MAX_SELECTED_SKILLS:
        issues.append(f"Too many selected skills (limit {MAX_SELECTED_SKILLS})")

    # markup-only rich text ("<p></p>") counts as empty
    for key in REFLECTION_FIELDS:
        raw = values.get(key)
        if raw and is_blank(raw):
            issues.append(f'Field "{key.replace("_", " ")}" appears empty')

    return issues
