from portfolio.workflow.taxonomy import SKILLS, StepId
from portfolio.workflow.validation import (
    FieldEquals,
    evaluate_condition,
    find_step_for_fields,
    has_artifact,
    is_step_complete,
    is_step_navigation_complete,
    missing_fields,
    navigation_issues,
    submission_issues,
)

from tests.helpers import FILE_REF, complete_values


def test_basic_info_gating():
    values = {"subject": "sci", "artifact_type": "Project", "month": "March"}
    assert not is_step_navigation_complete("basic-info", values)

    values["title"] = "Volcano"
    assert is_step_navigation_complete("basic-info", values)
    # navigation does not need artifacts, full completeness does
    assert not is_step_complete("basic-info", values)

    values["files"] = [dict(FILE_REF)]
    assert is_step_complete("basic-info", values)


def test_markup_only_title_is_missing():
    values = complete_values(title="<p> </p>")
    assert [i.field for i in navigation_issues(StepId.BASIC_INFO, values)] == ["title"]

    values = complete_values(title="&nbsp;")
    assert [i.field for i in navigation_issues(StepId.BASIC_INFO, values)] == ["title"]


def test_artifact_can_be_an_external_or_legacy_youtube_link():
    assert has_artifact({"externalLinks": [{"url": "https://example.org"}]})
    assert has_artifact({"youtubelinks": [{"url": "https://youtu.be/abc"}]})
    assert not has_artifact({"externalLinks": [{"url": ""}], "youtubelinks": [], "files": []})
    assert not has_artifact(None)


def test_team_contribution_required_only_for_team_work():
    solo = {"is_team_work": False, "is_original_work": True}
    assert is_step_complete("role-originality", solo)

    team = {"is_team_work": True, "is_original_work": True}
    assert [i.field for i in missing_fields("role-originality", team)] == ["team_contribution"]

    team["team_contribution"] = "I wired the circuit."
    assert is_step_complete("role-originality", team)


def test_originality_explanation_required_when_not_original():
    values = {"is_team_work": False, "is_original_work": False}
    assert [i.field for i in missing_fields("role-originality", values)] == ["originality_explanation"]


def test_booleans_must_be_answered():
    issues = missing_fields("role-originality", {})
    assert {i.field for i in issues} == {"is_team_work", "is_original_work"}


def test_skills_reflection_needs_at_least_one_skill():
    values = {"selected_skills": [], "skills_justification": "x", "pride_reason": "y"}
    assert [i.code for i in missing_fields("skills-reflection", values)] == ["required"]


def test_skill_cap_reported_by_full_completeness():
    skills = list(SKILLS) + ["extra-skill"]
    assert len(skills) == 21
    values = complete_values(selected_skills=skills)
    codes = {i.code for i in missing_fields("skills-reflection", values)}
    assert "too_many" in codes
    assert "unknown_skill" in codes
    # navigation is still allowed
    assert is_step_navigation_complete("skills-reflection", values)


def test_review_submit_revalidates_every_content_step():
    assert is_step_complete("review-submit", complete_values())
    values = complete_values(learnings="")
    assert not is_step_complete("review-submit", values)
    assert [i.step for i in missing_fields("review-submit", values)] == [StepId.PROCESS_CHALLENGES]


def test_preview_and_feedback_steps_are_always_complete():
    for step in ("assignment-preview", "teacher-feedback"):
        assert is_step_complete(step, {})
        assert is_step_navigation_complete(step, None)


def test_malformed_values_are_incomplete_not_errors():
    assert not is_step_complete("basic-info", None)
    assert not is_step_complete("skills-reflection", {"selected_skills": "creativity"})
    assert not is_step_complete("process-challenges", {"learnings": ["not", "text"]})


def test_submission_issues_carry_step_and_message():
    issues = submission_issues(complete_values(files=[], title=""))
    by_field = {i.field: i for i in issues}
    assert by_field["title"].step is StepId.BASIC_INFO
    assert by_field["files"].code == "artifact_required"
    assert by_field["title"].as_dict()["message"].endswith("is required")
    assert submission_issues(complete_values()) == []


def test_declarative_condition():
    cond = FieldEquals("is_team_work", True)
    assert evaluate_condition(cond, {"is_team_work": True})
    assert not evaluate_condition(cond, {"is_team_work": "true"})
    assert evaluate_condition(None, {})


def test_find_step_for_fields():
    assert find_step_for_fields(["learnings", "title"]) is StepId.BASIC_INFO
    assert find_step_for_fields(["pride_reason"]) is StepId.SKILLS_REFLECTION
    assert find_step_for_fields(["externalLinks"]) is StepId.BASIC_INFO
    assert find_step_for_fields([]) is None
