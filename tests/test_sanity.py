from portfolio.workflow.markup import strip_markup
from portfolio.workflow.sanity import get_sanity_issues
from portfolio.workflow.taxonomy import SKILLS

from tests.helpers import FILE_REF, complete_values


def test_markup_only_title_is_the_only_issue():
    values = {"title": "<p></p>", "subject": "Science", "artifact_type": "Project", "files": [dict(FILE_REF)]}
    assert get_sanity_issues(values) == ["Missing title"]


def test_complete_submission_has_no_issues():
    assert get_sanity_issues(complete_values()) == []


def test_empty_values():
    assert get_sanity_issues({}) == ["No data provided"]
    assert get_sanity_issues(None) == ["No data provided"]


def test_missing_classification_and_artifact():
    issues = get_sanity_issues({"title": "Essay"})
    assert issues == [
        "Missing subject",
        "Missing artifact type",
        "No artifact provided (file, YouTube, or external link)",
    ]


def test_too_many_skills():
    values = complete_values(selected_skills=list(SKILLS) + ["one-more"])
    assert get_sanity_issues(values) == ["Too many selected skills (limit 20)"]


def test_markup_only_reflection_fields_are_flagged():
    values = complete_values(learnings="<p><br></p>", acknowledgments="<div> </div>")
    assert get_sanity_issues(values) == [
        'Field "learnings" appears empty',
        'Field "acknowledgments" appears empty',
    ]


def test_unset_reflection_fields_are_not_flagged():
    values = complete_values(acknowledgments=None, improvements="")
    assert get_sanity_issues(values) == []


def test_strip_markup():
    assert strip_markup("<p>Hello <b>world</b></p>") == "Hello world"
    assert strip_markup("  plain  ") == "plain"
    assert strip_markup(None) == ""


def test_entity_only_text_counts_as_empty():
    assert strip_markup("&nbsp;") == ""
    assert strip_markup("&nbsp; <p>&nbsp;</p>") == ""
    assert strip_markup("Fish &amp; chips") == "Fish & chips"

    values = complete_values(title="&nbsp;", learnings="&nbsp;&nbsp;")
    assert get_sanity_issues(values) == ["Missing title", 'Field "learnings" appears empty']
