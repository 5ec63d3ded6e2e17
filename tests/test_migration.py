import copy

from portfolio.workflow.migration import (
    create_feedback_item,
    get_latest_feedback,
    get_latest_question_comments,
    has_question_comments,
    migrate_assignment_data,
    normalize_feedback,
)


def test_youtubelinks_are_derived_into_external_links():
    p = {"youtubelinks": [{"url": "https://youtu.be/abc", "title": "T"}], "externalLinks": []}
    out = migrate_assignment_data(p)
    assert out["externalLinks"] == [{"url": "https://youtu.be/abc", "title": "T", "type": "youtube"}]
    # legacy list is kept as-is
    assert out["youtubelinks"] == [{"url": "https://youtu.be/abc", "title": "T"}]


def test_existing_external_links_are_never_overwritten():
    links = [{"url": "https://example.org/poster", "title": "Poster", "type": "link"}]
    p = {"externalLinks": copy.deepcopy(links), "youtubelinks": [{"url": "https://youtu.be/x", "title": "X"}]}
    assert migrate_assignment_data(p)["externalLinks"] == links


def test_external_links_with_only_blank_urls_are_replaced():
    p = {"externalLinks": [{"url": "  ", "title": ""}], "youtubelinks": [{"url": "https://youtu.be/x", "title": "X"}]}
    assert migrate_assignment_data(p)["externalLinks"] == [
        {"url": "https://youtu.be/x", "title": "X", "type": "youtube"}
    ]


def test_missing_link_lists_default_to_empty():
    out = migrate_assignment_data({"title": "Essay"})
    assert out == {"title": "Essay", "externalLinks": [], "youtubelinks": []}


def test_non_list_link_fields_default_to_empty():
    out = migrate_assignment_data({"externalLinks": None, "youtubelinks": "nope"})
    assert out["externalLinks"] == []
    assert out["youtubelinks"] == []


def test_migration_is_idempotent():
    payloads = [
        {},
        {"youtubelinks": [{"url": "https://youtu.be/abc", "title": "T"}]},
        {"externalLinks": [{"url": "https://a.b", "title": "", "type": "link"}]},
        {"youtubelinks": [{"url": "", "title": "empty"}], "externalLinks": None},
        {"youtubelinks": [{"url": "https://youtu.be/1"}, "garbage"], "title": "x"},
    ]
    for p in payloads:
        once = migrate_assignment_data(p)
        assert migrate_assignment_data(once) == once


def test_migration_does_not_mutate_input():
    p = {"youtubelinks": [{"url": "https://youtu.be/abc", "title": "T"}]}
    before = copy.deepcopy(p)
    migrate_assignment_data(p)
    assert p == before


def test_non_dict_payload_becomes_empty_canonical_shape():
    assert migrate_assignment_data(None) == {"externalLinks": [], "youtubelinks": []}


def test_normalize_feedback_wraps_legacy_object():
    out = normalize_feedback({"text": "ok"})
    assert out == [{"text": "ok", "question_comments": {}}]


def test_normalize_feedback_preserves_list_order():
    out = normalize_feedback([{"text": "a"}, {"text": "b"}])
    assert [f["text"] for f in out] == ["a", "b"]
    assert all(f["question_comments"] == {} for f in out)


def test_normalize_feedback_keeps_existing_question_comments():
    qc = {"title": {"id": "1", "comment": "Nice", "timestamp": "t", "teacher_id": "x", "question_id": "title"}}
    out = normalize_feedback([{"text": "a", "question_comments": qc}])
    assert out[0]["question_comments"] == qc


def test_normalize_feedback_garbage_is_empty():
    for raw in (None, "", "text", 42, {}, []):
        assert normalize_feedback(raw) == []


def test_latest_feedback_uses_date():
    items = [
        {"text": "new", "date": "2024-05-02T10:00:00+00:00", "question_comments": {"title": {"comment": "x"}}},
        {"text": "old", "date": "2024-05-01T10:00:00Z"},
    ]
    assert get_latest_feedback(items)["text"] == "new"
    assert get_latest_question_comments(items) == {"title": {"comment": "x"}}
    assert has_question_comments(items)
    assert get_latest_feedback(None) is None
    assert not has_question_comments({"text": "legacy"})


def test_create_feedback_item_shape():
    item = create_feedback_item(teacher_id="t1", text="Good work", selected_skills=["creativity"])
    assert item["text"] == "Good work"
    assert item["teacher_id"] == "t1"
    assert item["selected_skills"] == ["creativity"]
    assert item["skills_justification"] == ""
    assert item["question_comments"] == {}
    assert item["date"]
