from sqlalchemy.exc import OperationalError

from portfolio.models.assignment_draft import AssignmentDraft
from portfolio.workflow.drafts import DraftStore
from portfolio.workflow.taxonomy import StepId

from tests.helpers import auth, create_user


class BrokenSession:
    """Every database call fails, like a dropped connection."""

    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    begin_nested = _fail
    query = _fail


def test_save_and_load_round_trip(db_session):
    student = create_user(db_session, "student@local.test")
    store = DraftStore(db_session, student.id, "wizard-1")

    assert store.save_draft({"title": "Kite", "youtubelinks": [{"url": "https://youtu.be/k", "title": "K"}]}, "role-originality")

    draft = store.load_draft()
    assert draft.step is StepId.ROLE_ORIGINALITY
    assert draft.values["title"] == "Kite"
    # loaded drafts come back in canonical shape
    assert draft.values["externalLinks"] == [{"url": "https://youtu.be/k", "title": "K", "type": "youtube"}]


def test_save_overwrites_previous_draft(db_session):
    student = create_user(db_session, "student@local.test")
    store = DraftStore(db_session, student.id, "wizard-1")
    store.save_draft({"title": "First"}, "basic-info")
    store.save_draft({"title": "Second"}, "skills-reflection")

    assert store.load_draft().values["title"] == "Second"
    assert db_session.query(AssignmentDraft).count() == 1


def test_drafts_are_scoped_per_user_and_key(db_session):
    a = create_user(db_session, "a@local.test")
    b = create_user(db_session, "b@local.test")
    DraftStore(db_session, a.id, "k").save_draft({"title": "A"}, "basic-info")

    assert DraftStore(db_session, b.id, "k").load_draft() is None
    assert DraftStore(db_session, a.id, "other").load_draft() is None


def test_missing_draft_is_absent(db_session):
    student = create_user(db_session, "student@local.test")
    assert DraftStore(db_session, student.id, "nothing").load_draft() is None


def test_corrupt_draft_is_discarded(db_session):
    student = create_user(db_session, "student@local.test")
    db_session.add(AssignmentDraft(user_id=student.id, draft_key="bad", step="basic-info", payload="{not json"))
    db_session.flush()

    assert DraftStore(db_session, student.id, "bad").load_draft() is None
    assert db_session.query(AssignmentDraft).count() == 0


def test_draft_with_unknown_step_is_discarded(db_session):
    student = create_user(db_session, "student@local.test")
    db_session.add(AssignmentDraft(user_id=student.id, draft_key="old", step="summary", payload="{}"))
    db_session.flush()

    assert DraftStore(db_session, student.id, "old").load_draft() is None


def test_unserializable_values_are_not_saved(db_session):
    student = create_user(db_session, "student@local.test")
    store = DraftStore(db_session, student.id, "k")
    assert not store.save_draft({"title": "x"}, "not-a-step")
    assert store.load_draft() is None


def test_storage_errors_never_raise():
    store = DraftStore(BrokenSession(), None, "k")
    assert store.save_draft({"title": "x"}, "basic-info") is False
    assert store.load_draft() is None
    store.clear_draft()
    assert DraftStore.clear_all_for_user(BrokenSession(), None, "abc") == 0


def test_clear_draft(db_session):
    student = create_user(db_session, "student@local.test")
    store = DraftStore(db_session, student.id, "k")
    store.save_draft({"title": "x"}, "basic-info")
    store.clear_draft()
    assert store.load_draft() is None
    # clearing twice is fine
    store.clear_draft()


def test_clear_all_for_user_only_removes_that_assignment(db_session):
    student = create_user(db_session, "student@local.test")
    DraftStore(db_session, student.id, "tab-1").save_draft({"id": "a1", "title": "x"}, "basic-info")
    DraftStore(db_session, student.id, "tab-2").save_draft({"id": "a1", "title": "y"}, "basic-info")
    DraftStore(db_session, student.id, "tab-3").save_draft({"id": "a2", "title": "z"}, "basic-info")

    assert DraftStore.clear_all_for_user(db_session, student.id, "a1") == 2
    assert DraftStore(db_session, student.id, "tab-3").load_draft() is not None


def test_draft_api(db_session, client):
    student = create_user(db_session, "student@local.test")

    r = client.get("/drafts/wizard-1", headers=auth(student))
    assert r.status_code == 404

    r = client.put(
        "/drafts/wizard-1",
        json={"values": {"title": "Kite"}, "step": "skills-reflection"},
        headers=auth(student),
    )
    assert r.status_code == 200
    assert r.json()["saved"] is True

    r = client.get("/drafts/wizard-1", headers=auth(student))
    assert r.status_code == 200
    body = r.json()
    assert body["step"] == "skills-reflection"
    assert body["values"]["title"] == "Kite"
    assert body["values"]["externalLinks"] == []

    r = client.delete("/drafts/wizard-1", headers=auth(student))
    assert r.status_code == 204
    assert client.get("/drafts/wizard-1", headers=auth(student)).status_code == 404


def test_draft_api_requires_login(client):
    assert client.get("/drafts/wizard-1").status_code == 401


def test_draft_saved_between_commits_persists(db_session):
    student = create_user(db_session, "student@local.test")
    store = DraftStore(db_session, student.id, "wizard-1")

    assert store.save_draft({"title": "Kite"}, "basic-info")
    db_session.commit()
    assert store.save_draft({"title": "Kite v2"}, "skills-reflection")
    db_session.commit()

    draft = store.load_draft()
    assert draft.values["title"] == "Kite v2"
    assert draft.step is StepId.SKILLS_REFLECTION
