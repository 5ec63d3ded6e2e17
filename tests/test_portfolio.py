from fastapi.testclient import TestClient

from tests.helpers import complete_values, create_assignment, create_user


def test_public_portfolio_lists_only_approved_work(db_session, client: TestClient):
    student = create_user(db_session, "student@local.test", full_name="Asha", grade="8")
    approved = create_assignment(
        db_session,
        student,
        status="APPROVED",
        feedback=[{"text": "private note"}],
        **complete_values(title="Solar Oven"),
    )
    create_assignment(db_session, student, status="SUBMITTED", **complete_values(title="Pending"))
    create_assignment(db_session, student, **complete_values(title="Draft"))

    r = client.get(f"/portfolio/{student.id}")
    assert r.status_code == 200
    body = r.json()
    assert body["full_name"] == "Asha"
    assert [i["id"] for i in body["items"]] == [str(approved.id)]
    item = body["items"][0]
    assert item["title"] == "Solar Oven"
    assert "feedback" not in item
    assert "revision_history" not in item


def test_unknown_student(db_session, client: TestClient):
    teacher = create_user(db_session, "teacher@local.test", role="teacher")
    assert client.get(f"/portfolio/{teacher.id}").status_code == 404
    assert client.get("/portfolio/not-a-uuid").status_code == 404
