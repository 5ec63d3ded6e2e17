from fastapi.testclient import TestClient


def test_health_ok(client: TestClient):
    """Test health check endpoint"""
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_root_endpoint(client: TestClient):
    """Test root endpoint"""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Student Portfolio Backend"
    assert data["status"] == "ok"
    assert "docs" in data
    assert "health" in data


def test_steps_endpoint(client: TestClient):
    r = client.get("/steps")
    assert r.status_code == 200
    assert [s["id"] for s in r.json()][:2] == ["basic-info", "role-originality"]


def test_taxonomy_endpoint(client: TestClient):
    body = client.get("/taxonomy").json()
    assert body["max_selected_skills"] == 20
    assert len(body["months"]) == 12
    assert body["statuses"]["NEEDS_REVISION"] == "Needs Revision"
    assert body["subjects"]["sci"] == "Science"
    assert "pride_reason" in body["questions"]
