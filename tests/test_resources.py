"""Owner-scoped CRUD behaviour across the resource endpoints."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from careerhub.services import resource_service
from careerhub.utils.auth import Principal

RESUME = {
    "title": "Backend resume",
    "content": {
        "personalInfo": {
            "fullName": "Jane Doe",
            "email": "jane@example.com",
            "phone": "555-0100",
            "location": "Austin, TX",
        },
        "experience": [
            {
                "title": "Engineer",
                "company": "Acme",
                "duration": "2020-2024",
                "description": "Built APIs",
            }
        ],
        "education": [{"degree": "BSc", "school": "State University", "year": "2019"}],
        "skills": ["Python", "MongoDB"],
    },
}


@pytest.fixture
def jane(sign_in):
    return sign_in("jane@example.com")


@pytest.fixture
def other(sign_in):
    return sign_in("other@example.com")


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch):
    """Deterministic, strictly increasing repository timestamps."""
    state = {"now": datetime(2024, 1, 1, 12, 0, 0)}

    def _tick():
        state["now"] += timedelta(seconds=1)
        return state["now"]

    monkeypatch.setattr(resource_service, "_utcnow", _tick)
    return state


def test_contact_defaults_and_isolation(client, jane, other):
    response = client.post("/api/contacts", json={"name": "Jane Doe"}, headers=jane)
    assert response.status_code == 200
    contact = response.get_json()
    assert contact["relationship_score"] == 50
    assert contact["name"] == "Jane Doe"

    response = client.get(f"/api/contacts/{contact['id']}", headers=other)
    assert response.status_code == 404
    assert response.get_json()["message"] == "Contact not found"

    assert client.get("/api/contacts", headers=other).get_json() == []


def test_not_owned_and_missing_are_indistinguishable(client, jane, other):
    contact_id = client.post("/api/contacts", json={"name": "Sam"}, headers=jane).get_json()["id"]

    for headers, resource_id in ((other, contact_id), (jane, "contact_missing")):
        for method in ("get", "patch", "delete"):
            kwargs = {"json": {"notes": "x"}} if method == "patch" else {}
            response = getattr(client, method)(f"/api/contacts/{resource_id}", headers=headers, **kwargs)
            assert response.status_code == 404
            assert response.get_json() == {"message": "Contact not found", "error": "not_found"}

    assert client.get(f"/api/contacts/{contact_id}", headers=jane).get_json()["notes"] is None


def test_create_then_read_returns_same_payload(client, jane):
    created = client.post("/api/resumes", json=RESUME, headers=jane).get_json()
    fetched = client.get(f"/api/resumes/{created['id']}", headers=jane).get_json()

    assert fetched == created
    assert fetched["title"] == "Backend resume"
    assert fetched["content"]["skills"] == ["Python", "MongoDB"]
    assert fetched["template"] == "professional"


def test_reads_are_idempotent(client, jane):
    contact_id = client.post("/api/contacts", json={"name": "Sam"}, headers=jane).get_json()["id"]

    first = client.get(f"/api/contacts/{contact_id}", headers=jane).get_json()
    second = client.get(f"/api/contacts/{contact_id}", headers=jane).get_json()
    assert first == second


def test_update_merges_and_bumps_timestamp(client, jane, clock):
    created = client.post(
        "/api/contacts", json={"name": "Sam", "company": "Acme"}, headers=jane
    ).get_json()

    response = client.patch(
        f"/api/contacts/{created['id']}", json={"relationship_score": 80}, headers=jane
    )
    assert response.status_code == 200
    updated = response.get_json()
    assert updated["company"] == "Acme"
    assert updated["relationship_score"] == 80
    assert updated["createdAt"] == created["createdAt"]
    assert updated["updatedAt"] > created["updatedAt"]


def test_update_cannot_change_owner(client, jane, other):
    created = client.post("/api/contacts", json={"name": "Sam"}, headers=jane).get_json()

    response = client.patch(
        f"/api/contacts/{created['id']}", json={"user_id": "someone-else"}, headers=jane
    )
    assert response.status_code == 400
    assert client.get(f"/api/contacts/{created['id']}", headers=jane).get_json()["userId"] == created["userId"]


def test_delete_is_final(client, jane):
    contact_id = client.post("/api/contacts", json={"name": "Sam"}, headers=jane).get_json()["id"]

    assert client.delete(f"/api/contacts/{contact_id}", headers=jane).status_code == 204
    assert client.get(f"/api/contacts/{contact_id}", headers=jane).status_code == 404
    assert client.delete(f"/api/contacts/{contact_id}", headers=jane).status_code == 404


def test_list_orders_by_most_recent_update(client, jane, clock):
    first = client.post("/api/contacts", json={"name": "First"}, headers=jane).get_json()
    second = client.post("/api/contacts", json={"name": "Second"}, headers=jane).get_json()

    names = [contact["name"] for contact in client.get("/api/contacts", headers=jane).get_json()]
    assert names == ["Second", "First"]

    client.patch(f"/api/contacts/{first['id']}", json={"notes": "met again"}, headers=jane)
    names = [contact["name"] for contact in client.get("/api/contacts", headers=jane).get_json()]
    assert names == ["First", "Second"]
    assert second["id"] != first["id"]


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"name": ""},
        {"name": "Sam", "relationship_score": 101},
        {"name": "Sam", "email": "not-an-email"},
        {"name": "Sam", "unknown_field": True},
    ],
)
def test_contact_validation(client, jane, payload):
    response = client.post("/api/contacts", json=payload, headers=jane)
    assert response.status_code == 400
    assert response.get_json()["message"] == "Validation failed"


def test_resume_requires_experience_and_education(client, jane):
    payload = {**RESUME, "content": {**RESUME["content"], "experience": []}}
    response = client.post("/api/resumes", json=payload, headers=jane)
    assert response.status_code == 400
    assert "experience" in response.get_json()["error"]


def test_non_object_body_is_rejected(client, jane):
    response = client.post("/api/contacts", json=["Sam"], headers=jane)
    assert response.status_code == 400


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/contacts"),
        ("post", "/api/contacts"),
        ("get", "/api/contacts/stats"),
        ("get", "/api/contacts/contact_1"),
        ("patch", "/api/contacts/contact_1"),
        ("delete", "/api/contacts/contact_1"),
        ("get", "/api/resumes"),
        ("put", "/api/resumes/resume_1"),
        ("get", "/api/resumes/resume_1/pdf"),
        ("get", "/api/cover-letters"),
        ("get", "/api/cover-letters/letter_1/pdf"),
        ("get", "/api/applications"),
        ("post", "/api/applications/application_1/communication"),
        ("get", "/api/learning-path"),
        ("post", "/api/learning-path"),
        ("patch", "/api/learning-path/path_1"),
    ],
)
def test_endpoints_require_authentication(client, method, path):
    response = getattr(client, method)(path, json={})
    assert response.status_code == 401
    assert response.get_json()["message"] == "Unauthorized"


def test_invalid_token_is_rejected(client):
    response = client.get("/api/contacts", headers={"Authorization": "Bearer sess_bogus"})
    assert response.status_code == 401


def test_resume_and_cover_letter_accept_name_and_put(client, jane):
    letter = client.post(
        "/api/cover-letters", json={"name": "Acme letter", "content": "Dear team,"}, headers=jane
    ).get_json()
    assert letter["title"] == "Acme letter"

    response = client.put(
        f"/api/cover-letters/{letter['id']}", json={"name": "Renamed"}, headers=jane
    )
    assert response.status_code == 200
    assert response.get_json()["title"] == "Renamed"
    assert response.get_json()["content"] == "Dear team,"


def test_application_links_must_be_owned(client, jane, other):
    foreign_contact = client.post("/api/contacts", json={"name": "Theirs"}, headers=other).get_json()
    own_contact = client.post("/api/contacts", json={"name": "Mine"}, headers=jane).get_json()

    response = client.post(
        "/api/applications",
        json={"job_title": "Engineer", "company": "Acme", "contact_id": foreign_contact["id"]},
        headers=jane,
    )
    assert response.status_code == 400
    assert "contact_id" in response.get_json()["error"]

    response = client.post(
        "/api/applications",
        json={"job_title": "Engineer", "company": "Acme", "contact_id": own_contact["id"]},
        headers=jane,
    )
    assert response.status_code == 200
    application = response.get_json()
    assert application["status"] == "applied"
    assert application["contact_id"] == own_contact["id"]


def test_application_status_is_validated(client, jane):
    response = client.post(
        "/api/applications",
        json={"job_title": "Engineer", "company": "Acme", "status": "ghosted"},
        headers=jane,
    )
    assert response.status_code == 400


def test_application_communication_is_appended(client, jane, other):
    application = client.post(
        "/api/applications", json={"job_title": "Engineer", "company": "Acme"}, headers=jane
    ).get_json()

    path = f"/api/applications/{application['id']}/communication"
    response = client.post(path, json={"type": "email", "summary": "Sent follow-up"}, headers=jane)
    assert response.status_code == 200
    client.post(path, json={"type": "phone", "summary": "Recruiter call"}, headers=jane)

    history = client.get(f"/api/applications/{application['id']}", headers=jane).get_json()[
        "communication_history"
    ]
    assert [entry["summary"] for entry in history] == ["Sent follow-up", "Recruiter call"]
    assert history[0]["date"]

    response = client.post(path, json={"type": "email", "summary": "Nope"}, headers=other)
    assert response.status_code == 404


def test_contact_stats(client, jane, other):
    client.post("/api/contacts", json={"name": "A", "relationship_score": 80}, headers=jane)
    client.post(
        "/api/contacts",
        json={"name": "B", "relationship_score": 40, "next_followup_date": "2000-01-01"},
        headers=jane,
    )
    client.post("/api/contacts", json={"name": "C", "relationship_score": 10}, headers=other)

    response = client.get("/api/contacts/stats", headers=jane)
    assert response.status_code == 200
    assert response.get_json() == {
        "totalContacts": 2,
        "averageRelationshipScore": 60,
        "needsFollowup": 1,
    }


def test_learning_path_completion_can_be_toggled(client, jane, mongo_db):
    created = resource_service.learning_paths.create_for(
        _principal(mongo_db, "jane@example.com"), {"title": "Python path", "skill_gaps": []}
    )

    response = client.patch(f"/api/learning-path/{created['_id']}", json={"completed": True}, headers=jane)
    assert response.status_code == 200
    assert response.get_json()["completed"] is True
    assert response.get_json()["title"] == "Python path"


def _principal(mongo_db, email):
    user = mongo_db.users.find_one({"email": email})
    return Principal(id=user["_id"], email=email)


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer sess_bogus"}])
def test_rejected_writes_leave_store_untouched(client, mongo_db, headers):
    response = client.post("/api/contacts", json={"name": "Sam"}, headers=headers)

    assert response.status_code == 401
    assert mongo_db.contacts.count_documents({}) == 0


def test_created_resource_is_owned_by_caller(client, jane, mongo_db):
    created = client.post("/api/contacts", json={"name": "Sam"}, headers=jane).get_json()

    owner = mongo_db.users.find_one({"email": "jane@example.com"})
    assert created["userId"] == owner["_id"]
    assert mongo_db.contacts.find_one({"_id": created["id"]})["user_id"] == owner["_id"]


def test_unknown_route_returns_json_error(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.get_json()["error"] == "not_found"


def test_wrong_method_keeps_allow_header(client):
    response = client.delete("/api/auth/session")

    assert response.status_code == 405
    assert "GET" in response.headers["Allow"]
    assert response.mimetype == "application/json"
    assert response.get_json()["error"] == "method_not_allowed"
