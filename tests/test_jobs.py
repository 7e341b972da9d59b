"""Job-board search links."""

from __future__ import annotations


def test_job_search_builds_encoded_board_links(client, sign_in):
    jane = sign_in("jane@example.com")

    response = client.get(
        "/api/jobs",
        query_string={"query": "python dev", "location": "Austin, TX", "experienceLevel": "senior"},
        headers=jane,
    )

    assert response.status_code == 200
    body = response.get_json()
    assert body["message"] == "Showing job board links"
    links = {job["source"]: job["job_apply_link"] for job in body["data"]}
    assert links == {
        "LinkedIn": "https://www.linkedin.com/jobs/search/?keywords=python%20dev&location=Austin%2C%20TX",
        "Indeed": "https://www.indeed.com/jobs?q=python%20dev&l=Austin%2C%20TX",
        "Glassdoor": "https://www.glassdoor.com/Job/jobs.htm?sc.keyword=python%20dev&locT=C&locId=0",
    }
    assert body["data"][0]["job_title"] == 'Search "python dev" jobs on LinkedIn'
    assert body["data"][0]["job_id"] == "linkedin"


def test_job_search_escapes_query_separators(client, sign_in):
    jane = sign_in("jane@example.com")

    response = client.get("/api/jobs", query_string={"query": "C++ & Rust", "location": ""}, headers=jane)

    indeed = response.get_json()["data"][1]["job_apply_link"]
    assert indeed == "https://www.indeed.com/jobs?q=C%2B%2B%20%26%20Rust&l="


def test_job_search_requires_authentication(client):
    response = client.get("/api/jobs?query=python")

    assert response.status_code == 401
    assert response.get_json()["message"] == "Unauthorized"
