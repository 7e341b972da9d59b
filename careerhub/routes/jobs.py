"""/api/jobs endpoint returning job-board search links."""

from __future__ import annotations

from urllib.parse import quote

from flask import Blueprint, current_app, jsonify, request

from careerhub.utils.auth import require_principal

bp = Blueprint("jobs", __name__, url_prefix="/api/jobs")

JOB_BOARDS = (
    {
        "job_id": "linkedin",
        "employer_name": "LinkedIn Jobs",
        "title": 'Search "{query}" jobs on LinkedIn',
        "description": "Access millions of job postings, leverage your professional network, "
        "and get discovered by recruiters.",
        "url": "https://www.linkedin.com/jobs/search/?keywords={query}&location={location}",
        "source": "LinkedIn",
    },
    {
        "job_id": "indeed",
        "employer_name": "Indeed",
        "title": 'Find "{query}" positions on Indeed',
        "description": "Search millions of jobs from thousands of job boards, newspapers, "
        "classifieds and company websites.",
        "url": "https://www.indeed.com/jobs?q={query}&l={location}",
        "source": "Indeed",
    },
    {
        "job_id": "glassdoor",
        "employer_name": "Glassdoor",
        "title": 'Explore "{query}" opportunities on Glassdoor',
        "description": "Find jobs and research companies with millions of reviews and salary information.",
        "url": "https://www.glassdoor.com/Job/jobs.htm?sc.keyword={query}&locT=C&locId=0",
        "source": "Glassdoor",
    },
)


def job_board_links(query: str, location: str):
    encoded = {"query": quote(query, safe=""), "location": quote(location, safe="")}
    return [
        {
            "job_id": board["job_id"],
            "employer_name": board["employer_name"],
            "job_title": board["title"].format(query=query),
            "job_description": board["description"],
            "job_location": "Worldwide",
            "job_posted_at": "Real-time",
            "job_apply_link": board["url"].format(**encoded),
            "source": board["source"],
        }
        for board in JOB_BOARDS
    ]


@bp.get("")
def search_jobs():
    """Build LinkedIn, Indeed and Glassdoor searches for the given query."""
    principal, error_response = require_principal()
    if error_response is not None:
        return error_response

    query = request.args.get("query", "").strip()
    location = request.args.get("location", "").strip()
    # Accepted for client compatibility; none of the boards' public search URLs filter on it.
    experience_level = request.args.get("experienceLevel")

    current_app.logger.info(
        "Job board search for %s (experience level %s)", principal.id, experience_level or "any"
    )
    return jsonify(data=job_board_links(query, location), message="Showing job board links"), 200
