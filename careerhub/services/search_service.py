"""Brave web-search client used to assemble learning paths."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urlparse

import requests

from careerhub.errors import SearchUnavailable

_LOGGER = logging.getLogger(__name__)

BRAVE_API_URL = "https://api.search.brave.com/res/v1/web/search"

LEARNING_DOMAINS = (
    "coursera.org",
    "udemy.com",
    "pluralsight.com",
    "linkedin.com/learning",
    "edx.org",
    "freecodecamp.org",
    "codecademy.com",
    "learn.microsoft.com",
    "docs.microsoft.com",
    "developer.mozilla.org",
    "w3schools.com",
)

CERTIFICATION_DOMAINS = (
    "aws.amazon.com",
    "microsoft.com",
    "google.com",
    "cisco.com",
    "comptia.org",
    "isaca.org",
    "pmi.org",
    "coursera.org",
    "udemy.com",
)

BLOCKED_DOMAINS = ("youtube.com", "facebook.com", "twitter.com")

_session: Optional[requests.Session] = None


def get_search_session() -> requests.Session:
    """Return the shared HTTP session for search calls."""
    global _session
    if _session is None:
        _session = requests.Session()
        _session.headers.update({"Accept": "application/json", "Accept-Encoding": "gzip"})
    return _session


def matches_domain(url: str, domains: Sequence[str]) -> bool:
    """True when the URL's host (and path, for entries like linkedin.com/learning) matches."""
    parsed = urlparse(url or "")
    host = (parsed.hostname or "").lower()
    path = parsed.path or "/"
    for domain in domains:
        domain_host, _, domain_path = domain.partition("/")
        if host != domain_host and not host.endswith("." + domain_host):
            continue
        if domain_path and not path.lstrip("/").startswith(domain_path):
            continue
        return True
    return False


def filter_results(
    results: List[Dict[str, Any]],
    allowed: Sequence[str],
    blocked: Sequence[str] = BLOCKED_DOMAINS,
) -> List[Dict[str, Any]]:
    return [
        result
        for result in results
        if matches_domain(result["url"], allowed) and not matches_domain(result["url"], blocked)
    ]


def _adapt(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    web = payload.get("web") or {}
    adapted = []
    for result in web.get("results") or []:
        url = result.get("url")
        if not url:
            continue
        meta = result.get("meta_url") or {}
        adapted.append(
            {
                "title": result.get("title", ""),
                "url": url,
                "content": result.get("description", ""),
                "source": meta.get("netloc") or urlparse(url).netloc,
                "published_date": result.get("age"),
            }
        )
    return adapted


def search(query: str, *, api_key: Optional[str], timeout: float = 10) -> List[Dict[str, Any]]:
    """Run one web search and return adapted results."""
    if not api_key:
        raise SearchUnavailable(detail="BRAVE_API_KEY is not configured")

    try:
        response = get_search_session().get(
            BRAVE_API_URL,
            params={"q": query, "count": 20},
            headers={"X-Subscription-Token": api_key},
            timeout=timeout,
        )
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        _LOGGER.warning("Search request failed for %r: %s", query, exc)
        raise SearchUnavailable() from exc

    return _adapt(payload)


def search_learning_resources(skill: str, **kwargs: Any) -> List[Dict[str, Any]]:
    results = search(f"{skill} tutorials courses learning resources", **kwargs)
    return filter_results(results, LEARNING_DOMAINS)


def search_certifications(skill: str, **kwargs: Any) -> List[Dict[str, Any]]:
    results = search(f"{skill} professional certification programs", **kwargs)
    return filter_results(results, CERTIFICATION_DOMAINS)


def build_skill_gaps(skills: Sequence[Dict[str, Any]], **kwargs: Any) -> List[Dict[str, Any]]:
    """Look up resources and certifications per skill; skills whose search fails are skipped."""
    skill_gaps: List[Dict[str, Any]] = []
    for skill in skills:
        name = skill["name"]
        try:
            resources = search_learning_resources(name, **kwargs)
            certifications = search_certifications(name, **kwargs)
        except SearchUnavailable:
            _LOGGER.warning("Skipping skill %r after search failure", name)
            continue

        skill_gaps.append(
            {
                "skill": name,
                "currentLevel": skill.get("currentLevel"),
                "targetLevel": skill.get("targetLevel"),
                "resources": [
                    {
                        "id": uuid.uuid4().hex,
                        "title": result["title"],
                        "url": result["url"],
                        "provider": result["source"],
                        "type": "certification" if "certification" in result["url"].lower() else "course",
                        "skillArea": name,
                        "completed": False,
                        "progress": 0,
                    }
                    for result in resources
                ],
                "certifications": certifications,
            }
        )
    return skill_gaps
