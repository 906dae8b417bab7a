"""Jobicy — free remote job board API (no API key required).

Docs: https://jobicy.com/jobs-rss-feed
"""
from __future__ import annotations

import requests

from jobflow.log import get_logger
from jobflow.models import STATUS_NEW, JobListing
from jobflow.retry import retry
from jobflow.sources.base import JobSource
from jobflow.sources.filters import strip_html

log = get_logger(__name__)

API_URL = "https://jobicy.com/api/v2/remote-jobs"

# Jobicy only accepts broad tags; map detailed roles onto them.
_TAG_MAP: list[tuple[tuple[str, ...], str]] = [
    (("devops",), "devops"),
    (("design",), "design"),
    (("product",), "product"),
    (("data",), "data"),
    (("qa", "test"), "qa"),
    (("marketing",), "marketing"),
    (("sales",), "sales"),
]


def role_to_tag(role: str) -> str:
    low = role.lower()
    for needles, tag in _TAG_MAP:
        if any(n in low for n in needles):
            return tag
    return "dev"


def key_terms(role: str) -> list[str]:
    return [
        w for w in role.lower().split()
        if len(w) > 2 and w not in ("developer", "engineer")
    ]


class JobicySource(JobSource):
    name = "Jobicy"

    def __init__(self, timeout: float = 15) -> None:
        self.timeout = timeout

    @retry(max_attempts=2, base_delay=1.5, retryable=(requests.RequestException, OSError))
    def _get(self, tag: str) -> list[dict]:
        params: dict = {"count": 50}
        if tag:
            params["tag"] = tag
        r = requests.get(API_URL, params=params, timeout=self.timeout)
        r.raise_for_status()
        return r.json().get("jobs", []) or []

    def fetch(self, role: str | None = None, limit: int = 50) -> list[JobListing]:
        tag = role_to_tag(role) if role else ""
        try:
            hits = self._get(tag)
        except Exception as exc:
            log.warning("Jobicy tag=%r fetch failed: %s", tag, exc)
            return []

        # The tag is broad (e.g. "dev"); narrow to the specific role.
        terms = key_terms(role) if role else []
        if terms:
            hits = [h for h in hits if any(t in (h.get("jobTitle") or "").lower() for t in terms)]

        jobs = [
            JobListing(
                id=f"jobicy-{hit.get('id')}",
                title=hit.get("jobTitle", ""),
                company=hit.get("companyName", ""),
                location=hit.get("jobGeo") or "Remote",
                url=hit.get("url", ""),
                description=strip_html(hit["jobDescription"]) if hit.get("jobDescription") else "Remote Opportunity",
                source=self.name,
                status=STATUS_NEW,
                posted_date=hit.get("pubDate"),
                match_score=0,
            )
            for hit in hits
        ]
        log.debug("Jobicy tag=%r returned %d jobs", tag, len(jobs))
        return jobs[:limit]
