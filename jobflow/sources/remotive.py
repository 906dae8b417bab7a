"""Remotive — free API for remote tech jobs (no API key required).

Docs: https://remotive.com/api/remote-jobs
"""
from __future__ import annotations

import requests

from jobflow.log import get_logger
from jobflow.models import STATUS_NEW, JobListing
from jobflow.retry import retry
from jobflow.sources.base import JobSource
from jobflow.sources.filters import strip_html

log = get_logger(__name__)

API_URL = "https://remotive.com/api/remote-jobs"

_GENERIC_WORDS = ("developer", "engineer")


def _role_needle(role: str) -> str:
    """Role text minus the generic words, e.g. "React Developer" → "react"."""
    needle = role.lower()
    for word in _GENERIC_WORDS:
        needle = needle.replace(word, "")
    return needle.strip()


class RemotiveSource(JobSource):
    name = "Remotive"

    def __init__(self, timeout: float = 15) -> None:
        self.timeout = timeout

    @retry(max_attempts=2, base_delay=1.5, retryable=(requests.RequestException, OSError))
    def _get(self) -> list[dict]:
        r = requests.get(
            API_URL,
            params={"category": "software-dev", "limit": 100},
            timeout=self.timeout,
        )
        r.raise_for_status()
        return r.json().get("jobs", []) or []

    def fetch(self, role: str | None = None, limit: int = 50) -> list[JobListing]:
        try:
            hits = self._get()
        except Exception as exc:
            log.warning("Remotive fetch failed: %s", exc)
            return []

        if role:
            needle = _role_needle(role)
            hits = [h for h in hits if needle in (h.get("title") or "").lower()]

        jobs = [
            JobListing(
                id=f"remotive-{hit.get('id')}",
                title=hit.get("title", ""),
                company=hit.get("company_name", ""),
                location=hit.get("candidate_required_location") or "Remote",
                url=hit.get("url", ""),
                description=strip_html(hit["description"]) if hit.get("description") else "Check link for details.",
                source=self.name,
                status=STATUS_NEW,
                posted_date=hit.get("publication_date"),
                match_score=0,
            )
            for hit in hits
        ]
        log.debug("Remotive role=%r returned %d jobs", role, len(jobs))
        return jobs[:limit]
