"""Seniority filtering and description cleanup for discovered listings."""
from __future__ import annotations

import re

from jobflow.models import JobListing

DESCRIPTION_LIMIT = 500

# Titles containing any of these are hidden for the given experience level.
EXCLUSION_KEYWORDS: dict[str, list[str]] = {
    "Entry Level": [
        "senior", "snr", "principal", "lead", "staff", "manager", "head of",
        "director", "vp", "architect", "expert", "founding", "chief", "sr.",
    ],
    "Associate": ["principal", "director", "vp", "head of", "chief", "architect"],
    "Mid-Senior Level": ["intern", "junior", "entry level", "graduate"],
    "Director": ["intern", "junior", "associate", "entry level", "mid-level"],
    "Executive": ["intern", "junior", "associate", "mid-level", "senior", "lead"],
    "Internship": ["senior", "lead", "principal", "staff", "manager", "architect", "head of"],
}

_TAG_RE = re.compile(r"<[^>]*>?")
_WS_RE = re.compile(r"\s+")


def matches_level(title: str, level: str | None) -> bool:
    """False when the title carries a keyword excluded for *level*."""
    if not level:
        return True
    low = (title or "").lower()
    return not any(keyword in low for keyword in EXCLUSION_KEYWORDS.get(level, []))


def filter_by_level(jobs: list[JobListing], level: str | None) -> list[JobListing]:
    return [j for j in jobs if matches_level(j.title, level)]


def strip_html(text: str) -> str:
    return _TAG_RE.sub(" ", text or "")


def clean_description(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    """Strip tags, collapse whitespace, truncate with a trailing ellipsis."""
    collapsed = _WS_RE.sub(" ", strip_html(text)).strip()
    if len(collapsed) <= limit:
        return collapsed
    return collapsed[:limit] + "..."


def dedupe_by_url(jobs: list[JobListing]) -> list[JobListing]:
    seen: set[str] = set()
    out: list[JobListing] = []
    for job in jobs:
        key = job.dedupe_key
        if key in seen:
            continue
        seen.add(key)
        out.append(job)
    return out
