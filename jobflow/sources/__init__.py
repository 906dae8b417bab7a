from __future__ import annotations

import random
from concurrent.futures import ThreadPoolExecutor

from jobflow.log import get_logger
from jobflow.models import JobListing

from .base import JobSource
from .filters import clean_description, dedupe_by_url, filter_by_level, matches_level
from .jobicy import JobicySource
from .placeholder import placeholder_jobs
from .remotive import RemotiveSource

log = get_logger(__name__)

__all__ = [
    "JobSource", "RemotiveSource", "JobicySource",
    "get_sources", "aggregate_jobs", "placeholder_jobs", "matches_level",
]

MAX_RESULTS = 50


def get_sources(settings: dict | None = None) -> list[JobSource]:
    timeout = float((settings or {}).get("sources", {}).get("timeout", 15))
    return [RemotiveSource(timeout=timeout), JobicySource(timeout=timeout)]


def _fetch(source: JobSource, role: str | None, limit: int) -> list[JobListing]:
    try:
        results = source.fetch(role, limit=limit)
        log.info("[%s] returned %d jobs", source.name, len(results))
        return results
    except Exception as exc:
        log.error("[%s] FAILED: %s", source.name, exc)
        return []


def aggregate_jobs(
    role: str | None,
    experience_level: str | None = None,
    *,
    sources: list[JobSource] | None = None,
    limit: int = MAX_RESULTS,
    rng: random.Random | None = None,
) -> list[JobListing]:
    """Fetch every source in parallel, filter, clean, dedupe, shuffle and cap.

    Returns the single offline placeholder when nothing survives.
    """
    sources = sources if sources is not None else get_sources()
    rng = rng or random.Random()

    combined: list[JobListing] = []
    if sources:
        with ThreadPoolExecutor(max_workers=len(sources)) as pool:
            for batch in pool.map(lambda s: _fetch(s, role, limit), sources):
                combined.extend(batch)

    before = len(combined)
    combined = filter_by_level(combined, experience_level)
    if experience_level:
        log.info("Seniority filter (%s) kept %d/%d", experience_level, len(combined), before)

    for job in combined:
        job.description = clean_description(job.description)
    combined = dedupe_by_url(combined)

    if not combined:
        log.warning("No listings from any source — returning offline placeholder")
        return placeholder_jobs()

    rng.shuffle(combined)
    return combined[:limit]
