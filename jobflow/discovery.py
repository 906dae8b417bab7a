"""Discovery: gather candidate listings from the AI search and the job boards."""
from __future__ import annotations

import random
from typing import Any

from jobflow.ai import AIService
from jobflow.errors import JobFlowError
from jobflow.log import get_logger
from jobflow.models import JobListing, UserProfile
from jobflow.sources import JobSource, aggregate_jobs, get_sources
from jobflow.sources.filters import dedupe_by_url, filter_by_level

log = get_logger(__name__)


def discover(
    profile: UserProfile,
    ai: AIService | None = None,
    *,
    settings: dict[str, Any] | None = None,
    sources: list[JobSource] | None = None,
    use_ai: bool = True,
    limit: int = 50,
    rng: random.Random | None = None,
) -> list[JobListing]:
    """Search for the profile's first target role.

    AI search results come first, then job-board listings. Both go through
    the seniority filter. An AI search failure is logged and the boards are
    still queried. Boards are built from *settings* unless *sources* is given.
    """
    if not profile.target_roles:
        raise ValueError("Please define target roles in your profile first.")

    role = profile.target_roles[0]
    if sources is None:
        sources = get_sources(settings)
    found: list[JobListing] = []

    if use_ai and ai is not None and ai.online:
        try:
            found.extend(filter_by_level(ai.search_jobs(profile), profile.experience_level))
        except JobFlowError as exc:
            log.warning("AI search failed (%s) — continuing with job boards", exc)

    boards = aggregate_jobs(role, profile.experience_level, sources=sources, limit=limit, rng=rng)
    if found and all(j.source == "System" for j in boards):
        boards = []
    found.extend(boards)

    results = dedupe_by_url(found)[:limit]
    log.info("Discovery for %r (%s): %d listings", role, profile.experience_level, len(results))
    return results
