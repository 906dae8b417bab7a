"""Offline placeholder so discovery never comes back silently empty."""
from __future__ import annotations

from datetime import datetime, timezone

from jobflow.models import STATUS_NEW, JobListing


def placeholder_jobs() -> list[JobListing]:
    return [
        JobListing(
            id="mock-1",
            title="Frontend Developer (Offline Mode)",
            company="System Fallback",
            location="Remote",
            url="#",
            description=(
                "External APIs are currently unreachable. Please check your internet "
                "connection or try again later."
            ),
            source="System",
            status=STATUS_NEW,
            posted_date=datetime.now(timezone.utc).isoformat(),
        )
    ]
