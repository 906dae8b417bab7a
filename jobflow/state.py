"""In-memory application state shared by the UI, the CLI and AutoPilot."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from jobflow.log import get_logger
from jobflow.models import (
    STATUS_ANALYZING,
    STATUS_NEW,
    AutomationLog,
    JobListing,
    Stats,
    UserProfile,
    short_id,
)

log = get_logger(__name__)

_LOG_LEVELS = {"info": 20, "action": 20, "success": 20, "error": 40}


@dataclass
class AppState:
    profile: UserProfile = field(default_factory=UserProfile)
    jobs: list[JobListing] = field(default_factory=list)
    logs: list[AutomationLog] = field(default_factory=list)
    on_change: Callable[["AppState"], None] | None = field(default=None, repr=False, compare=False)

    @property
    def stats(self) -> Stats:
        return Stats.from_jobs(self.jobs)

    def changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    def add_log(self, message: str, kind: str = "info") -> AutomationLog:
        entry = AutomationLog(message=message, type=kind)
        self.logs.append(entry)
        log.log(_LOG_LEVELS.get(kind, 20), "[autopilot:%s] %s", kind, message)
        return entry

    def find_job(self, job_id: str) -> JobListing | None:
        for job in self.jobs:
            if job.id == job_id:
                return job
        return None

    def add_jobs_to_queue(self, new_jobs: list[JobListing]) -> list[JobListing]:
        """Append listings whose URL is not already queued; returns the added ones."""
        existing = {j.dedupe_key for j in self.jobs}
        added: list[JobListing] = []
        for job in new_jobs:
            key = job.dedupe_key
            if key in existing:
                continue
            existing.add(key)
            added.append(job)
        self.jobs.extend(added)
        self.add_log(f"Added {len(added)} new jobs to queue.", "info")
        self.changed()
        return added

    def add_manual_job(self, title: str, company: str, url: str = "") -> JobListing | None:
        if not title.strip() or not company.strip():
            raise ValueError("Title and company are required")
        job = JobListing(
            id=short_id(),
            title=title.strip(),
            company=company.strip(),
            location=(self.profile.locations or ["Remote"])[0],
            url=url.strip() or "#",
            description="Manually added job. Auto-pilot will attempt to infer details.",
            source="Manual Entry",
            status=STATUS_NEW,
            posted_date=datetime.now(timezone.utc).isoformat(),
        )
        added = self.add_jobs_to_queue([job])
        return added[0] if added else None

    def remove_job(self, job_id: str) -> bool:
        before = len(self.jobs)
        self.jobs = [j for j in self.jobs if j.id != job_id]
        removed = len(self.jobs) != before
        if removed:
            self.changed()
        return removed

    def recover_interrupted(self) -> int:
        """Put records left ``analyzing`` by a killed session back to ``new``."""
        count = 0
        for job in self.jobs:
            if job.status == STATUS_ANALYZING:
                job.status = STATUS_NEW
                count += 1
        if count:
            log.info("Re-queued %d job(s) interrupted mid-analysis", count)
        return count
