"""Data models for jobs, the candidate profile and AutoPilot logs."""
from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from typing import Any

from jobflow.log import get_logger

log = get_logger(__name__)

# Job statuses driven by AutoPilot
STATUS_NEW = "new"
STATUS_ANALYZING = "analyzing"
STATUS_APPLIED = "applied"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"

# Job statuses driven by the pipeline board
STATUS_INTERVIEWING = "interviewing"
STATUS_OFFER = "offer"
STATUS_REJECTED = "rejected"

AUTOPILOT_TERMINAL: frozenset[str] = frozenset({STATUS_APPLIED, STATUS_SKIPPED, STATUS_FAILED})
PIPELINE_STATUSES: tuple[str, ...] = (
    STATUS_APPLIED, STATUS_INTERVIEWING, STATUS_OFFER, STATUS_REJECTED,
)
ALL_STATUSES: frozenset[str] = frozenset(
    {STATUS_NEW, STATUS_ANALYZING} | AUTOPILOT_TERMINAL | set(PIPELINE_STATUSES)
)

LOG_TYPES: frozenset[str] = frozenset({"info", "success", "error", "action"})

EXPERIENCE_LEVELS: tuple[str, ...] = (
    "Entry Level", "Associate", "Mid-Senior Level", "Director", "Executive", "Internship",
)


def short_id() -> str:
    return uuid.uuid4().hex[:9]


def _known(cls, data: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass
class InterviewQuestion:
    question: str
    suggested_answer: str = ""
    key_points: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InterviewQuestion":
        return cls(
            question=str(data.get("question", "")),
            suggested_answer=str(data.get("suggested_answer") or data.get("suggestedAnswer") or ""),
            key_points=[str(p) for p in (data.get("key_points") or data.get("keyPoints") or [])],
        )


@dataclass
class JobListing:
    id: str
    title: str
    company: str
    location: str
    url: str
    description: str
    source: str = "unknown"
    status: str = STATUS_NEW
    posted_date: str | None = None
    match_score: int | None = None
    generated_cover_letter: str | None = None
    application_notes: str | None = None
    interview_prep: list[InterviewQuestion] | None = None

    @property
    def dedupe_key(self) -> str:
        """URL, or the id for listings without a real link ("#" or empty)."""
        return self.url if self.url and self.url != "#" else self.id

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JobListing":
        data = _known(cls, data)
        prep = data.get("interview_prep")
        if prep is not None:
            items = prep if isinstance(prep, list) else []
            data["interview_prep"] = [
                q if isinstance(q, InterviewQuestion) else InterviewQuestion.from_dict(q)
                for q in items
                if isinstance(q, (InterviewQuestion, dict))
            ] or None
        if data.get("status") not in ALL_STATUSES:
            data["status"] = STATUS_NEW
        data.setdefault("id", short_id())
        for key in ("title", "company", "location", "url", "description"):
            data.setdefault(key, "")
        return cls(**data)


@dataclass
class UserProfile:
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    experience_level: str = "Entry Level"
    target_roles: list[str] = field(default_factory=list)
    preferred_regions: list[str] = field(default_factory=list)
    job_types: list[str] = field(default_factory=list)
    remote_only: bool = False
    work_style: str = "Remote"
    salary_expectation: str = ""
    match_threshold: int = 60
    visa_sponsorship: bool = False
    notice_period: str = ""
    linkedin_url: str = ""
    portfolio_url: str = ""
    education: str = ""
    resume_text: str = ""
    skills: list[str] = field(default_factory=list)

    @property
    def locations(self) -> list[str]:
        """Search locations: explicit regions first, then the home location."""
        locs = list(self.preferred_regions)
        if self.location and self.location not in locs:
            locs.append(self.location)
        return locs

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "UserProfile":
        """Merge saved fields over defaults; missing or null lists become []."""
        merged = cls().to_dict()
        merged.update({k: v for k, v in _known(cls, data or {}).items() if v is not None})
        for key in ("target_roles", "preferred_regions", "job_types", "skills"):
            merged[key] = list(merged.get(key) or [])
        return cls(**merged)


@dataclass
class AutomationLog:
    message: str
    type: str = "info"
    id: str = field(default_factory=short_id)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "message": self.message,
            "type": self.type,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AutomationLog":
        ts = data.get("timestamp")
        timestamp = datetime.now(timezone.utc)
        if isinstance(ts, datetime):
            timestamp = ts
        elif isinstance(ts, str):
            try:
                timestamp = datetime.fromisoformat(ts.replace("Z", "+00:00"))
            except ValueError:
                log.warning("Log entry %s has unreadable timestamp %r, using now", data.get("id"), ts)
        kind = data.get("type", "info")
        return cls(
            id=str(data.get("id") or short_id()),
            timestamp=timestamp,
            message=str(data.get("message", "")),
            type=kind if kind in LOG_TYPES else "info",
        )


@dataclass
class MatchResult:
    match_score: int
    cover_letter: str = ""
    notes: str = ""


@dataclass
class LearningStep:
    skill: str
    resource: str = ""
    action_item: str = ""


@dataclass
class SkillGapAnalysis:
    missing_skills: list[str]
    learning_path: list[LearningStep]
    project_idea: str = ""


@dataclass
class ResumeOptimization:
    score: int
    missing_keywords: list[str]
    suggested_improvements: list[str]
    optimized_summary: str = ""


@dataclass
class Stats:
    total_found: int = 0
    applied: int = 0
    skipped: int = 0

    @property
    def pending(self) -> int:
        return max(self.total_found - self.applied - self.skipped, 0)

    @classmethod
    def from_jobs(cls, jobs: list[JobListing]) -> "Stats":
        return cls(
            total_found=len(jobs),
            applied=sum(1 for j in jobs if j.status == STATUS_APPLIED),
            skipped=sum(1 for j in jobs if j.status == STATUS_SKIPPED),
        )
