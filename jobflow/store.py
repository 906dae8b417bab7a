"""Persist the whole app state as one JSON blob with advisory file locking."""
from __future__ import annotations

import fcntl
import json
import os
from pathlib import Path
from typing import Any

from jobflow.config import STATE_PATH
from jobflow.log import get_logger
from jobflow.models import AutomationLog, JobListing, UserProfile
from jobflow.state import AppState

log = get_logger(__name__)

SCHEMA_VERSION = 1
MAX_PERSISTED_LOGS = 50


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


def serialize(state: AppState, max_logs: int = MAX_PERSISTED_LOGS) -> dict[str, Any]:
    """Blob layout: ``{version, profile, jobs, logs}``; only the newest logs are kept."""
    recent = state.logs[-max_logs:] if max_logs > 0 else []
    return {
        "version": SCHEMA_VERSION,
        "profile": state.profile.to_dict(),
        "jobs": [j.to_dict() for j in state.jobs],
        "logs": [entry.to_dict() for entry in recent],
    }


def _migrate(data: dict[str, Any]) -> dict[str, Any]:
    version = data.get("version", 0)
    if version == 0:
        # Pre-versioned blobs stored camelCase keys straight from the UI.
        renames = {
            "experienceLevel": "experience_level", "targetRoles": "target_roles",
            "preferredRegions": "preferred_regions", "jobTypes": "job_types",
            "remoteOnly": "remote_only", "workStyle": "work_style",
            "salaryExpectation": "salary_expectation", "matchThreshold": "match_threshold",
            "visaSponsorship": "visa_sponsorship", "noticePeriod": "notice_period",
            "linkedinUrl": "linkedin_url", "portfolioUrl": "portfolio_url",
            "resumeText": "resume_text", "postedDate": "posted_date",
            "matchScore": "match_score", "generatedCoverLetter": "generated_cover_letter",
            "applicationNotes": "application_notes", "interviewPrep": "interview_prep",
        }

        def rename(d: dict[str, Any]) -> dict[str, Any]:
            return {renames.get(k, k): v for k, v in d.items()}

        data = {
            "version": SCHEMA_VERSION,
            "profile": rename(data.get("profile") or {}),
            "jobs": [rename(j) for j in data.get("jobs") or [] if isinstance(j, dict)],
            "logs": data.get("logs") or [],
        }
        log.info("Migrated state blob from v0 to v%d", SCHEMA_VERSION)
    elif version > SCHEMA_VERSION:
        log.warning("State blob version %s is newer than supported v%d", version, SCHEMA_VERSION)
    return data


def deserialize(data: dict[str, Any]) -> AppState:
    data = _migrate(data)
    return AppState(
        profile=UserProfile.from_dict(data.get("profile")),
        jobs=[JobListing.from_dict(j) for j in data.get("jobs") or [] if isinstance(j, dict)],
        logs=[AutomationLog.from_dict(e) for e in data.get("logs") or [] if isinstance(e, dict)],
    )


class StateStore:
    def __init__(self, path: Path | None = None, max_logs: int = MAX_PERSISTED_LOGS) -> None:
        self.path = path or STATE_PATH
        self.max_logs = max_logs

    def load(self) -> AppState:
        """Read the blob; a missing or corrupt file yields empty state."""
        if not self.path.exists():
            return AppState()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                _lock(f, exclusive=False)
                data = json.load(f)
                _unlock(f)
            if not isinstance(data, dict):
                raise ValueError(f"unexpected state blob type {type(data).__name__}")
            state = deserialize(data)
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            log.error("Load error for %s: %s — starting fresh", self.path.name, exc)
            return AppState()
        state.recover_interrupted()
        log.debug("Loaded %d jobs, %d logs", len(state.jobs), len(state.logs))
        return state

    def save(self, state: AppState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            _lock(f)
            json.dump(serialize(state, self.max_logs), f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
            _unlock(f)
        os.replace(tmp, self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
        log.info("Cleared saved state %s", self.path.name)
