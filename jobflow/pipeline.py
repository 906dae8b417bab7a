"""Manual application pipeline (the board after AutoPilot hands jobs over)."""
from __future__ import annotations

from typing import Protocol

from jobflow.errors import JobFlowError
from jobflow.log import get_logger
from jobflow.models import (
    PIPELINE_STATUSES,
    STATUS_INTERVIEWING,
    InterviewQuestion,
    JobListing,
    UserProfile,
)
from jobflow.state import AppState

log = get_logger(__name__)

COLUMN_LABELS: dict[str, str] = {
    "applied": "Applied",
    "interviewing": "Interviewing",
    "offer": "Offer",
    "rejected": "Rejected",
}


class InterviewCoach(Protocol):
    def generate_interview_questions(self, job: JobListing, profile: UserProfile) -> list[InterviewQuestion]: ...


def columns(state: AppState) -> dict[str, list[JobListing]]:
    return {status: [j for j in state.jobs if j.status == status] for status in PIPELINE_STATUSES}


def move_job(state: AppState, job_id: str, status: str, coach: InterviewCoach | None = None) -> JobListing:
    """Move a job to a board column.

    Moving to ``interviewing`` without stored prep generates interview
    questions; a failure there is logged and the move is kept.
    """
    if status not in PIPELINE_STATUSES:
        raise ValueError(f"Not a pipeline column: {status!r}")
    job = state.find_job(job_id)
    if job is None:
        raise KeyError(job_id)

    job.status = status
    state.changed()
    log.info("Pipeline: %s @ %s → %s", job.title, job.company, status)

    if status == STATUS_INTERVIEWING and not job.interview_prep and coach is not None:
        try:
            job.interview_prep = coach.generate_interview_questions(job, state.profile)
            state.changed()
        except JobFlowError as exc:
            log.error("Failed to auto-generate interview prep for %s: %s", job.company, exc)
    return job
