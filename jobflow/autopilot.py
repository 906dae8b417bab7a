"""AutoPilot: the automation queue processor.

Walks the job list one record at a time. For each record in ``new`` status
it waits a fixed delay (rate-limit margin), asks the AI facade for a match,
and moves the record ``new → analyzing → applied | skipped | failed``.
Only one record is ever ``analyzing``. The loop runs while ``is_running``
is set and stops by itself once no ``new`` record is left.

Two ways to drive it:

* :meth:`AutoPilot.step` does one iteration and returns. The Streamlit view
  calls it once per rerun so the UI stays responsive between records.
* :meth:`AutoPilot.run` loops ``step`` with ``tick_interval`` pauses until
  the queue drains or :meth:`pause` is called (CLI).
"""
from __future__ import annotations

import time
from typing import Any, Callable, Protocol

from jobflow.log import get_logger
from jobflow.models import (
    STATUS_ANALYZING,
    STATUS_APPLIED,
    STATUS_FAILED,
    STATUS_NEW,
    STATUS_SKIPPED,
    JobListing,
    MatchResult,
    UserProfile,
)
from jobflow.state import AppState

log = get_logger(__name__)

MATCH_THRESHOLD = 60
COMPLETED_MESSAGE = "Queue completed. Pausing AutoPilot."

# step() outcomes
IDLE = "idle"
COMPLETED = "completed"
PROCESSED = "processed"
BUSY = "busy"


class Matcher(Protocol):
    def analyze_and_apply(self, job: JobListing, profile: UserProfile) -> MatchResult: ...


class AutoPilot:
    def __init__(
        self,
        state: AppState,
        ai: Matcher,
        *,
        analysis_delay: float = 10.0,
        tick_interval: float = 0.5,
        threshold: int = MATCH_THRESHOLD,
        sleep: Callable[[float], None] = time.sleep,
        on_complete: Callable[[str], None] | None = None,
        persist: Callable[[AppState], None] | None = None,
    ) -> None:
        self.state = state
        self.ai = ai
        self.analysis_delay = analysis_delay
        self.tick_interval = tick_interval
        self.threshold = threshold
        self._sleep = sleep
        self.on_complete = on_complete
        self.persist = persist
        self.is_running = False
        self._in_flight: str | None = None

    @classmethod
    def from_settings(cls, state: AppState, ai: Matcher, settings: dict[str, Any], **kwargs: Any) -> "AutoPilot":
        cfg = settings.get("autopilot", {})
        return cls(
            state,
            ai,
            analysis_delay=float(cfg.get("analysis_delay", 10.0)),
            tick_interval=float(cfg.get("tick_interval", 0.5)),
            threshold=int(cfg.get("match_threshold", MATCH_THRESHOLD)),
            **kwargs,
        )

    # ── controls ────────────────────────────────────────────────────────

    def start(self) -> None:
        if not self.is_running:
            log.info("AutoPilot started — %d job(s) queued", self.queued_count())
        self.is_running = True

    def pause(self) -> None:
        """Takes effect at the next loop check; an in-flight call still finishes."""
        if self.is_running:
            log.info("AutoPilot paused")
        self.is_running = False

    def queued_count(self) -> int:
        return sum(1 for j in self.state.jobs if j.status == STATUS_NEW)

    # ── loop ────────────────────────────────────────────────────────────

    def next_job(self) -> JobListing | None:
        for job in self.state.jobs:
            if job.status == STATUS_NEW:
                return job
        return None

    def step(self) -> str:
        if not self.is_running:
            return IDLE
        if self._in_flight is not None:
            return BUSY

        job = self.next_job()
        if job is None:
            if any(j.status == STATUS_ANALYZING for j in self.state.jobs):
                return BUSY
            self.is_running = False
            self.state.add_log(COMPLETED_MESSAGE, "success")
            self._save()
            if self.on_complete is not None:
                self.on_complete("AutoPilot Completed!")
            return COMPLETED

        self._process(job)
        return PROCESSED

    def run(self, max_steps: int | None = None) -> int:
        """Loop until the queue drains or the run is paused; returns records processed."""
        self.start()
        processed = 0
        steps = 0
        while self.is_running:
            outcome = self.step()
            steps += 1
            if outcome == PROCESSED:
                processed += 1
            if max_steps is not None and steps >= max_steps:
                break
            if self.is_running:
                self._sleep(self.tick_interval)
        return processed

    # ── per-record work ─────────────────────────────────────────────────

    def _process(self, job: JobListing) -> None:
        job_id, title, company = job.id, job.title, job.company
        job.status = STATUS_ANALYZING
        self._in_flight = job_id
        self.state.add_log(f"Analyzing {title} @ {company}...", "action")
        self._save()

        try:
            self._sleep(self.analysis_delay)
            result = self.ai.analyze_and_apply(job, self.state.profile)
        except Exception as exc:
            log.exception("Analysis failed for %s @ %s", title, company)
            current = self.state.find_job(job_id)
            if current is not None:
                current.status = STATUS_FAILED
                current.application_notes = "AI Error"
            self.state.add_log(f"Error processing {company}", "error")
            self._finish()
            return

        # The record may have been removed from the board while the call ran.
        current = self.state.find_job(job_id)
        if current is None:
            self.state.add_log(f"{title} @ {company} was removed during analysis — result discarded", "info")
            self._finish()
            return

        score = result.match_score
        current.match_score = score
        if score >= self.threshold:
            current.status = STATUS_APPLIED
            current.generated_cover_letter = result.cover_letter
            current.application_notes = result.notes
            self.state.add_log(f"✓ Matched {company} ({score}%)", "success")
        else:
            current.status = STATUS_SKIPPED
            current.application_notes = f"Low Match: {score}%. {result.notes}"
            self.state.add_log(f"✕ Skipped {company} ({score}%)", "info")
        self._finish()

    def _finish(self) -> None:
        self._in_flight = None
        self._save()

    def _save(self) -> None:
        if self.persist is not None:
            try:
                self.persist(self.state)
            except OSError as exc:
                log.error("Could not persist AutoPilot progress: %s", exc)
