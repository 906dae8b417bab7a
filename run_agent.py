#!/usr/bin/env python3
"""Headless JobFlow runner: discover jobs, queue them, and run AutoPilot.

    python run_agent.py                 # discover + process queue
    python run_agent.py --no-discover   # only drain the saved queue
    python run_agent.py --delay 1.5     # shorter wait between LLM calls
"""
from __future__ import annotations

import argparse
import signal
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobflow.log import get_logger, set_level

log = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run JobFlow AutoPilot headless")
    parser.add_argument("--no-discover", action="store_true", help="skip job discovery")
    parser.add_argument("--no-ai-search", action="store_true", help="use job boards only")
    parser.add_argument("--delay", type=float, default=None, help="seconds to wait before each analysis")
    parser.add_argument("--report", action="store_true", help="write markdown + CSV report when done")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        set_level("DEBUG")

    from jobflow.ai import AIService
    from jobflow.autopilot import AutoPilot
    from jobflow.config import ensure_dirs, load_settings
    from jobflow.discovery import discover
    from jobflow.errors import MissingCredentialsError
    from jobflow.report import write_report
    from jobflow.store import StateStore

    ensure_dirs()
    settings = load_settings()
    if args.delay is not None:
        settings["autopilot"]["analysis_delay"] = args.delay

    try:
        ai = AIService(settings)
    except MissingCredentialsError as exc:
        log.error("%s", exc)
        return 2

    store = StateStore(max_logs=int(settings["storage"]["max_logs"]))
    state = store.load()

    if not args.no_discover:
        if not state.profile.target_roles:
            log.error("No target roles in profile — set them in the Profile page first")
            return 1
        found = discover(
            state.profile, ai,
            settings=settings,
            use_ai=not args.no_ai_search,
            limit=int(settings["sources"]["limit"]),
        )
        state.add_jobs_to_queue(found)
        store.save(state)

    autopilot = AutoPilot.from_settings(
        state, ai, settings,
        persist=store.save,
        on_complete=lambda msg: log.info("%s", msg),
    )

    def _stop(signum, frame) -> None:
        log.info("Interrupt received — pausing after the current job")
        autopilot.pause()

    signal.signal(signal.SIGINT, _stop)

    processed = autopilot.run()
    store.save(state)

    stats = state.stats
    log.info("Run complete.")
    log.info("  Processed this run: %d", processed)
    log.info("  Total found: %d", stats.total_found)
    log.info("  Applied: %d", stats.applied)
    log.info("  Skipped: %d", stats.skipped)
    if args.report:
        md_path, csv_path = write_report(state.jobs)
        log.info("  Report: %s", md_path)
        log.info("  CSV: %s", csv_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
