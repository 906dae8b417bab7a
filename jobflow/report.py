"""Export the job list as CSV and summarize progress as markdown."""
from __future__ import annotations

import csv
import io
from datetime import datetime, timezone
from pathlib import Path

from jobflow.config import REPORTS_DIR
from jobflow.log import get_logger
from jobflow.models import STATUS_APPLIED, JobListing, Stats

log = get_logger(__name__)

CSV_HEADERS: list[str] = ["Company", "Title", "Location", "Status", "Match Score", "Date"]


def _cell(text: str | None) -> str:
    return (text or "").replace(",", "")


def _date(job: JobListing) -> str:
    if job.posted_date:
        try:
            return datetime.fromisoformat(job.posted_date.replace("Z", "+00:00")).strftime("%Y-%m-%d")
        except ValueError:
            return _cell(job.posted_date)[:10]
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def jobs_to_csv(jobs: list[JobListing]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for job in jobs:
        writer.writerow([
            _cell(job.company),
            _cell(job.title),
            _cell(job.location),
            job.status,
            job.match_score or 0,
            _date(job),
        ])
    return buf.getvalue()


def build_summary(jobs: list[JobListing], top: int = 10) -> str:
    stats = Stats.from_jobs(jobs)
    now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    lines = [
        f"# JobFlow Report — {now}",
        "",
        f"- **Total found:** {stats.total_found}",
        f"- **Applied:** {stats.applied}",
        f"- **Skipped:** {stats.skipped}",
        f"- **Pending:** {stats.pending}",
        "",
    ]
    matched = sorted(
        (j for j in jobs if j.status == STATUS_APPLIED),
        key=lambda j: -(j.match_score or 0),
    )[:top]
    if matched:
        lines += ["## Top matches", "", "| Score | Role | Company | Link |", "|---|---|---|---|"]
        for j in matched:
            lines.append(f"| {j.match_score}% | {j.title} | {j.company} | [open]({j.url}) |")
    else:
        lines.append("_No matched jobs yet — start AutoPilot to analyze the queue._")
    return "\n".join(lines) + "\n"


def write_report(jobs: list[JobListing], directory: Path | None = None) -> tuple[Path, Path]:
    """Write ``jobflow_<date>.md`` and ``jobflow_applications.csv``; returns both paths."""
    directory = directory or REPORTS_DIR
    directory.mkdir(parents=True, exist_ok=True)
    md_path = directory / f"jobflow_{datetime.now(timezone.utc).strftime('%Y-%m-%d')}.md"
    csv_path = directory / "jobflow_applications.csv"
    md_path.write_text(build_summary(jobs), encoding="utf-8")
    csv_path.write_text(jobs_to_csv(jobs), encoding="utf-8")
    log.info("Report written → %s", md_path.name)
    return md_path, csv_path
