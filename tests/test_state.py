import pytest

from jobflow.models import UserProfile
from jobflow.state import AppState


def test_add_jobs_dedupes_by_url(make_job):
    state = AppState(jobs=[make_job(1), make_job(2)])
    batch = [make_job(1), make_job(3), make_job(3), make_job(4)]

    added = state.add_jobs_to_queue(batch)

    assert [j.id for j in added] == ["job-3", "job-4"]
    assert len(state.jobs) == 4
    assert state.logs[-1].message == "Added 2 new jobs to queue."


def test_adding_nothing_still_logs(make_job):
    state = AppState(jobs=[make_job(1)])
    assert state.add_jobs_to_queue([make_job(1)]) == []
    assert state.logs[-1].message == "Added 0 new jobs to queue."


def test_manual_jobs_without_links_do_not_collide():
    state = AppState(profile=UserProfile(location="Berlin"))
    first = state.add_manual_job("Backend Engineer", "Acme")
    second = state.add_manual_job("Data Engineer", "Globex")

    assert first is not None and second is not None
    assert first.id != second.id
    assert first.url == "#"
    assert first.location == "Berlin"
    assert first.source == "Manual Entry"
    assert first.status == "new"
    assert len(state.jobs) == 2


def test_manual_job_requires_title_and_company():
    with pytest.raises(ValueError, match="required"):
        AppState().add_manual_job("  ", "Acme")


def test_stats_and_change_callback(make_job):
    seen = []
    state = AppState(
        jobs=[make_job(1, status="applied"), make_job(2, status="skipped"), make_job(3)],
        on_change=seen.append,
    )
    stats = state.stats
    assert (stats.total_found, stats.applied, stats.skipped, stats.pending) == (3, 1, 1, 1)

    assert state.remove_job("job-3")
    assert not state.remove_job("missing")
    assert seen == [state]
