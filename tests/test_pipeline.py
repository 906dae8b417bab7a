import pytest

from jobflow.errors import AIServiceError
from jobflow.models import InterviewQuestion
from jobflow.pipeline import columns, move_job
from jobflow.state import AppState


class Coach:
    def __init__(self, error=None):
        self.calls = 0
        self.error = error

    def generate_interview_questions(self, job, profile):
        self.calls += 1
        if self.error:
            raise self.error
        return [InterviewQuestion(question=f"Why {job.company}?")]


def test_columns_group_pipeline_statuses(make_job):
    state = AppState(jobs=[
        make_job(1, status="applied"),
        make_job(2, status="offer"),
        make_job(3, status="skipped"),
        make_job(4, status="applied"),
    ])
    board = columns(state)
    assert list(board) == ["applied", "interviewing", "offer", "rejected"]
    assert [j.id for j in board["applied"]] == ["job-1", "job-4"]
    assert board["interviewing"] == []


def test_moving_to_interviewing_generates_prep_once(make_job):
    state = AppState(jobs=[make_job(1, status="applied")])
    coach = Coach()

    job = move_job(state, "job-1", "interviewing", coach)
    assert job.status == "interviewing"
    assert job.interview_prep[0].question == "Why Company 1?"

    move_job(state, "job-1", "applied", coach)
    move_job(state, "job-1", "interviewing", coach)
    assert coach.calls == 1


def test_prep_failure_keeps_the_move(make_job):
    state = AppState(jobs=[make_job(1, status="applied")])
    job = move_job(state, "job-1", "interviewing", Coach(error=AIServiceError("down")))
    assert job.status == "interviewing"
    assert job.interview_prep is None


def test_rejects_unknown_column_or_job(make_job):
    state = AppState(jobs=[make_job(1, status="applied")])
    with pytest.raises(ValueError):
        move_job(state, "job-1", "analyzing")
    with pytest.raises(KeyError):
        move_job(state, "nope", "offer")
