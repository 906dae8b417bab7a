import copy
import os

os.environ.setdefault("JOBFLOW_LOG_TO_FILE", "false")

import pytest

from jobflow.config import AI_MODE_STRICT, DEFAULT_SETTINGS
from jobflow.models import JobListing, UserProfile


class FakeClient:
    """Stands in for the LLM client: replays canned replies or raises."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts: list[str] = []

    def complete(self, prompt, *, json_mode=False):
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def settings():
    return copy.deepcopy(DEFAULT_SETTINGS)


@pytest.fixture
def strict_settings(settings):
    settings["ai"]["mode"] = AI_MODE_STRICT
    return settings


@pytest.fixture
def profile():
    return UserProfile(
        name="Ada Lovelace",
        email="ada@example.com",
        experience_level="Entry Level",
        target_roles=["Backend Engineer"],
        skills=["Python", "Django", "PostgreSQL", "Docker"],
        resume_text=(
            "Backend developer building Python services with Django and PostgreSQL. "
            "Deployed containers with Docker and wrote REST APIs."
        ),
    )


def _job(n, **overrides):
    data = {
        "id": f"job-{n}",
        "title": f"Backend Engineer {n}",
        "company": f"Company {n}",
        "location": "Remote",
        "url": f"https://jobs.example.com/{n}",
        "description": "Python Django PostgreSQL Docker REST APIs",
        "source": "Remotive",
    }
    data.update(overrides)
    return JobListing(**data)


@pytest.fixture
def job():
    return _job(1)


@pytest.fixture
def make_job():
    return _job


@pytest.fixture
def no_sleep(monkeypatch):
    """Record retry backoff sleeps instead of waiting."""
    slept: list[float] = []
    monkeypatch.setattr("jobflow.retry.time.sleep", slept.append)
    return slept
