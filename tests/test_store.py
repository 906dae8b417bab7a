import json
from datetime import datetime

from jobflow.models import UserProfile
from jobflow.state import AppState
from jobflow.store import SCHEMA_VERSION, StateStore


def test_only_newest_logs_are_persisted(tmp_path, make_job):
    store = StateStore(tmp_path / "state.json")
    state = AppState(profile=UserProfile(name="Ada"), jobs=[make_job(1)])
    for i in range(120):
        state.add_log(f"log {i}")

    store.save(state)
    loaded = store.load()

    assert len(state.logs) == 120
    assert [e.message for e in loaded.logs] == [f"log {i}" for i in range(70, 120)]
    assert loaded.logs[-1].timestamp == state.logs[-1].timestamp
    assert isinstance(loaded.logs[0].timestamp, datetime)
    assert loaded.profile.name == "Ada"
    assert loaded.jobs == state.jobs


def test_blob_layout(tmp_path):
    store = StateStore(tmp_path / "state.json")
    store.save(AppState())
    data = json.loads((tmp_path / "state.json").read_text())
    assert set(data) == {"version", "profile", "jobs", "logs"}
    assert data["version"] == SCHEMA_VERSION


def test_missing_or_corrupt_file_gives_empty_state(tmp_path):
    path = tmp_path / "state.json"
    assert StateStore(path).load().jobs == []

    path.write_text("{not json")
    state = StateStore(path).load()
    assert state.jobs == [] and state.logs == []

    path.write_text("[1, 2, 3]")
    assert StateStore(path).load().jobs == []

    path.write_bytes(b'{"profile": {"name": "\xff\xfe"}}')
    assert StateStore(path).load().profile.name == ""

    path.write_text('{"version": 1, "profile": "not a mapping", "jobs": [], "logs": []}')
    assert StateStore(path).load().jobs == []


def test_bad_fields_degrade_without_losing_state(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({
        "version": 1,
        "profile": {"name": "Ada"},
        "jobs": [{"id": "a", "title": "T", "company": "C", "url": "https://x/a",
                  "status": "applied", "interview_prep": "oops"}],
        "logs": [{"id": "l1", "timestamp": "yesterday", "message": "hi", "type": "info"}],
    }))

    state = StateStore(path).load()

    assert state.profile.name == "Ada"
    assert state.jobs[0].status == "applied"
    assert state.jobs[0].interview_prep is None
    assert state.logs[0].message == "hi"
    assert isinstance(state.logs[0].timestamp, datetime)


def test_interrupted_analysis_is_requeued(tmp_path, make_job):
    store = StateStore(tmp_path / "state.json")
    store.save(AppState(jobs=[make_job(1, status="analyzing"), make_job(2, status="applied")]))

    loaded = store.load()

    assert [j.status for j in loaded.jobs] == ["new", "applied"]


def test_migrates_camel_case_blob(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({
        "profile": {
            "name": "Ada",
            "targetRoles": ["QA Engineer"],
            "experienceLevel": "Associate",
            "skills": None,
        },
        "jobs": [{
            "id": "j1", "title": "QA Engineer", "company": "Acme", "location": "Remote",
            "url": "https://acme.example/qa", "description": "Testing", "status": "applied",
            "matchScore": 75, "generatedCoverLetter": "Dear Acme",
        }],
        "logs": [{
            "id": "l1", "timestamp": "2024-05-01T12:00:00+00:00",
            "message": "✓ Matched Acme (75%)", "type": "success",
        }],
    }))

    state = StateStore(path).load()

    assert state.profile.target_roles == ["QA Engineer"]
    assert state.profile.experience_level == "Associate"
    assert state.profile.skills == []
    job = state.jobs[0]
    assert (job.status, job.match_score, job.generated_cover_letter) == ("applied", 75, "Dear Acme")
    assert state.logs[0].timestamp.year == 2024


def test_unknown_status_becomes_new(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({
        "version": 1, "profile": {}, "logs": [],
        "jobs": [{"id": "j1", "title": "T", "company": "C", "location": "", "url": "u",
                  "description": "", "status": "bogus"}],
    }))
    assert StateStore(path).load().jobs[0].status == "new"


def test_clear(tmp_path):
    store = StateStore(tmp_path / "state.json")
    store.save(AppState())
    store.clear()
    assert not (tmp_path / "state.json").exists()
    store.clear()
