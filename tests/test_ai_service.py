import pytest

from jobflow.ai import AIService, heuristics
from jobflow.errors import AIServiceError, MissingCredentialsError, RateLimitError
from jobflow.models import MatchResult

from conftest import FakeClient


def test_parses_fenced_match(settings, job, profile):
    client = FakeClient('```json\n{"matchScore": 87, "coverLetter": "Dear Acme", "notes": "Strong fit"}\n```')
    result = AIService(settings, client=client).analyze_and_apply(job, profile)
    assert result == MatchResult(match_score=87, cover_letter="Dear Acme", notes="Strong fit")
    assert job.title in client.prompts[0]


@pytest.mark.parametrize("raw, expected", [("150", 100), ("-4", 0), ('"72.6"', 73)])
def test_score_is_clamped(settings, job, profile, raw, expected):
    client = FakeClient('{"matchScore": %s, "coverLetter": "", "notes": ""}' % raw)
    assert AIService(settings, client=client).analyze_and_apply(job, profile).match_score == expected


def test_missing_key_permissive_runs_offline(settings, job, profile):
    ai = AIService(settings, api_key="")
    assert not ai.online
    assert ai.analyze_and_apply(job, profile) == heuristics.match(job, profile)


def test_missing_key_strict_refuses_to_start(strict_settings):
    with pytest.raises(MissingCredentialsError, match="LLM_API_KEY"):
        AIService(strict_settings, api_key="")


@pytest.mark.parametrize("error", [RateLimitError("429 quota"), AIServiceError("connection reset")])
def test_permissive_falls_back_on_transport_errors(settings, job, profile, error):
    ai = AIService(settings, client=FakeClient(error))
    assert ai.analyze_and_apply(job, profile) == heuristics.match(job, profile)


def test_strict_propagates_rate_limit(strict_settings, job, profile):
    ai = AIService(strict_settings, client=FakeClient(RateLimitError("429 quota")))
    with pytest.raises(RateLimitError):
        ai.analyze_and_apply(job, profile)


@pytest.mark.parametrize("reply", ["I cannot help with that.", '{"matchScore": "high"}', "[1, 2]"])
def test_malformed_output_falls_back_even_when_strict(strict_settings, job, profile, reply):
    ai = AIService(strict_settings, client=FakeClient(reply))
    assert ai.analyze_and_apply(job, profile) == heuristics.match(job, profile)


def test_search_jobs_fills_defaults(settings, profile):
    client = FakeClient('Here you go: [{"title": "Data Engineer", "company": "Acme"}, "junk"]')
    jobs = AIService(settings, client=client).search_jobs(profile)
    assert len(jobs) == 1
    job = jobs[0]
    assert (job.title, job.company, job.location, job.url) == ("Data Engineer", "Acme", "Remote", "#")
    assert job.description == "No description available"
    assert job.source == "AI Search"
    assert job.status == "new"


def test_search_jobs_offline_is_empty(settings, profile):
    assert AIService(settings, api_key="").search_jobs(profile) == []


def test_suggest_roles(settings):
    ai = AIService(settings, client=FakeClient('["Backend Engineer", "Platform Engineer"]'))
    assert ai.suggest_roles("Django and Kubernetes") == ["Backend Engineer", "Platform Engineer"]
    offline = AIService(settings, api_key="")
    assert offline.suggest_roles("Django and Kubernetes") == heuristics.infer_roles("Django and Kubernetes")


def test_interview_questions_accept_wrapped_list(settings, job, profile):
    client = FakeClient(
        '{"questions": [{"question": "Why Django?", "suggestedAnswer": "ORM", "keyPoints": ["admin"]},'
        ' {"suggestedAnswer": "no question"}]}'
    )
    questions = AIService(settings, client=client).generate_interview_questions(job, profile)
    assert len(questions) == 1
    assert questions[0].question == "Why Django?"
    assert questions[0].suggested_answer == "ORM"
    assert questions[0].key_points == ["admin"]


def test_resume_optimization(settings, job, profile):
    client = FakeClient(
        '{"score": 81, "missingKeywords": ["kubernetes"], '
        '"suggestedImprovements": ["Add metrics"], "optimizedSummary": "Backend dev"}'
    )
    result = AIService(settings, client=client).analyze_resume_for_job(job, profile)
    assert result.score == 81
    assert result.missing_keywords == ["kubernetes"]
    assert result.suggested_improvements == ["Add metrics"]
    assert result.optimized_summary == "Backend dev"


def test_skill_gap(settings, profile):
    client = FakeClient(
        '{"missingSkills": ["Go"], "learningPath": '
        '[{"skill": "Go", "resource": "Tour of Go", "actionItem": "Write a CLI"}], '
        '"projectIdea": "A job tracker in Go"}'
    )
    gap = AIService(settings, client=client).analyze_skill_gap(profile)
    assert gap.missing_skills == ["Go"]
    assert gap.learning_path[0].action_item == "Write a CLI"
    assert gap.project_idea == "A job tracker in Go"


def test_networking_message(settings, profile):
    ai = AIService(settings, client=FakeClient("  Hi Grace, let's connect.  "))
    assert ai.generate_networking_message("linkedin", "Grace", "Acme", "Backend Engineer", profile) == (
        "Hi Grace, let's connect."
    )
    offline = AIService(settings, api_key="")
    note = offline.generate_networking_message("linkedin", "Grace", "Acme", "Backend Engineer", profile)
    assert len(note) <= 300 and "Acme" in note


def test_parse_resume_offline(settings):
    text = b"Ada Lovelace\nada@example.com\nPython, Docker and SQL on AWS\n"
    parsed = AIService(settings, api_key="").parse_resume(text, "text/plain")
    assert parsed["name"] == "Ada Lovelace"
    assert parsed["email"] == "ada@example.com"
    assert {"Python", "Docker", "SQL", "AWS"} <= set(parsed["skills"])


def test_parse_resume_prefers_model_fields(settings):
    client = FakeClient('{"name": "Ada L.", "email": "", "phone": "", "skills": ["Python", "Go"]}')
    parsed = AIService(settings, client=client).parse_resume(b"Ada Lovelace\nada@example.com", "text/plain")
    assert parsed["name"] == "Ada L."
    assert parsed["email"] == "ada@example.com"
    assert parsed["skills"] == ["Python", "Go"]


def test_parse_resume_rejects_empty_and_unsupported(settings):
    ai = AIService(settings, api_key="")
    with pytest.raises(ValueError):
        ai.parse_resume(b"   ", "text/plain")
    with pytest.raises(ValueError, match="Unsupported"):
        ai.parse_resume(b"data", "image/png")


def test_client_lost_mid_session_falls_back(settings, job, profile):
    ai = AIService(settings, client=FakeClient('{"matchScore": 90}'))
    ai.client = None
    with pytest.raises(AIServiceError, match="No LLM client"):
        ai._complete("hello")
    assert ai.analyze_and_apply(job, profile) == heuristics.match(job, profile)
