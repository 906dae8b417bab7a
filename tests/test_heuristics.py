from jobflow.ai import heuristics
from jobflow.models import UserProfile


def test_match_is_deterministic(job, profile):
    first = heuristics.match(job, profile)
    second = heuristics.match(job, profile)
    assert first == second
    assert first.notes.startswith("Offline estimate")
    assert job.company in first.cover_letter


def test_score_bounds():
    assert heuristics.match_score("", "python django kubernetes") == heuristics.MIN_SCORE
    assert heuristics.match_score("python django kubernetes", "python django kubernetes") == heuristics.MAX_SCORE
    assert heuristics.match_score("anything", "") == heuristics.MIN_SCORE


def test_partial_overlap():
    # 1 of 4 keywords present: 25 + 30
    assert heuristics.match_score("python", "python golang rust haskell") == 55


def test_extract_keywords_skips_stop_words():
    assert heuristics.extract_keywords("The python team and python with react experience") == ["python", "react"]


def test_infer_roles():
    roles = heuristics.infer_roles("Built React dashboards backed by Node services")
    assert roles[:2] == ["Frontend Developer", "Backend Engineer"]
    assert heuristics.infer_roles("Ceramics and pottery") == ["Software Engineer"]


def test_interview_questions_capped(job, profile):
    questions = heuristics.interview_questions(job, profile)
    assert len(questions) == 5
    assert all(q.question and q.key_points for q in questions)


def test_skill_gap_excludes_owned_skills():
    profile = UserProfile(target_roles=["Backend Engineer"], skills=["Docker", "PostgreSQL"])
    gap = heuristics.skill_gap(profile)
    assert gap.missing_skills == ["System Design", "REST API Design", "Observability"]
    assert [step.skill for step in gap.learning_path] == gap.missing_skills


def test_linkedin_note_is_short(profile):
    msg = heuristics.networking_message("linkedin", "Grace", "Acme", "Backend Engineer " * 30, profile)
    assert len(msg) <= 300
    email = heuristics.networking_message("email", "", "Acme", "Backend Engineer", profile)
    assert email.startswith("Subject: Backend Engineer at Acme")
    assert "Hi Hiring Manager" in email
