"""Deterministic local stand-ins for LLM results.

Used only when the LLM endpoint is unconfigured, unreachable or rate
limited. Everything here is pure: identical inputs give identical outputs.
"""
from __future__ import annotations

import re
from collections import Counter

from jobflow.models import (
    InterviewQuestion,
    JobListing,
    LearningStep,
    MatchResult,
    ResumeOptimization,
    SkillGapAnalysis,
    UserProfile,
)

MIN_SCORE = 30
MAX_SCORE = 98
SCORE_OFFSET = 30
JOB_KEYWORD_COUNT = 25

STOP_WORDS: frozenset[str] = frozenset("""
a about above after again all also am an and any are as at be because been before being
below between both but by can could did do does doing down during each etc few for from
further had has have having he her here hers him his how i if in into is it its itself
just me more most my no nor not now of off on once only or other our ours out over own
per same she should so some such than that the their theirs them then there these they
this those through to too under until up upon very via was we were what when where which
while who whom why will with within without would you your yours
ability able across apply applicants candidate candidates company day days work working
join role roles position positions job jobs team teams looking including include new
opportunity opportunities requirements required preferred plus strong excellent good great
experience experienced years year must well help make using use used based etc remote
responsibilities responsible environment skills skill knowledge understanding benefits
""".split())

_TOKEN_RE = re.compile(r"[a-z][a-z0-9+#]*(?:\.[a-z0-9]+)?")

# Ordered: first match wins, a resume can hit several.
_ROLE_RULES: list[tuple[tuple[str, ...], str]] = [
    (("react", "frontend", "front-end", "vue", "angular"), "Frontend Developer"),
    (("node", "backend", "back-end", "django", "flask", "fastapi", "spring"), "Backend Engineer"),
    (("full stack", "fullstack", "full-stack"), "Full Stack Developer"),
    (("python",), "Python Developer"),
    (("machine learning", "pytorch", "tensorflow", "deep learning"), "Machine Learning Engineer"),
    (("data science", "pandas", "statistics"), "Data Scientist"),
    (("sql", "tableau", "power bi", "excel"), "Data Analyst"),
    (("kubernetes", "docker", "terraform", "devops", "ci/cd"), "DevOps Engineer"),
    (("aws", "gcp", "azure", "cloud"), "Cloud Engineer"),
    (("figma", "ui/ux", "sketch", "design"), "Product Designer"),
    (("product manager", "roadmap", "product management"), "Product Manager"),
    (("selenium", "qa", "testing", "cypress"), "QA Engineer"),
    (("ios", "android", "swift", "kotlin", "flutter"), "Mobile Developer"),
    (("marketing", "seo", "campaign"), "Marketing Specialist"),
]

_ROLE_SKILLS: dict[str, list[str]] = {
    "frontend": ["TypeScript", "React", "Accessibility", "Testing Library", "Web Performance"],
    "backend": ["System Design", "PostgreSQL", "Docker", "REST API Design", "Observability"],
    "full stack": ["TypeScript", "React", "Node.js", "PostgreSQL", "Docker"],
    "data": ["SQL", "Python", "Statistics", "Data Visualization", "dbt"],
    "machine learning": ["PyTorch", "MLOps", "Statistics", "Feature Engineering", "Model Evaluation"],
    "devops": ["Kubernetes", "Terraform", "CI/CD", "Observability", "Linux"],
    "cloud": ["AWS", "Terraform", "Networking", "Security", "Kubernetes"],
    "design": ["Figma", "User Research", "Prototyping", "Design Systems", "Accessibility"],
    "product": ["Roadmapping", "Analytics", "User Research", "Stakeholder Management", "SQL"],
    "qa": ["Test Automation", "Playwright", "CI/CD", "API Testing", "Performance Testing"],
}
_DEFAULT_ROLE_SKILLS = ["System Design", "Cloud Fundamentals", "Testing", "Communication", "Git"]


def tokenize(text: str) -> list[str]:
    return [t for t in _TOKEN_RE.findall((text or "").lower()) if len(t) > 2 and t not in STOP_WORDS]


def extract_keywords(text: str, limit: int = JOB_KEYWORD_COUNT) -> list[str]:
    """Most frequent non-stop-words; ties keep first-seen order."""
    counts = Counter(tokenize(text))
    first_seen: dict[str, int] = {}
    for i, tok in enumerate(tokenize(text)):
        first_seen.setdefault(tok, i)
    ranked = sorted(counts, key=lambda t: (-counts[t], first_seen[t]))
    return ranked[:limit]


def infer_roles(text: str, limit: int = 5) -> list[str]:
    low = (text or "").lower()
    roles = [role for needles, role in _ROLE_RULES if any(n in low for n in needles)]
    if not roles:
        roles = ["Software Engineer"]
    return list(dict.fromkeys(roles))[:limit]


def _candidate_text(profile: UserProfile) -> str:
    return " ".join([profile.resume_text or "", " ".join(profile.skills)])


def keyword_overlap(resume_text: str, description: str) -> tuple[list[str], list[str]]:
    """Split the job's top keywords into (present in resume, missing)."""
    keywords = extract_keywords(description)
    resume_tokens = set(tokenize(resume_text))
    present = [k for k in keywords if k in resume_tokens]
    missing = [k for k in keywords if k not in resume_tokens]
    return present, missing


def match_score(resume_text: str, description: str) -> int:
    """Score in [30, 98] from the fraction of job keywords found in the resume."""
    present, missing = keyword_overlap(resume_text, description)
    total = len(present) + len(missing)
    if not total:
        return MIN_SCORE
    ratio = len(present) / total
    return max(MIN_SCORE, min(MAX_SCORE, round(ratio * 100) + SCORE_OFFSET))


def cover_letter(job: JobListing, profile: UserProfile) -> str:
    skills = ", ".join(profile.skills[:5]) or "the core skills listed in your posting"
    name = profile.name or "Candidate"
    return f"""Dear Hiring Team,

I am writing to apply for the {job.title} position at {job.company}.

My experience aligns with your requirements, including: {skills}. I am particularly interested in contributing to your team's success.

I would welcome the opportunity to discuss how my background can contribute to your team.

Best regards,
{name}"""


def match(job: JobListing, profile: UserProfile) -> MatchResult:
    text = _candidate_text(profile)
    present, missing = keyword_overlap(text, f"{job.title} {job.description}")
    score = match_score(text, f"{job.title} {job.description}")
    notes = (
        f"Offline estimate: {len(present)} of {len(present) + len(missing)} key terms "
        f"found in your resume."
    )
    return MatchResult(match_score=score, cover_letter=cover_letter(job, profile), notes=notes)


def interview_questions(job: JobListing, profile: UserProfile) -> list[InterviewQuestion]:
    skills = profile.skills[:3] or extract_keywords(job.description, 3) or ["your main tools"]
    questions = [
        InterviewQuestion(
            question=f"Why do you want to work as a {job.title} at {job.company}?",
            suggested_answer=(
                f"Connect your background to {job.company}'s product and explain what "
                f"you would deliver in the first 90 days."
            ),
            key_points=["Company research", "Role motivation", "Concrete first goals"],
        ),
        InterviewQuestion(
            question="Tell me about a difficult problem you solved recently.",
            suggested_answer="Use the STAR format: situation, task, action, measurable result.",
            key_points=["STAR structure", "Your specific contribution", "Quantified outcome"],
        ),
        InterviewQuestion(
            question="Describe a disagreement with a teammate and how you resolved it.",
            suggested_answer="Show that you listened, used data to decide and kept the relationship intact.",
            key_points=["Empathy", "Data-driven decision", "Outcome for the team"],
        ),
    ]
    for skill in skills:
        questions.append(
            InterviewQuestion(
                question=f"How have you applied {skill} in production work?",
                suggested_answer=f"Walk through one project where {skill} was central, including trade-offs.",
                key_points=[f"{skill} depth", "Trade-offs considered", "Results"],
            )
        )
    return questions[:5]


def skill_gap(profile: UserProfile) -> SkillGapAnalysis:
    owned = {s.lower() for s in profile.skills}
    wanted: list[str] = []
    for role in profile.target_roles or infer_roles(profile.resume_text):
        low = role.lower()
        for key, skills in _ROLE_SKILLS.items():
            if key in low:
                wanted.extend(skills)
    if not wanted:
        wanted = list(_DEFAULT_ROLE_SKILLS)
    missing = [s for s in dict.fromkeys(wanted) if s.lower() not in owned][:3]
    path = [
        LearningStep(
            skill=s,
            resource=f"Official {s} documentation and a hands-on course",
            action_item=f"Build a small feature that uses {s} and publish it on GitHub",
        )
        for s in missing
    ]
    idea = (
        f"Build an end-to-end portfolio project that combines {', '.join(missing)}."
        if missing else "Deepen an existing project with tests, monitoring and a public write-up."
    )
    return SkillGapAnalysis(missing_skills=missing, learning_path=path, project_idea=idea)


def resume_optimization(job: JobListing, profile: UserProfile) -> ResumeOptimization:
    text = _candidate_text(profile)
    description = f"{job.title} {job.description}"
    _, missing = keyword_overlap(text, description)
    improvements = [f"Mention hands-on experience with '{k}' if you have it." for k in missing[:5]]
    improvements.append("Quantify impact in each bullet (percentages, time saved, scale).")
    summary_skills = ", ".join(profile.skills[:4]) or "relevant tools"
    summary = (
        f"{profile.name or 'Candidate'} is a candidate for {job.title} roles with experience in "
        f"{summary_skills}, focused on delivering measurable results."
    )
    return ResumeOptimization(
        score=match_score(text, description),
        missing_keywords=missing[:10],
        suggested_improvements=improvements,
        optimized_summary=summary,
    )


def networking_message(kind: str, target_name: str, company: str, role: str, profile: UserProfile) -> str:
    who = target_name or "there"
    skills = ", ".join(profile.skills[:3]) or "my background"
    name = profile.name or "Candidate"
    if kind == "linkedin":
        msg = (
            f"Hi {who}, I'm {name}. I'm interested in the {role} role at {company} and "
            f"bring experience in {skills}. Would love to connect!"
        )
        return msg[:300]
    return (
        f"Subject: {role} at {company}\n\n"
        f"Hi {target_name or 'Hiring Manager'},\n\n"
        f"I'm {name}, and I'm reaching out about the {role} position at {company}. "
        f"My experience with {skills} maps closely to what your team needs, and I'd welcome "
        f"a short call to discuss how I can help.\n\nBest regards,\n{name}"
    )
