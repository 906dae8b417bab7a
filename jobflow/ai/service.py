"""AI service facade: typed operations over the LLM with local fallbacks.

Each operation builds a prompt, asks the model for JSON, validates the
shape and converts it to a model object. What happens on failure depends on
``ai.mode``:

* ``permissive`` (default): a missing key, a rate-limit/quota error, a
  transport error after retries or unparseable output all route to the
  deterministic heuristic in :mod:`jobflow.ai.heuristics`.
* ``strict``: a missing key raises at construction; transport and
  rate-limit errors propagate. Malformed output still falls back.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Protocol, TypeVar

from jobflow.ai import heuristics, prompts
from jobflow.ai.jsonutil import extract_json
from jobflow.config import AI_MODE_STRICT, get_api_key, load_settings
from jobflow.errors import AIServiceError, MissingCredentialsError, RateLimitError
from jobflow.log import get_logger
from jobflow.models import (
    STATUS_NEW,
    InterviewQuestion,
    JobListing,
    LearningStep,
    MatchResult,
    ResumeOptimization,
    SkillGapAnalysis,
    UserProfile,
    short_id,
)
from jobflow.resume_parser import extract_text_from_bytes, heuristic_parse

log = get_logger(__name__)

T = TypeVar("T")


class CompletionClient(Protocol):
    def complete(self, prompt: str, *, json_mode: bool = False) -> str: ...


def _clamp_score(value: Any) -> int | None:
    try:
        score = float(value)
    except (TypeError, ValueError):
        return None
    return int(round(max(0.0, min(100.0, score))))


def _str_list(value: Any) -> list[str] | None:
    if not isinstance(value, list):
        return None
    return [str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip()]


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


class AIService:
    def __init__(
        self,
        settings: dict[str, Any] | None = None,
        client: CompletionClient | None = None,
        api_key: str | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.mode: str = self.settings["ai"]["mode"]
        if client is None:
            key = get_api_key() if api_key is None else api_key
            if key:
                from jobflow.ai.client import LLMClient

                client = LLMClient(key, self.settings)
            elif self.mode == AI_MODE_STRICT:
                raise MissingCredentialsError(
                    "LLM API key is missing. Create a .env file with LLM_API_KEY=your_key "
                    "or switch ai.mode to permissive."
                )
            else:
                log.warning("No LLM API key — every AI call will use local heuristics")
        self.client = client

    @property
    def online(self) -> bool:
        return self.client is not None

    # ── plumbing ────────────────────────────────────────────────────────

    def _complete(self, prompt: str, *, json_mode: bool = False) -> str:
        if self.client is None:
            raise AIServiceError("No LLM client configured")
        return self.client.complete(prompt, json_mode=json_mode)

    def _ask(self, prompt: str, *, json_mode: bool = False) -> Any:
        return extract_json(self._complete(prompt, json_mode=json_mode))

    def _run(
        self,
        op: str,
        call: Callable[[], T | None],
        fallback: Callable[[], T],
    ) -> T:
        """Run *call*; use *fallback* when offline, rate limited or malformed."""
        if self.client is None:
            log.debug("%s: offline, using heuristic", op)
            return fallback()
        try:
            result = call()
        except RateLimitError as exc:
            if self.mode == AI_MODE_STRICT:
                raise
            log.warning("%s: rate limited (%s) — using heuristic", op, exc)
            return fallback()
        except AIServiceError as exc:
            if self.mode == AI_MODE_STRICT:
                raise
            log.warning("%s: AI call failed (%s) — using heuristic", op, exc)
            return fallback()
        if result is None:
            log.warning("%s: malformed model output — using heuristic", op)
            return fallback()
        return result

    # ── operations ──────────────────────────────────────────────────────

    def parse_resume(self, data: bytes, mime_type: str) -> dict[str, Any]:
        """Return ``{name, email, phone, skills, resume_text}`` from a resume file."""
        text = extract_text_from_bytes(data, mime_type)
        if not text.strip():
            raise ValueError("Could not extract any text from the resume")
        fallback = heuristic_parse(text)

        def call() -> dict[str, Any] | None:
            raw = self._ask(prompts.PARSE_RESUME.format(resume_text=text[:6000]), json_mode=True)
            if not isinstance(raw, dict):
                return None
            skills = _str_list(raw.get("skills")) or fallback["skills"]
            return {
                "name": str(raw.get("name") or fallback["name"]),
                "email": str(raw.get("email") or fallback["email"]),
                "phone": str(raw.get("phone") or fallback["phone"]),
                "skills": skills[:10],
                "resume_text": str(_pick(raw, "resume_text", "resumeText", default="") or fallback["resume_text"]),
            }

        parsed = self._run("parse_resume", call, lambda: fallback)
        log.info("Resume parsed — name=%s, skills=%d", parsed.get("name"), len(parsed.get("skills", [])))
        return parsed

    def suggest_roles(self, resume_text: str) -> list[str]:
        def call() -> list[str] | None:
            raw = self._ask(prompts.SUGGEST_ROLES.format(experience=resume_text[:2000]))
            roles = _str_list(raw)
            return roles or None

        return self._run("suggest_roles", call, lambda: heuristics.infer_roles(resume_text))

    def search_jobs(self, profile: UserProfile) -> list[JobListing]:
        """Ask the model for live listings. Empty list when it cannot help."""

        def call() -> list[JobListing] | None:
            prompt = prompts.SEARCH_JOBS.format(
                roles=" or ".join(profile.target_roles) or "software engineer",
                locations=" or ".join(profile.locations) or "Remote",
            )
            raw = self._ask(prompt)
            if not isinstance(raw, list):
                return None
            now = datetime.now(timezone.utc).isoformat()
            return [
                JobListing(
                    id=short_id(),
                    title=str(item.get("title") or "Unknown Role"),
                    company=str(item.get("company") or "Unknown Company"),
                    location=str(item.get("location") or "Remote"),
                    url=str(item.get("url") or "#"),
                    description=str(item.get("description") or "No description available"),
                    source="AI Search",
                    status=STATUS_NEW,
                    posted_date=now,
                )
                for item in raw
                if isinstance(item, dict)
            ]

        jobs = self._run("search_jobs", call, list)
        log.info("AI search returned %d listings", len(jobs))
        return jobs

    def analyze_and_apply(self, job: JobListing, profile: UserProfile) -> MatchResult:
        def call() -> MatchResult | None:
            prompt = prompts.ANALYZE_AND_APPLY.format(
                name=profile.name or "Candidate",
                skills=", ".join(profile.skills),
                resume_text=profile.resume_text[:4000],
                title=job.title,
                company=job.company,
                description=job.description[:3000],
            )
            raw = self._ask(prompt, json_mode=True)
            if not isinstance(raw, dict):
                return None
            score = _clamp_score(_pick(raw, "matchScore", "match_score", "score"))
            if score is None:
                return None
            return MatchResult(
                match_score=score,
                cover_letter=str(_pick(raw, "coverLetter", "cover_letter", default="")),
                notes=str(raw.get("notes") or ""),
            )

        return self._run("analyze_and_apply", call, lambda: heuristics.match(job, profile))

    def generate_interview_questions(self, job: JobListing, profile: UserProfile) -> list[InterviewQuestion]:
        def call() -> list[InterviewQuestion] | None:
            prompt = prompts.INTERVIEW_QUESTIONS.format(
                title=job.title, company=job.company, skills=", ".join(profile.skills),
            )
            raw = self._ask(prompt)
            if isinstance(raw, dict):
                raw = raw.get("questions")
            if not isinstance(raw, list):
                return None
            questions = [
                InterviewQuestion.from_dict(item)
                for item in raw
                if isinstance(item, dict) and item.get("question")
            ]
            return questions or None

        return self._run(
            "generate_interview_questions", call,
            lambda: heuristics.interview_questions(job, profile),
        )

    def analyze_resume_for_job(self, job: JobListing, profile: UserProfile) -> ResumeOptimization:
        def call() -> ResumeOptimization | None:
            prompt = prompts.RESUME_FOR_JOB.format(
                title=job.title,
                company=job.company,
                description=job.description[:3000],
                resume_text=profile.resume_text[:5000],
            )
            raw = self._ask(prompt, json_mode=True)
            if not isinstance(raw, dict):
                return None
            score = _clamp_score(_pick(raw, "score", "matchScore"))
            if score is None:
                return None
            return ResumeOptimization(
                score=score,
                missing_keywords=_str_list(_pick(raw, "missingKeywords", "missing_keywords")) or [],
                suggested_improvements=_str_list(
                    _pick(raw, "suggestedImprovements", "suggested_improvements")
                ) or [],
                optimized_summary=str(_pick(raw, "optimizedSummary", "optimized_summary", default="")),
            )

        return self._run(
            "analyze_resume_for_job", call,
            lambda: heuristics.resume_optimization(job, profile),
        )

    def generate_networking_message(
        self,
        kind: str,
        target_name: str,
        company: str,
        role: str,
        profile: UserProfile,
    ) -> str:
        """*kind* is ``"linkedin"`` (short connection note) or ``"email"``."""

        def call() -> str | None:
            prompt = prompts.NETWORKING_MESSAGE.format(
                format="short connection request (max 300 chars)" if kind == "linkedin" else "cold email",
                target=target_name or "a Hiring Manager",
                company=company,
                role=role,
                name=profile.name,
                skills=", ".join(profile.skills[:3]),
                experience=profile.resume_text[:300],
            )
            text = self._complete(prompt).strip()
            return text or None

        return self._run(
            "generate_networking_message", call,
            lambda: heuristics.networking_message(kind, target_name, company, role, profile),
        )

    def analyze_skill_gap(self, profile: UserProfile) -> SkillGapAnalysis:
        def call() -> SkillGapAnalysis | None:
            prompt = prompts.SKILL_GAP.format(
                skills=", ".join(profile.skills),
                roles=", ".join(profile.target_roles),
                experience=profile.resume_text[:1000],
            )
            raw = self._ask(prompt, json_mode=True)
            if not isinstance(raw, dict):
                return None
            missing = _str_list(_pick(raw, "missingSkills", "missing_skills"))
            if missing is None:
                return None
            path = [
                LearningStep(
                    skill=str(step.get("skill", "")),
                    resource=str(step.get("resource", "")),
                    action_item=str(_pick(step, "actionItem", "action_item", default="")),
                )
                for step in (_pick(raw, "learningPath", "learning_path", default=[]) or [])
                if isinstance(step, dict)
            ]
            return SkillGapAnalysis(
                missing_skills=missing,
                learning_path=path,
                project_idea=str(_pick(raw, "projectIdea", "project_idea", default="")),
            )

        return self._run("analyze_skill_gap", call, lambda: heuristics.skill_gap(profile))
