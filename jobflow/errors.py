"""Exception hierarchy shared by the AI facade, sources and AutoPilot."""
from __future__ import annotations


class JobFlowError(Exception):
    pass


class MissingCredentialsError(JobFlowError):
    """No usable LLM API key while running in strict mode."""


class AIServiceError(JobFlowError):
    """The LLM endpoint could not be reached or returned an error."""


class RateLimitError(AIServiceError):
    """Quota exhausted / HTTP 429. Never retried."""


_RATE_LIMIT_MARKERS: tuple[str, ...] = (
    "429",
    "quota",
    "rate limit",
    "rate_limit",
    "resource_exhausted",
    "too many requests",
)


def looks_rate_limited(exc: BaseException) -> bool:
    """True when an arbitrary transport error carries a rate-limit indicator."""
    if isinstance(exc, RateLimitError):
        return True
    if getattr(exc, "status_code", None) == 429:
        return True
    text = str(exc).lower()
    return any(marker in text for marker in _RATE_LIMIT_MARKERS)
