"""Thin OpenAI-compatible chat client with retry and error classification."""
from __future__ import annotations

from typing import Any

from jobflow.errors import AIServiceError, MissingCredentialsError, RateLimitError, looks_rate_limited
from jobflow.log import get_logger
from jobflow.retry import retry

log = get_logger(__name__)


class LLMClient:
    """Sends a single-turn prompt and returns the text of the reply.

    Transient failures are retried with exponential backoff
    (``max_attempts`` tries, ``base_delay`` doubling). Rate-limit responses
    raise :class:`RateLimitError` at once so callers can fall back quickly.
    """

    def __init__(self, api_key: str, settings: dict[str, Any]) -> None:
        if not api_key:
            raise MissingCredentialsError("LLM API key is missing — set LLM_API_KEY in .env")
        from openai import OpenAI

        ai = settings["ai"]
        self.model: str = ai["model"]
        self.temperature: float = float(ai.get("temperature", 0.3))
        self.max_tokens: int = int(ai.get("max_tokens", 1500))
        self._client = OpenAI(api_key=api_key, base_url=ai["base_url"], max_retries=0)
        self._send = retry(
            max_attempts=int(ai.get("max_attempts", 2)),
            base_delay=float(ai.get("base_delay", 1.0)),
            jitter=False,
            retryable=(AIServiceError,),
            fatal=(RateLimitError,),
        )(self._send_once)

    def _send_once(self, prompt: str, json_mode: bool) -> str:
        import openai

        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            resp = self._client.chat.completions.create(**kwargs)
        except openai.RateLimitError as exc:
            raise RateLimitError(str(exc)) from exc
        except openai.OpenAIError as exc:
            if looks_rate_limited(exc):
                raise RateLimitError(str(exc)) from exc
            raise AIServiceError(str(exc)) from exc
        return (resp.choices[0].message.content or "").strip()

    def complete(self, prompt: str, *, json_mode: bool = False) -> str:
        return self._send(prompt, json_mode)
