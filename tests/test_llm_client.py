from types import SimpleNamespace

import httpx
import openai
import pytest

from jobflow.ai.client import LLMClient
from jobflow.errors import AIServiceError, MissingCredentialsError, RateLimitError


def _reply(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def _connection_error(message):
    return openai.APIConnectionError(message=message, request=httpx.Request("POST", "https://llm.test/v1"))


@pytest.fixture
def client(settings):
    return LLMClient("test-key", settings)


def test_requires_key(settings):
    with pytest.raises(MissingCredentialsError):
        LLMClient("", settings)


def test_sends_json_mode(client, monkeypatch):
    sent = {}

    def create(**kwargs):
        sent.update(kwargs)
        return _reply('  {"ok": true}  ')

    monkeypatch.setattr(client._client.chat.completions, "create", create)

    assert client.complete("hello", json_mode=True) == '{"ok": true}'
    assert sent["response_format"] == {"type": "json_object"}
    assert sent["messages"] == [{"role": "user", "content": "hello"}]
    assert sent["model"] == "llama-3.3-70b-versatile"


def test_transport_errors_are_retried(client, monkeypatch, no_sleep):
    calls = []

    def create(**kwargs):
        calls.append(1)
        raise _connection_error("Connection reset by peer")

    monkeypatch.setattr(client._client.chat.completions, "create", create)

    with pytest.raises(AIServiceError):
        client.complete("hello")
    assert len(calls) == 2
    assert no_sleep == [1.0]


def test_rate_limits_are_not_retried(client, monkeypatch, no_sleep):
    calls = []

    def create(**kwargs):
        calls.append(1)
        raise _connection_error("429 Too Many Requests")

    monkeypatch.setattr(client._client.chat.completions, "create", create)

    with pytest.raises(RateLimitError):
        client.complete("hello")
    assert len(calls) == 1
    assert no_sleep == []
