import asyncio
from types import SimpleNamespace

import pytest

from zavala.llm import openai_wrapper
from zavala.llm.openai_wrapper import (
    OpenAIContextLengthError,
    OpenAIFinalError,
    OpenAITimeoutError,
    chat,
)


@pytest.fixture(autouse=True)
def fresh_semaphore(monkeypatch):
    monkeypatch.setattr(openai_wrapper, "_semaphore", None)


@pytest.fixture
def no_sleep(monkeypatch):
    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)

    monkeypatch.setattr(openai_wrapper.asyncio, "sleep", fake_sleep)
    return sleeps


def test_chat_passes_parameters_and_returns_metrics(monkeypatch):
    calls = []
    response = SimpleNamespace(usage=SimpleNamespace(prompt_tokens=5, completion_tokens=2, total_tokens=7))

    def fake_create(**kwargs):
        calls.append(kwargs)
        return response

    monkeypatch.setattr(openai_wrapper, "_create_completion", fake_create)
    resp, metrics = asyncio.run(
        chat([{"role": "user", "content": "hi"}], model="gpt-4o", max_tokens=150, temperature=0.9)
    )

    assert resp is response
    assert metrics["attempt"] == 1
    assert metrics["purpose"] == "completion"
    assert calls[0]["model"] == "gpt-4o"
    assert calls[0]["max_tokens"] == 150
    assert calls[0]["temperature"] == 0.9


def test_single_attempt_by_default(monkeypatch, no_sleep):
    calls = []

    def fake_create(**kwargs):
        calls.append(kwargs)
        raise RuntimeError("503 overloaded")

    monkeypatch.setattr(openai_wrapper, "_create_completion", fake_create)
    with pytest.raises(OpenAIFinalError):
        asyncio.run(chat([], model="gpt-4o"))
    assert len(calls) == 1
    assert no_sleep == []


def test_retries_retriable_errors_when_configured(monkeypatch, no_sleep):
    attempts = []

    def fake_create(**kwargs):
        attempts.append(1)
        if len(attempts) < 3:
            raise RuntimeError("rate limit reached")
        return SimpleNamespace(usage=None)

    monkeypatch.setattr(openai_wrapper, "_create_completion", fake_create)
    _, metrics = asyncio.run(chat([], model="gpt-4o", max_attempts=3))
    assert metrics["attempt"] == 3
    assert len(no_sleep) == 2


def test_timeout_is_reported_as_timeout(monkeypatch, no_sleep):
    def fake_create(**kwargs):
        raise RuntimeError("Request timed out: timeout")

    monkeypatch.setattr(openai_wrapper, "_create_completion", fake_create)
    with pytest.raises(OpenAITimeoutError):
        asyncio.run(chat([], model="gpt-4o", max_attempts=2))
    assert len(no_sleep) == 1


def test_context_length_is_not_retried(monkeypatch, no_sleep):
    calls = []

    def fake_create(**kwargs):
        calls.append(1)
        raise RuntimeError("This model's maximum context length is 8192 tokens")

    monkeypatch.setattr(openai_wrapper, "_create_completion", fake_create)
    with pytest.raises(OpenAIContextLengthError):
        asyncio.run(chat([], model="gpt-4o", max_attempts=3))
    assert len(calls) == 1
    assert no_sleep == []
