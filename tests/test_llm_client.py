from types import SimpleNamespace

import httpx
import pytest
from openai import APIConnectionError

from seedcheck.backend import llm_client
from seedcheck.backend.analysis import ReadinessAnalyzer
from seedcheck.backend.config import AnalyzerSettings
from seedcheck.backend.errors import ServiceError
from seedcheck.backend.mock_analysis import MOCK_ANALYSIS


class FakeOpenAI:
    """Minimal stand-in for ``openai.OpenAI`` exposing ``chat.completions.create``."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []
        self.client_kwargs = {}
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def __call__(self, **kwargs):
        self.client_kwargs = kwargs
        return self

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def _reply(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def settings():
    return AnalyzerSettings(api_key="sk-test", demo_delay_seconds=0)


def _install(monkeypatch, fake):
    monkeypatch.setattr(llm_client, "OpenAI", fake)
    return fake


def test_request_sends_one_call_without_retries(monkeypatch, settings):
    fake = _install(monkeypatch, FakeOpenAI(response=_reply('{"ok": true}')))

    text = llm_client.request_completion(settings, system_prompt="sys", user_prompt="user")

    assert text == '{"ok": true}'
    assert len(fake.requests) == 1
    assert fake.client_kwargs["max_retries"] == 0
    assert fake.requests[0]["model"] == settings.model
    assert [m["role"] for m in fake.requests[0]["messages"]] == ["system", "user"]


def test_empty_content_is_returned_as_empty_text(monkeypatch, settings):
    _install(monkeypatch, FakeOpenAI(response=_reply("")))
    assert llm_client.request_completion(settings, system_prompt="sys", user_prompt="user") == ""


def test_null_content_is_returned_as_empty_text(monkeypatch, settings):
    _install(monkeypatch, FakeOpenAI(response=_reply(None)))
    assert llm_client.request_completion(settings, system_prompt="sys", user_prompt="user") == ""


def test_empty_provider_reply_falls_back_to_canned_result(monkeypatch, settings):
    _install(monkeypatch, FakeOpenAI(response=_reply("")))

    result = ReadinessAnalyzer(settings, sleep=lambda _: None).analyze({"a1": "Vision"})

    assert result.mode == "live"
    assert result.overall_score == MOCK_ANALYSIS["overallScore"]


def test_missing_choices_is_a_service_error(monkeypatch, settings):
    _install(monkeypatch, FakeOpenAI(response=SimpleNamespace(choices=[])))
    with pytest.raises(ServiceError, match="choices"):
        llm_client.request_completion(settings, system_prompt="sys", user_prompt="user")


def test_connection_failure_is_a_service_error(monkeypatch, settings):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    fake = _install(monkeypatch, FakeOpenAI(error=APIConnectionError(request=request)))

    with pytest.raises(ServiceError, match="connect"):
        llm_client.request_completion(settings, system_prompt="sys", user_prompt="user")
    assert len(fake.requests) == 1


def test_missing_key_never_builds_a_client(monkeypatch):
    fake = _install(monkeypatch, FakeOpenAI(response=_reply("unused")))
    with pytest.raises(ServiceError, match="API key"):
        llm_client.request_completion(AnalyzerSettings(api_key=""), system_prompt="s", user_prompt="u")
    assert fake.requests == []
