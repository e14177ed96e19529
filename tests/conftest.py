"""Shared fixtures for the readiness analyzer tests."""

import copy

import pytest

from seedcheck.backend.config import AnalyzerSettings
from seedcheck.backend.mock_analysis import MOCK_ANALYSIS


class RecordingSleep:
    """Stands in for time.sleep and remembers every requested delay."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


class FakeCompletion:
    """Replays a canned model reply (or raises) and records the prompts it saw."""

    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def __call__(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def demo_settings() -> AnalyzerSettings:
    return AnalyzerSettings(api_key="", demo_delay_seconds=3.0)


@pytest.fixture
def live_settings() -> AnalyzerSettings:
    return AnalyzerSettings(api_key="sk-test", demo_delay_seconds=3.0)


@pytest.fixture
def valid_result() -> dict:
    """A contract-conforming model reply (the canned analysis without ``mode``)."""
    payload = copy.deepcopy(MOCK_ANALYSIS)
    payload.pop("mode")
    return payload


@pytest.fixture
def sample_answers() -> dict:
    return {
        "a1": "Every small business runs on enterprise-grade finance tooling.",
        "a2": "Open banking APIs are now mandatory in the US.",
        "a3": "   ",
        "b4": "",
        "b4_price": "99",
        "d1": "MRR",
        "d1_value": "$15,000",
        "d3": 47,
        "e1": [
            {"name": "Ada", "role": "CEO", "background": "Ran finance ops at Stripe"},
            {"name": "", "role": "CTO", "background": ""},
        ],
        "e2": None,
    }
