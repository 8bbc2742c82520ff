"""
Pytest configuration and shared fixtures.
"""

import threading

import pytest

from matchscore.errors import ProviderError
from matchscore.taxonomy import SkillTaxonomy


class StubSummarizer:
    """Deterministic summarizer that records every call."""

    def __init__(self, prefix: str = "summary: "):
        self.prefix = prefix
        self.calls = []
        self._lock = threading.Lock()

    def summarize(self, text: str) -> str:
        with self._lock:
            self.calls.append(text)
        return f"{self.prefix}{text[:40]}"


class StubScorer:
    """Similarity capability returning a fixed value."""

    def __init__(self, value: float = 0.8):
        self.value = value
        self.calls = []

    def similarity(self, source: str, target: str) -> float:
        self.calls.append((source, target))
        return self.value


class FailingCapability:
    """Both capabilities fail with a provider error."""

    def __init__(self, error: Exception = None):
        self.error = error or ProviderError("provider down", capability="summarize", status=503)
        self.calls = 0

    def summarize(self, text: str) -> str:
        self.calls += 1
        raise self.error

    def similarity(self, source: str, target: str) -> float:
        self.calls += 1
        raise self.error


class FirstChoice:
    """Random source that always picks the first option."""

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def summarizer() -> StubSummarizer:
    return StubSummarizer()


@pytest.fixture
def scorer() -> StubScorer:
    return StubScorer(0.8)


@pytest.fixture
def small_taxonomy() -> SkillTaxonomy:
    """Compact vocabulary without the one-letter entries of the packaged list."""
    return SkillTaxonomy(
        {
            "languages": ["Python", "Go", "SQL"],
            "web": ["React", "Node.js"],
            "cloud_devops": ["Docker", "Kubernetes"],
        },
        version="test",
    )


@pytest.fixture
def sample_resume() -> str:
    return "I have 2 years experience with Python and React."


@pytest.fixture
def sample_job() -> str:
    return "Requires 3 years experience, Bachelor's degree, proficient in React and Node.js."
