"""Pytest configuration: project root importable, no real model calls."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from clearcue.exceptions import UpstreamUnavailable  # noqa: E402


class FakeModelClient:
    """ModelClient that replays a canned reply and records what it was asked."""

    model = "fake-model"

    def __init__(self, reply: str = "", fail: bool = False):
        self.reply = reply
        self.fail = fail
        self.calls: list[tuple[str, list]] = []

    def generate(self, prompt, images):
        self.calls.append((prompt, list(images)))
        if self.fail:
            raise UpstreamUnavailable("Model call failed")
        return self.reply


@pytest.fixture
def fake_client() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture(autouse=True)
def _no_model_calls(monkeypatch):
    """Prevent real model API calls during tests."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    yield
