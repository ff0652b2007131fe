"""
Shared pytest fixtures for prothought tests.

Provides a mock completion provider so no test touches the network.
"""

from pathlib import Path

import pytest

from prothought.api import Journal
from prothought.config import JournalConfig, LLMConfig
from prothought.thought_store import ThoughtStore


class MockCompletionProvider:
    """Records prompts and returns a canned reply."""

    def __init__(self, reply: str = "A calm, productive day."):
        self.reply = reply
        self.calls: list[tuple[str, str]] = []

    def complete(self, prompt: str, system_prompt: str) -> str:
        self.calls.append((prompt, system_prompt))
        return self.reply

    def list_models(self) -> list[str]:
        return ["mock-model"]


class Clock:
    """Settable replacement for ThoughtStore._now."""

    def __init__(self, ts: str = "2026-02-05T09:00:00"):
        self.ts = ts

    def __call__(self) -> str:
        return self.ts


@pytest.fixture
def db_path(tmp_path) -> Path:
    return tmp_path / "thoughts.db"


@pytest.fixture
def store(db_path):
    """A ThoughtStore on a fresh database."""
    s = ThoughtStore(db_path)
    yield s
    s.close()


@pytest.fixture
def clock(store, monkeypatch) -> Clock:
    """Pin the store's timestamp; set clock.ts to move time."""
    c = Clock()
    monkeypatch.setattr(store, "_now", c)
    return c


@pytest.fixture
def mock_provider() -> MockCompletionProvider:
    return MockCompletionProvider()


@pytest.fixture
def journal(db_path, mock_provider):
    """A Journal on a fresh database with a mock LLM and no ops log."""
    config = JournalConfig(db_path=db_path, llm=LLMConfig(model="mock-model"))
    j = Journal(config, provider=mock_provider, ops_log=False)
    yield j
    j.close()


@pytest.fixture
def journal_clock(journal, monkeypatch) -> Clock:
    """Pin the journal store's timestamp."""
    c = Clock()
    monkeypatch.setattr(journal.store, "_now", c)
    return c
