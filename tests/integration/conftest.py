"""Integration test fixtures.

Provides an in-memory extractor standing in for the headless browser, and
isolates the CLI from local config, logging and progress output.
"""

from __future__ import annotations

import pytest

from storydown.errors import StorydownError
from storydown.models.content import StoryContent


class FakeExtractor:
    """Returns canned content per docs URL and records every request."""

    def __init__(self, pages: dict[str, StoryContent | StorydownError] | None = None) -> None:
        self.pages = pages or {}
        self.requested: list[str] = []

    async def extract(self, url: str) -> StoryContent:
        self.requested.append(url)
        result = self.pages.get(url, StoryContent())
        if isinstance(result, StorydownError):
            raise result
        return result


@pytest.fixture()
def make_extractor() -> type[FakeExtractor]:
    return FakeExtractor


@pytest.fixture()
def quiet_cli(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep structlog unconfigured and the progress bar off for CLI runs."""
    monkeypatch.setattr("storydown.cli._setup_logging", lambda settings: None)
    monkeypatch.setenv("STORYDOWN__PROGRESS__ENABLED", "false")
