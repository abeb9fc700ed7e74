"""Shared test fixtures for the storydown test suite."""

from __future__ import annotations

import pytest

from storydown.models.content import CodeBlock, StoryContent
from storydown.models.story import StoryNode


@pytest.fixture()
def button_stories() -> list[StoryNode]:
    """Two sibling stories under Components/Button, in sidebar order."""
    return [
        StoryNode(id="components-button--primary", title="Components/Button", name="Primary"),
        StoryNode(id="components-button--secondary", title="Components/Button", name="Secondary"),
    ]


@pytest.fixture()
def button_contents() -> list[StoryContent]:
    """Extracted content matching ``button_stories``: one snippet, then nothing."""
    return [
        StoryContent(code_blocks=[CodeBlock(language="tsx", code="<Button/>")]),
        StoryContent(),
    ]
