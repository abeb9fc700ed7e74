"""Protocol interfaces for swappable collaborators.

The exporter references these protocols, not the concrete implementations,
so tests can drive it with an in-memory fake instead of a browser.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from storydown.models.content import StoryContent


class ExtractorProtocol(Protocol):
    """Interface for rendering a docs page and extracting its content."""

    async def extract(self, url: str) -> StoryContent: ...
