from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict

# Ordered, non-empty title segments: "Components/Button" → ("Components", "Button")
StoryPath = tuple[str, ...]


def split_title(title: str | None) -> StoryPath:
    """Split a ``/``-delimited story title into its non-empty segments."""
    if not title:
        return ()
    return tuple(part for part in title.split("/") if part)


class StoryNode(BaseModel):
    """Single story record from the Storybook manifest.

    Only ``id`` is required. Records without a ``title`` degrade to an empty
    path and are rendered as a lone leaf heading.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str | None = None
    name: str | None = None

    @property
    def path(self) -> StoryPath:
        return split_title(self.title)

    @property
    def display_name(self) -> str:
        return self.name or self.id


class Heading(NamedTuple):
    level: int  # 1-based, maps directly to the number of '#'
    text: str

    def render(self) -> str:
        return f"{'#' * self.level} {self.text}"
