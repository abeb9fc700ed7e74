"""Markdown document assembly.

A StoryDocument is built by appending one self-contained section per story,
in manifest order, so any prefix of the output is valid Markdown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from storydown.formatter import format_content
from storydown.headings import HeadingCursor

if TYPE_CHECKING:
    from collections.abc import Iterable

    from storydown.models.content import StoryContent
    from storydown.models.story import StoryNode

DEFAULT_TITLE = "Storybook export"


class StoryDocument:
    """Append-only Markdown document for a single export run."""

    def __init__(self, source: str, title: str = DEFAULT_TITLE) -> None:
        self.source = source
        self.title = title
        self._cursor = HeadingCursor()
        self._parts: list[str] = [f"# {title}\n\nFrom: {source}\n\n"]
        self.story_count = 0

    def add_story(self, node: StoryNode, content: StoryContent | None) -> str:
        """Append the section for ``node`` and return it.

        ``content`` is None when extraction failed; the story still gets its
        headings so the document reflects the full hierarchy.
        """
        *path_headings, leaf = self._cursor.advance(node)

        lines = [f"{heading.render()}\n" for heading in path_headings]
        lines.append(f"{leaf.render()}\n\n")
        if content is not None:
            lines.append(format_content(leaf.level, content.code_blocks, content.tables))

        section = "".join(lines)
        self._parts.append(section)
        self.story_count += 1
        return section

    def render(self) -> str:
        return "".join(self._parts)


def build_document(
    source: str,
    stories: Iterable[StoryNode],
    contents: Iterable[StoryContent | None],
    title: str = DEFAULT_TITLE,
) -> str:
    """Render a full document from stories and their contents, paired in order."""
    document = StoryDocument(source, title=title)
    for node, content in zip(stories, contents, strict=True):
        document.add_story(node, content)
    return document.render()
