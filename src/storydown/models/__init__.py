from __future__ import annotations

from storydown.models.content import CodeBlock, StoryContent, Table
from storydown.models.story import Heading, StoryNode, StoryPath, split_title

__all__ = [
    # story
    "StoryNode",
    "StoryPath",
    "Heading",
    "split_title",
    # content
    "CodeBlock",
    "Table",
    "StoryContent",
]
