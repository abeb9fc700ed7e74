"""Hierarchy heading emitter.

Stories arrive in manifest order, each carrying a ``/``-delimited title path.
Only the heading levels that differ from the previously emitted story are
written, so consecutive stories under the same component share their parent
headings, mirroring the Storybook sidebar. Every story then gets exactly one
leaf heading for its own display name, one level below its path.
"""

from __future__ import annotations

from dataclasses import dataclass

from storydown.models.story import Heading, StoryNode, StoryPath


def emit_headings(current: StoryPath, previous: StoryPath) -> list[Heading]:
    """Return the path headings needed to move from ``previous`` to ``current``.

    Once a segment diverges, every remaining segment of ``current`` is
    emitted even if it happens to equal ``previous`` at the same index
    (``A/X/C`` after ``B/X/C`` re-emits ``X`` and ``C`` under the new ``A``).
    The leaf heading is not included; see :func:`leaf_heading`.
    """
    headings: list[Heading] = []
    diverged = False

    for index, segment in enumerate(current):
        if not diverged and (index >= len(previous) or segment != previous[index]):
            diverged = True
        if diverged:
            headings.append(Heading(level=index + 1, text=segment))

    return headings


def story_heading_level(path: StoryPath) -> int:
    """Heading level of a story's leaf heading. Not capped at 6."""
    return len(path) + 1


def leaf_heading(node: StoryNode) -> Heading:
    return Heading(level=story_heading_level(node.path), text=node.display_name)


@dataclass
class HeadingCursor:
    """Path of the most recently emitted story within one document run.

    Owned by a single driver loop and advanced strictly once per story, in
    manifest order. Reordering stories changes the output.
    """

    previous: StoryPath = ()

    def advance(self, node: StoryNode) -> list[Heading]:
        """Return path headings plus the leaf heading for ``node``, then move to it."""
        path = node.path
        headings = emit_headings(path, self.previous)
        headings.append(leaf_heading(node))
        self.previous = path
        return headings
