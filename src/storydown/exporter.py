"""Export driver.

Renders each story's docs page in manifest order and appends its section
to the document. A story whose page fails to load is still emitted with its
headings; any other error aborts the run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TaskProgressColumn, TextColumn

from storydown.document import DEFAULT_TITLE, StoryDocument
from storydown.errors import StorydownError
from storydown.manifest import docs_url

if TYPE_CHECKING:
    from storydown.models.content import StoryContent
    from storydown.models.story import StoryNode
    from storydown.protocols import ExtractorProtocol

log = structlog.get_logger()


def _progress(enabled: bool) -> Progress:
    return Progress(
        BarColumn(bar_width=30),
        TaskProgressColumn(),
        MofNCompleteColumn(),
        TextColumn("{task.description}"),
        console=Console(stderr=True),
        disable=not enabled,
    )


async def _extract_story(
    extractor: ExtractorProtocol, base_url: str, node: StoryNode
) -> StoryContent | None:
    url = docs_url(base_url, node.id)
    try:
        return await extractor.extract(url)
    except StorydownError as exc:
        if not exc.recoverable:
            raise
        log.warning(
            "story_extract_failed",
            story_id=node.id,
            code=exc.code,
            message=exc.message,
        )
        return None


async def export_storybook(
    base_url: str,
    stories: list[StoryNode],
    *,
    extractor: ExtractorProtocol,
    title: str = DEFAULT_TITLE,
    show_progress: bool = False,
) -> str:
    """Export ``stories`` of ``base_url``, in the given order, into one Markdown document."""
    log.info("export_started", base_url=base_url, story_count=len(stories))

    document = StoryDocument(base_url, title=title)
    failed = 0

    with _progress(show_progress) as progress:
        task = progress.add_task("", total=len(stories))
        for node in stories:
            progress.update(task, description=node.id)
            content = await _extract_story(extractor, base_url, node)
            if content is None:
                failed += 1
            document.add_story(node, content)
            progress.advance(task)

    log.info(
        "export_complete",
        story_count=document.story_count,
        failed_count=failed,
    )
    return document.render()
