"""Command-line entrypoint.

Responsibilities (and nothing more):
- Parse arguments and load Settings
- Configure structlog
- Fetch the manifest, then render every story in a headless browser
- Write the Markdown file
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from storydown import __version__
from storydown.config import Settings
from storydown.errors import StorydownError
from storydown.exporter import export_storybook
from storydown.extractor import PlaywrightExtractor
from storydown.manifest import ManifestFetcher, build_http_client, normalize_base_url

if TYPE_CHECKING:
    from collections.abc import Sequence

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs share stderr with the progress bar; stdout stays clean
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storydown",
        description="Export every story of a Storybook instance into one Markdown file.",
    )
    parser.add_argument("--version", action="version", version=f"storydown {__version__}")
    parser.add_argument(
        "base_url",
        metavar="storybook-url",
        help="Base URL of the Storybook instance, e.g. https://storybook.example.com",
    )
    parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output Markdown file (default: storybook-export.md)",
    )
    return parser


async def _export(base_url: str, settings: Settings) -> str:
    async with build_http_client(settings.manifest) as client:
        stories = await ManifestFetcher(client, settings.manifest).fetch(base_url)

    # The browser is only launched once we know there is something to render
    async with PlaywrightExtractor(settings.browser) as extractor:
        return await export_storybook(
            base_url,
            stories,
            extractor=extractor,
            title=settings.document.title,
            show_progress=settings.progress.enabled,
        )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    _setup_logging(settings)

    output = Path(args.output or settings.document.default_output)

    try:
        base_url = normalize_base_url(args.base_url)
        markdown = asyncio.run(_export(base_url, settings))
    except StorydownError as exc:
        log.error("export_failed", code=exc.code, message=exc.message)
        print(f"{exc.message}\n{exc.suggestion}", file=sys.stderr)
        return 1

    try:
        output.write_text(markdown, encoding="utf-8")
    except OSError as exc:
        log.error("markdown_write_failed", path=str(output), error=str(exc))
        print(f"Could not write {output}: {exc.strerror or exc}", file=sys.stderr)
        return 1
    log.info("markdown_written", path=str(output), size=len(markdown))
    return 0


if __name__ == "__main__":
    sys.exit(main())
