"""Storybook manifest loading.

The manifest is fetched once per run, before any page is rendered. Storybook
6 and earlier publish ``stories.json`` with a ``stories`` mapping; Storybook 7+
publish ``index.json`` with an ``entries`` mapping. Both are keyed by story id
and their order is the sidebar order, which is preserved as-is.

The ManifestFetcher receives an httpx.AsyncClient via constructor injection;
the CLI owns the client lifecycle.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, urlparse

import httpx
import structlog
from pydantic import ValidationError

from storydown import __version__
from storydown.errors import ErrorCode, StorydownError
from storydown.models.story import StoryNode

if TYPE_CHECKING:
    from storydown.config import ManifestSettings

log = structlog.get_logger()

_MANIFEST_KEYS = ("stories", "entries")


def build_http_client(settings: ManifestSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once per run."""
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": f"storydown/{__version__}"},
    )


def normalize_base_url(url: str) -> str:
    """Strip trailing slashes and reject anything that is not an http(s) URL."""
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise StorydownError(
            code=ErrorCode.INVALID_INPUT,
            message=f"Not a valid Storybook URL: {url!r}",
            suggestion="Pass the Storybook base URL, e.g. https://storybook.example.com",
            recoverable=False,
        )
    return url.rstrip("/")


def docs_url(base_url: str, story_id: str) -> str:
    """URL of the standalone docs view for a story."""
    return f"{base_url}/iframe.html?id={quote(story_id, safe='')}&viewMode=docs"


def parse_manifest(data: Any) -> list[StoryNode]:
    """Build StoryNodes from a decoded stories.json / index.json payload.

    Records keep the mapping's order. A record without an ``id`` takes its
    mapping key. A payload with no story mapping yields an empty list.
    """
    if not isinstance(data, dict):
        raise StorydownError(
            code=ErrorCode.MANIFEST_INVALID,
            message=f"Manifest must be a JSON object, got {type(data).__name__}",
            suggestion="Check that the URL points at a Storybook build.",
            recoverable=False,
        )

    records: Any = {}
    for key in _MANIFEST_KEYS:
        if data.get(key):
            records = data[key]
            break

    if not isinstance(records, dict):
        raise StorydownError(
            code=ErrorCode.MANIFEST_INVALID,
            message="Manifest stories must be a mapping of story id to record",
            suggestion="Check that the URL points at a Storybook build.",
            recoverable=False,
        )

    nodes: list[StoryNode] = []
    for story_id, record in records.items():
        if not isinstance(record, dict):
            raise StorydownError(
                code=ErrorCode.MANIFEST_INVALID,
                message=f"Manifest record for {story_id!r} is not an object",
                suggestion="Check that the URL points at a Storybook build.",
                recoverable=False,
            )
        try:
            nodes.append(StoryNode.model_validate({"id": story_id, **record}))
        except ValidationError as exc:
            raise StorydownError(
                code=ErrorCode.MANIFEST_INVALID,
                message=f"Invalid manifest record for {story_id!r}: {exc}",
                suggestion="Check that the URL points at a Storybook build.",
                recoverable=False,
            ) from exc
    return nodes


class ManifestFetcher:
    """Fetches and parses the story manifest of a Storybook instance."""

    def __init__(self, client: httpx.AsyncClient, settings: ManifestSettings) -> None:
        self._client = client
        self._settings = settings

    async def fetch(self, base_url: str) -> list[StoryNode]:
        """Return the stories of ``base_url`` in manifest order.

        Each configured manifest path is tried in turn; a 404 moves on to
        the next one. Raises StorydownError on network errors, other non-2xx
        responses, invalid payloads, and empty manifests.
        """
        last_status: int | None = None

        for path in self._settings.paths:
            url = f"{base_url}/{path}"
            log.info("manifest_fetching", url=url)

            try:
                response = await self._client.get(url)
            except httpx.HTTPError as exc:
                raise StorydownError(
                    code=ErrorCode.MANIFEST_FETCH_FAILED,
                    message=f"Network error fetching {url}: {exc}",
                    suggestion="Check that the Storybook instance is reachable.",
                    recoverable=False,
                ) from exc

            if response.status_code == 404:
                log.debug("manifest_not_found", url=url)
                last_status = 404
                continue

            if not response.is_success:
                raise StorydownError(
                    code=ErrorCode.MANIFEST_FETCH_FAILED,
                    message=(
                        f"Failed to fetch {path}: {response.status_code} {response.reason_phrase}"
                    ),
                    suggestion="Check that the Storybook instance is reachable.",
                    recoverable=False,
                )

            try:
                data = response.json()
            except json.JSONDecodeError as exc:
                raise StorydownError(
                    code=ErrorCode.MANIFEST_INVALID,
                    message=f"{url} did not return valid JSON",
                    suggestion="Check that the URL points at a Storybook build.",
                    recoverable=False,
                ) from exc

            stories = parse_manifest(data)
            if not stories:
                raise StorydownError(
                    code=ErrorCode.MANIFEST_EMPTY,
                    message=f"No stories found in {path}",
                    suggestion="Make sure the Storybook build contains at least one story.",
                    recoverable=False,
                )

            log.info("manifest_fetched", url=url, story_count=len(stories))
            return stories

        raise StorydownError(
            code=ErrorCode.MANIFEST_FETCH_FAILED,
            message=(
                f"No manifest found at {base_url} "
                f"(tried {', '.join(self._settings.paths)}; last status {last_status})"
            ),
            suggestion="Check that the URL points at a Storybook build.",
            recoverable=False,
        )
