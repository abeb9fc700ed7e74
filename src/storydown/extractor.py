"""Docs page content extraction.

Rendering a Storybook docs page needs a real browser: the page is a client
side app and source snippets stay hidden until their "Show code" toggle is
clicked. PlaywrightExtractor drives headless Chromium to get the rendered
HTML; extract_content() then pulls code blocks and args tables out of it
with BeautifulSoup. The selectors below follow Storybook's docs blocks and
are the only place that knows about its markup.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Self

import structlog
from bs4 import BeautifulSoup, Comment
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from storydown.errors import ErrorCode, StorydownError
from storydown.formatter import normalize_code
from storydown.models.content import CodeBlock, StoryContent, Table

if TYPE_CHECKING:
    from types import TracebackType

    from bs4 import Tag
    from playwright.async_api import Browser, Page, Playwright

    from storydown.config import BrowserSettings

log = structlog.get_logger()

# Order matters: first match of a given element wins.
CODE_SELECTORS = (
    "pre code",
    ".docblock-source code",
    ".os-content pre",
    ".os-content code",
    "pre.prismjs",
    "code.prismjs",
)
TABLE_SELECTOR = ".docblock-argstable"

_LANGUAGE_CLASS_RE = re.compile(r"language-([\w-]+)")
_WHITESPACE_RE = re.compile(r"\s+")

# Runs in the page. Clicks every button or docblock toggle labelled "show code".
_CLICK_SHOW_CODE_JS = """
() => {
  const label = (el) => (el.textContent || '').replace(/\\u00A0/g, ' ').trim().toLowerCase();
  const candidates = [
    ...document.querySelectorAll('button'),
    ...document.querySelectorAll('.docblock-code-toggle, [data-testid="docblock-code-toggle"]'),
  ];
  let clicked = 0;
  for (const el of candidates) {
    if (label(el).includes('show code') && typeof el.click === 'function') {
      el.click();
      clicked += 1;
    }
  }
  return clicked;
}
"""


def normalize_inline(text: str) -> str:
    """Collapse all whitespace (NBSP included) to single spaces and strip."""
    return _WHITESPACE_RE.sub(" ", text.replace("\u00a0", " ")).strip()


def _code_language(element: Tag) -> str:
    language = element.get("data-language")
    if language:
        return str(language)
    classes = element.get("class") or []
    match = _LANGUAGE_CLASS_RE.search(" ".join(classes))
    return match.group(1) if match else ""


def _code_blocks(soup: BeautifulSoup) -> list[CodeBlock]:
    seen_elements: set[int] = set()
    seen_code: set[str] = set()
    blocks: list[CodeBlock] = []

    for selector in CODE_SELECTORS:
        for element in soup.select(selector):
            if id(element) in seen_elements:
                continue
            seen_elements.add(id(element))

            code = normalize_code(element.get_text())
            if not code or code in seen_code:
                continue
            seen_code.add(code)
            blocks.append(CodeBlock(language=_code_language(element), code=code))

    return blocks


def _cell_text(cell: Tag) -> str:
    # Separate text nodes get a space between them: "sm" "md" "lg" → "sm md lg"
    tokens = [
        normalize_inline(str(node))
        for node in cell.find_all(string=True)
        if not isinstance(node, Comment)
    ]
    tokens = [token for token in tokens if token]
    if tokens:
        return " ".join(tokens)
    return normalize_inline(cell.get_text())


def _tables(soup: BeautifulSoup) -> list[Table]:
    tables: list[Table] = []
    for element in soup.select(TABLE_SELECTOR):
        headers = [normalize_inline(th.get_text()) for th in element.select("thead th")]
        rows = [
            [_cell_text(td) for td in tr.select("td")]
            for tr in element.select("tbody tr")
        ]
        tables.append(Table(headers=headers, rows=rows))
    return tables


def extract_content(html: str) -> StoryContent:
    """Extract code blocks and args tables from a rendered docs page."""
    soup = BeautifulSoup(html, "html.parser")
    return StoryContent(code_blocks=_code_blocks(soup), tables=_tables(soup))


class PlaywrightExtractor:
    """Renders docs pages in headless Chromium and extracts their content.

    Use as an async context manager; one browser page is reused for every
    story, so calls to extract() must not overlap.
    """

    def __init__(self, settings: BrowserSettings) -> None:
        self._settings = settings
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._page: Page | None = None

    async def __aenter__(self) -> Self:
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self._settings.headless
            )
        except PlaywrightError as exc:
            await self._playwright.stop()
            self._playwright = None
            raise StorydownError(
                code=ErrorCode.BROWSER_LAUNCH_FAILED,
                message=f"Could not launch Chromium: {exc.message}",
                suggestion="Run 'playwright install chromium' and try again.",
                recoverable=False,
            ) from exc
        try:
            self._page = await self._browser.new_page()
        except PlaywrightError as exc:
            await self._browser.close()
            await self._playwright.stop()
            self._browser = self._playwright = None
            raise StorydownError(
                code=ErrorCode.BROWSER_LAUNCH_FAILED,
                message=f"Could not open a browser page: {exc.message}",
                suggestion="Run 'playwright install chromium' and try again.",
                recoverable=False,
            ) from exc
        log.info("browser_started", headless=self._settings.headless)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()
        self._page = self._browser = self._playwright = None
        log.info("browser_stopped")

    async def extract(self, url: str) -> StoryContent:
        """Render ``url`` and extract its content.

        Raises a recoverable StorydownError if the page cannot be loaded.
        """
        if self._page is None:
            raise RuntimeError("PlaywrightExtractor used outside of 'async with'")
        page = self._page

        try:
            await page.goto(
                url,
                wait_until=self._settings.wait_until,
                timeout=self._settings.navigation_timeout_ms,
            )
            # Docs blocks render after network idle
            await page.wait_for_timeout(self._settings.render_wait_ms)
            await self._reveal_code(page)
            html = await page.content()
        except PlaywrightError as exc:
            raise StorydownError(
                code=ErrorCode.PAGE_LOAD_FAILED,
                message=f"Error loading docs page {url}: {exc.message}",
                suggestion="The story may be broken or the Storybook server too slow.",
                recoverable=True,
            ) from exc

        return extract_content(html)

    async def _reveal_code(self, page: Page) -> None:
        try:
            clicked = await page.evaluate(_CLICK_SHOW_CODE_JS)
        except PlaywrightError:
            log.warning("show_code_toggle_failed", url=page.url, exc_info=True)
            return
        if clicked:
            await page.wait_for_timeout(self._settings.toggle_wait_ms)
