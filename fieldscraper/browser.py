"""
Browser-based rendering for JavaScript-heavy sites using Playwright.
"""

import asyncio
import logging
from typing import List, Optional
from playwright.async_api import (
    Browser,
    ElementHandle,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)

from .config import (
    BROWSER_ARGS,
    CONTENT_PROBE_SELECTORS,
    CONTENT_PROBE_TIMEOUT_MS,
    FINAL_SETTLE_DELAY,
    SCROLL_INTERVAL_MS,
    SCROLL_MAX_PX,
    SCROLL_STEP_PX,
    SETTLE_DELAY,
    USER_AGENT,
    VIEWPORT,
)
from .document import Element, Renderer
from .errors import RenderError

logger = logging.getLogger(__name__)


# Playwright reports selector syntax problems with the same Error type as a dead page
_INVALID_SELECTOR_MARKERS = ("while parsing selector", "is not a valid selector", "Unknown engine")

_CONTENT_PROBE_SCRIPT = """(selectors) => selectors.some(
    (selector) => document.querySelectorAll(selector).length > 0
)"""

# Stops at the page height or the distance cap, whichever comes first
_SCROLL_SCRIPT = """({step, interval, maxDistance}) => new Promise((resolve) => {
    let total = 0;
    const timer = setInterval(() => {
        const scrollHeight = document.body ? document.body.scrollHeight : 0;
        window.scrollBy(0, step);
        total += step;
        if (total >= scrollHeight || total >= maxDistance) {
            clearInterval(timer);
            resolve(total);
        }
    }, interval);
})"""


def _query_failure(selector: str, error: PlaywrightError) -> Exception:
    """Bad selectors stay plain errors; anything else means the page is gone."""
    message = str(error)
    if any(marker in message for marker in _INVALID_SELECTOR_MARKERS):
        return ValueError(f"Invalid selector '{selector}': {message}")
    return RenderError(f"Query '{selector}' failed: {message}")


class HandleElement(Element):
    def __init__(self, handle: ElementHandle):
        self.handle = handle

    async def text(self) -> str:
        try:
            content = await self.handle.text_content()
        except PlaywrightError as e:
            raise RenderError(f"Failed to read element text: {e}") from e
        return (content or "").strip()

    async def query_all(self, selector: str) -> List[Element]:
        try:
            handles = await self.handle.query_selector_all(selector)
        except PlaywrightError as e:
            raise _query_failure(selector, e) from e
        return [HandleElement(h) for h in handles]


class BrowserRenderer(Renderer):
    """Headless Chromium page, owned by a single scraping attempt."""

    def __init__(self, headless: bool = True):
        self.headless = headless
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.page: Optional[Page] = None

    async def initialize(self) -> None:
        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=self.headless,
                args=BROWSER_ARGS
            )
            context = await self.browser.new_context(
                user_agent=USER_AGENT,
                viewport=VIEWPORT
            )
            self.page = await context.new_page()
        except PlaywrightError as e:
            await self.close()
            raise RenderError(f"Failed to initialize browser: {e}") from e

    async def navigate(self, url: str, timeout_ms: int) -> str:
        """
        Load a URL and wait for dynamic content.

        Args:
            url: URL to load
            timeout_ms: Navigation timeout in milliseconds

        Returns:
            Rendered HTML content
        """
        page = self._require_page()

        try:
            logger.info("Navigating to: %s", url)
            await page.goto(url, wait_until="networkidle", timeout=timeout_ms)

            logger.info("Waiting for dynamic content to load...")
            await self._wait_for_content(page)
            await asyncio.sleep(SETTLE_DELAY)

            logger.info("Scrolling to load lazy content...")
            await self._scroll_page(page)
            await page.evaluate("window.scrollTo(0, 0)")
            await asyncio.sleep(FINAL_SETTLE_DELAY)

            html = await page.content()
            logger.info("Final HTML content: %d characters", len(html))
            return html

        except PlaywrightError as e:
            raise RenderError(f"Failed to navigate to {url}: {e}") from e

    async def query_all(self, selector: str) -> List[Element]:
        page = self._require_page()
        try:
            handles = await page.query_selector_all(selector)
        except PlaywrightError as e:
            raise _query_failure(selector, e) from e
        return [HandleElement(h) for h in handles]

    async def query_first(self, selector: str) -> Optional[Element]:
        page = self._require_page()
        try:
            handle = await page.query_selector(selector)
        except PlaywrightError as e:
            raise _query_failure(selector, e) from e
        return HandleElement(handle) if handle is not None else None

    async def close(self) -> None:
        browser, playwright = self.browser, self.playwright
        self.page = None
        self.browser = None
        self.playwright = None
        try:
            if browser:
                await browser.close()
        finally:
            if playwright:
                await playwright.stop()

    def _require_page(self) -> Page:
        if not self.page:
            raise RenderError("Browser not initialized. Use async with or call initialize() first.")
        return self.page

    async def _wait_for_content(self, page: Page):
        """Give listing-like elements a chance to appear; carry on if they never do."""
        try:
            await page.wait_for_function(
                _CONTENT_PROBE_SCRIPT,
                arg=CONTENT_PROBE_SELECTORS,
                timeout=CONTENT_PROBE_TIMEOUT_MS
            )
            logger.info("Listing elements detected")
        except PlaywrightError:
            logger.info("No listing elements found, continuing...")

    async def _scroll_page(self, page: Page):
        """Scroll down in small steps to trigger lazy loading."""
        await page.evaluate(
            _SCROLL_SCRIPT,
            {"step": SCROLL_STEP_PX, "interval": SCROLL_INTERVAL_MS, "maxDistance": SCROLL_MAX_PX}
        )
