"""
Static rendering with httpx (or a local file) for pages that need no JavaScript.
"""

import logging
from pathlib import Path
from typing import List, Optional
from urllib.parse import unquote, urlparse
import httpx

from .config import USER_AGENT
from .document import Element, HTMLDocument, Renderer
from .errors import RenderError

logger = logging.getLogger(__name__)


HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1"
}


def _local_path(source: str) -> Optional[Path]:
    parsed = urlparse(source)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    if parsed.scheme in ("http", "https"):
        return None
    return Path(source)


class StaticRenderer(Renderer):
    """Fetches raw HTML and queries it in memory."""

    def __init__(self):
        self.client: Optional[httpx.AsyncClient] = None
        self.document: Optional[HTMLDocument] = None

    async def initialize(self) -> None:
        self.client = httpx.AsyncClient(follow_redirects=True, headers=HEADERS)

    async def navigate(self, url: str, timeout_ms: int) -> str:
        path = _local_path(url)
        if path is not None:
            html = self._read_file(path)
        else:
            html = await self._fetch(url, timeout_ms)

        logger.info("Loaded %s (%d characters)", url, len(html))
        self.document = HTMLDocument(html)
        return html

    async def query_all(self, selector: str) -> List[Element]:
        return await self._require_document().query_all(selector)

    async def query_first(self, selector: str) -> Optional[Element]:
        return await self._require_document().query_first(selector)

    async def close(self) -> None:
        client = self.client
        self.client = None
        if client:
            await client.aclose()

    async def _fetch(self, url: str, timeout_ms: int) -> str:
        if not self.client:
            raise RenderError("HTTP client not initialized. Use async with or call initialize() first.")

        logger.info("Fetching page: %s", url)
        try:
            response = await self.client.get(url, timeout=timeout_ms / 1000)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RenderError(f"Failed to fetch {url}: {e}") from e
        return response.text

    def _read_file(self, path: Path) -> str:
        logger.info("Reading local file: %s", path)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise RenderError(f"Failed to read {path}: {e}") from e

    def _require_document(self) -> HTMLDocument:
        if self.document is None:
            raise RenderError("No page loaded. Call navigate() first.")
        return self.document
