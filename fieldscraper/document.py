"""
Query interface over a rendered page.

Extraction only ever talks to ``Document``/``Element``, so the same code runs
against a live Playwright page or an in-memory selectolax tree.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from selectolax.parser import HTMLParser, Node


class Element(ABC):
    """A single matched element."""

    @abstractmethod
    async def text(self) -> str:
        """Trimmed text content; empty string when there is none."""

    @abstractmethod
    async def query_all(self, selector: str) -> List["Element"]:
        """Descendants matching ``selector``, in document order."""

    async def query_first(self, selector: str) -> Optional["Element"]:
        matches = await self.query_all(selector)
        return matches[0] if matches else None


class Document(ABC):
    """Something that can be queried with CSS selectors."""

    @abstractmethod
    async def query_all(self, selector: str) -> List[Element]:
        """All elements matching ``selector``, in document order."""

    async def query_first(self, selector: str) -> Optional[Element]:
        matches = await self.query_all(selector)
        return matches[0] if matches else None


class Renderer(Document):
    """
    Loads a page and exposes it as a queryable document.

    Use as an async context manager so the underlying resources are always
    released:

        async with renderer:
            html = await renderer.navigate(url, timeout_ms)
            elements = await renderer.query_all(".price")
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Acquire resources (browser, HTTP client, ...)."""

    @abstractmethod
    async def navigate(self, url: str, timeout_ms: int) -> str:
        """Load ``url`` and return its rendered HTML."""

    @abstractmethod
    async def close(self) -> None:
        """Release resources. Safe to call more than once."""

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class NodeElement(Element):
    def __init__(self, node: Node):
        self.node = node

    async def text(self) -> str:
        return (self.node.text(deep=True) or "").strip()

    async def query_all(self, selector: str) -> List[Element]:
        return [NodeElement(node) for node in self.node.css(selector)]


class HTMLDocument(Document):
    """In-memory document parsed with selectolax."""

    def __init__(self, html: str):
        self.html = html
        self.tree = HTMLParser(html)

    async def query_all(self, selector: str) -> List[Element]:
        return [NodeElement(node) for node in self.tree.css(selector)]

    async def query_first(self, selector: str) -> Optional[Element]:
        node = self.tree.css_first(selector)
        return NodeElement(node) if node is not None else None
