import logging
import time
from typing import Callable, Dict, List, Optional, Tuple
from .browser import BrowserRenderer
from .document import Renderer
from .fetcher import StaticRenderer
from .inference import SelectorInference
from .llm import CompletionClient, create_client
from .models import ScrapeConfig, ScrapingResult, SelectorMap
from .parser import RecordExtractor
from .retry import retry_async

logger = logging.getLogger(__name__)


class FieldScraper:
    """Main orchestrator: render a page, infer selectors, extract records."""

    def __init__(
        self,
        config: ScrapeConfig,
        client: Optional[CompletionClient] = None,
        renderer_factory: Optional[Callable[[], Renderer]] = None
    ):
        self.config = config
        self.inference = SelectorInference(
            client or create_client(config.llm),
            max_html_chars=config.max_html_chars
        )
        self.extractor = RecordExtractor()
        self.renderer_factory = renderer_factory or self._default_renderer

    async def scrape(self, url: str) -> ScrapingResult:
        """Single attempt. The renderer is closed on every exit path."""
        start = time.monotonic()

        async with self.renderer_factory() as renderer:
            _, records = await self._run_pipeline(renderer, url)

        logger.info("Total execution time: %.1fs", time.monotonic() - start)
        return ScrapingResult.build(url, self.config.fields, records)

    async def scrape_with_retry(self, url: str) -> ScrapingResult:
        """Run ``scrape`` with exponential-backoff retries; each attempt starts from scratch."""
        return await retry_async(
            lambda: self.scrape(url),
            max_retries=self.config.max_retries
        )

    async def test_selectors(self, url: str) -> dict:
        """Test selector inference without building a result."""
        async with self.renderer_factory() as renderer:
            selector_map, records = await self._run_pipeline(renderer, url)

        return {
            "selector_map": selector_map.model_dump(),
            "sample_records": records[:3],
            "total_sample_count": len(records)
        }

    async def _run_pipeline(
        self,
        renderer: Renderer,
        url: str
    ) -> Tuple[SelectorMap, List[Dict[str, str]]]:
        html = await renderer.navigate(url, self.config.timeout_ms)
        logger.info("Successfully loaded page (%d characters)", len(html))

        logger.info("Generating selectors for fields: %s", ", ".join(self.config.fields))
        selector_map = await self.inference.generate_selectors(
            html,
            self.config.fields,
            self.config.custom_prompt
        )
        if self.config.container_selector:
            selector_map = selector_map.model_copy(
                update={"container_selector": self.config.container_selector}
            )

        for field_name, selector in selector_map.selectors.items():
            logger.info("  - %s: %s", field_name, selector)

        records = await self.extractor.extract(renderer, selector_map)
        return selector_map, records

    def _default_renderer(self) -> Renderer:
        if self.config.use_browser:
            return BrowserRenderer(headless=self.config.headless)
        return StaticRenderer()
