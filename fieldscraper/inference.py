"""
LLM-assisted CSS selector inference with heuristic fallbacks.
"""

import json
import logging
from typing import Any, List, Optional

from .llm import CompletionClient
from .models import SelectorMap
from .prompts import build_prompt
from .sanitizer import clean_html

logger = logging.getLogger(__name__)

# Checked in order, first keyword hit wins
_FALLBACK_RULES = [
    (("name", "title"), 'h1, h2, h3, .title, .name, [data-testid*="title"], [data-testid*="name"]'),
    (("price",), '.price, .cost, .amount, [data-testid*="price"], [class*="price"]'),
    (("category",), '.category, .breadcrumb, .tags, [data-testid*="category"]'),
    (("description",), '.description, .summary, .content, p'),
]


def fallback_selector(field: str) -> str:
    """Guess a multi-candidate selector from the field name alone."""
    key = field.lower()
    for keywords, selector in _FALLBACK_RULES:
        if any(keyword in key for keyword in keywords):
            return selector
    return f'[data-testid*="{key}"], [class*="{key}"], [id*="{key}"]'


def _json_block(text: str) -> Optional[str]:
    """Text from the first ``{`` to the last ``}``, or None."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start:end + 1]


def _as_selector(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, list):
        candidates = [item.strip() for item in value if isinstance(item, str) and item.strip()]
        return ", ".join(candidates) if candidates else None
    return None


def parse_selectors(response: str, fields: List[str]) -> SelectorMap:
    """
    Turn a free-form completion into a selector map.

    Takes the text from the first ``{`` to the last ``}`` and decodes it as
    JSON. Fields the model answered are used as-is; every other field gets a
    fallback selector. Never raises for any completion text.
    """
    parsed = None
    block = _json_block(response or "")

    if block is None:
        logger.warning("No JSON found in AI response: %r", (response or "")[:300])
    else:
        try:
            parsed = json.loads(block)
        except (ValueError, RecursionError) as e:
            logger.warning("Failed to parse AI response, using fallback selectors: %s", e)
        else:
            if not isinstance(parsed, dict):
                logger.warning("AI response JSON is not an object, using fallback selectors")
                parsed = None

    selectors = {}
    fallback_fields = []
    for field in fields:
        selector = _as_selector(parsed.get(field)) if parsed is not None else None
        if selector is None:
            if parsed is not None:
                logger.warning("Field '%s' not found in AI response, using fallback", field)
            selector = fallback_selector(field)
            fallback_fields.append(field)
        selectors[field] = selector

    return SelectorMap(selectors=selectors, fallback_fields=fallback_fields)


class SelectorInference:
    """Asks a completion client for CSS selectors matching the requested fields."""

    def __init__(self, client: CompletionClient, max_html_chars: Optional[int] = None):
        self.client = client
        self.max_html_chars = max_html_chars

    async def generate_selectors(
        self,
        html: str,
        fields: List[str],
        custom_prompt: Optional[str] = None
    ) -> SelectorMap:
        """
        Infer a selector for every field from a rendered page.

        Args:
            html: Raw HTML of the rendered page
            fields: Ordered field names
            custom_prompt: Extra instructions passed verbatim to the model

        Returns:
            SelectorMap with exactly one selector per field

        Raises:
            CompletionError: If the completion service fails
        """
        cleaned = clean_html(html, max_chars=self.max_html_chars)
        logger.info("Cleaned HTML length: %d characters (raw %d)", len(cleaned), len(html))

        prompt = build_prompt(cleaned, fields, custom_prompt)
        response = await self.client.generate_text(prompt)
        logger.debug("AI response:\n%s", response)

        selector_map = parse_selectors(response, fields)
        if selector_map.fallback_fields:
            logger.warning(
                "Using fallback selectors for: %s", ", ".join(selector_map.fallback_fields)
            )
        return selector_map
