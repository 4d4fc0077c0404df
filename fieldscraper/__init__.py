"""
AI-assisted structured scraping: LLM-inferred CSS selectors for requested fields.
"""

from .models import LLMConfig, ScrapeConfig, SelectorMap, ResultMetadata, ScrapingResult
from .errors import (
    ScraperError,
    RenderError,
    CompletionError,
    UnsupportedProviderError,
    ExportError,
    RetryExhaustedError,
)
from .sanitizer import clean_html
from .prompts import build_prompt
from .llm import CompletionClient, GeminiClient, OpenAIClient, AnthropicClient, create_client
from .inference import SelectorInference, parse_selectors, fallback_selector
from .document import Element, Document, Renderer, HTMLDocument
from .browser import BrowserRenderer
from .fetcher import StaticRenderer
from .parser import RecordExtractor
from .retry import retry_async
from .core import FieldScraper
from .output import OutputManager

__version__ = "1.0.0"

__all__ = [
    "LLMConfig",
    "ScrapeConfig",
    "SelectorMap",
    "ResultMetadata",
    "ScrapingResult",
    "ScraperError",
    "RenderError",
    "CompletionError",
    "UnsupportedProviderError",
    "ExportError",
    "RetryExhaustedError",
    "clean_html",
    "build_prompt",
    "CompletionClient",
    "GeminiClient",
    "OpenAIClient",
    "AnthropicClient",
    "create_client",
    "SelectorInference",
    "parse_selectors",
    "fallback_selector",
    "Element",
    "Document",
    "Renderer",
    "HTMLDocument",
    "BrowserRenderer",
    "StaticRenderer",
    "RecordExtractor",
    "retry_async",
    "FieldScraper",
    "OutputManager",
]
