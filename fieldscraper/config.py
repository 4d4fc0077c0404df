"""
Default values and environment-backed settings.
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


DEFAULT_PROVIDER = "gemini"

DEFAULT_MODELS = {
    "gemini": "gemini-2.5-pro",
    "openai": "gpt-4o-mini",
    "anthropic": "claude-sonnet-4-20250514",
}

# Low temperature keeps selector answers stable between runs
DEFAULT_TEMPERATURE = 0.3

DEFAULT_TIMEOUT_MS = 30000
DEFAULT_MAX_RETRIES = 3
RETRY_BASE_DELAY = 1.0

COMPLETION_TIMEOUT = 60.0

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
VIEWPORT = {"width": 1920, "height": 1080}
BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]

CONTENT_PROBE_SELECTORS = [
    '[class*="product"]',
    '[class*="item"]',
    '[data-testid*="product"]',
    '[data-testid*="item"]',
    "article",
    ".price",
    '[class*="price"]',
]
CONTENT_PROBE_TIMEOUT_MS = 10000
SETTLE_DELAY = 3.0
SCROLL_STEP_PX = 100
SCROLL_INTERVAL_MS = 100
SCROLL_MAX_PX = 3000
FINAL_SETTLE_DELAY = 2.0

CONSOLE_SAMPLE_SIZE = 5


def _env_api_key() -> Optional[str]:
    return (
        os.getenv("FIELDSCRAPER_API_KEY")
        or os.getenv("GEMINI_API_KEY")
        or os.getenv("OPENAI_API_KEY")
    )


@dataclass
class Settings:
    """Values picked up from the environment (or a .env file)."""
    provider: str = field(
        default_factory=lambda: os.getenv("FIELDSCRAPER_PROVIDER", DEFAULT_PROVIDER)
    )
    api_key: Optional[str] = field(default_factory=_env_api_key)
    model: Optional[str] = field(
        default_factory=lambda: os.getenv("FIELDSCRAPER_MODEL") or None
    )
    headless: bool = field(
        default_factory=lambda: os.getenv("FIELDSCRAPER_HEADLESS", "true").lower() in ["true", "1", "yes"]
    )


settings = Settings()
