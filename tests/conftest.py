import pytest

from fieldscraper.models import LLMConfig, ScrapeConfig
from tests.fakes import PRODUCT_HTML


@pytest.fixture
def product_html() -> str:
    return PRODUCT_HTML


@pytest.fixture
def scrape_config() -> ScrapeConfig:
    return ScrapeConfig(
        fields=["Name", "Price"],
        llm=LLMConfig(api_key="test-key"),
    )
