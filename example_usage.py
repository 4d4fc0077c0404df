"""
Example usage of fieldscraper as a library.
"""

import asyncio
import json
from fieldscraper import FieldScraper, LLMConfig, OutputManager, ScrapeConfig, ScraperError
from fieldscraper.config import settings


async def example_1_basic_usage():
    """Scrape a listing page and save it as CSV."""
    print("=" * 60)
    print("Example 1: Basic Scraping")
    print("=" * 60)

    config = ScrapeConfig(
        fields=["Product Name", "Price", "Rating"],
        llm=LLMConfig(provider=settings.provider, api_key=settings.api_key)
    )
    scraper = FieldScraper(config)

    # Replace with an actual listing URL
    url = "https://example.com/products"

    try:
        result = await scraper.scrape_with_retry(url)
        print(OutputManager.format_console(result))

        if result.total_count:
            path = OutputManager.to_csv(result, "products.csv")
            print(f"Saved to {path}")

    except ScraperError as e:
        print(f"Error: {e}")


async def example_2_test_selectors():
    """Check which selectors the model picks without saving anything."""
    print("\n" + "=" * 60)
    print("Example 2: Test Selector Inference")
    print("=" * 60)

    config = ScrapeConfig(
        fields=["Title", "Author"],
        llm=LLMConfig(provider=settings.provider, api_key=settings.api_key),
        max_retries=1
    )
    scraper = FieldScraper(config)

    url = "https://example.com/books"

    try:
        result = await scraper.test_selectors(url)

        print("\nInferred Selectors:")
        print(json.dumps(result["selector_map"], indent=2))

        print(f"\nSample Records ({result['total_sample_count']} found):")
        print(json.dumps(result["sample_records"], indent=2))

    except ScraperError as e:
        print(f"Error: {e}")


async def example_3_container_static():
    """Container-anchored extraction over plain HTTP, no browser."""
    print("\n" + "=" * 60)
    print("Example 3: Container Mode Without a Browser")
    print("=" * 60)

    config = ScrapeConfig(
        fields=["Company", "Industry", "Website"],
        llm=LLMConfig(provider=settings.provider, api_key=settings.api_key),
        container_selector=".company-card",
        custom_prompt="Selectors must be relative to a single .company-card element",
        use_browser=False
    )
    scraper = FieldScraper(config)

    url = "https://example.com/companies"

    try:
        result = await scraper.scrape(url)
        print(f"\nExtracted {result.total_count} companies")
        print(result.model_dump_json(indent=2))

    except ScraperError as e:
        print(f"Error: {e}")


def main():
    """Run examples."""
    print("fieldscraper - Example Usage\n")
    print("Note: Replace example URLs with actual listing URLs")
    print("Set FIELDSCRAPER_API_KEY (or GEMINI_API_KEY) before running\n")

    if not settings.api_key:
        print("No API key configured")
        return

    # Run examples (comment out as needed)
    asyncio.run(example_1_basic_usage())
    # asyncio.run(example_2_test_selectors())
    # asyncio.run(example_3_container_static())


if __name__ == "__main__":
    main()
