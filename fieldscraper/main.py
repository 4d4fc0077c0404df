import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.json import JSON
from rich.logging import RichHandler

from .config import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT_MS, settings
from .core import FieldScraper
from .errors import ScraperError
from .models import LLMConfig, ScrapeConfig
from .output import OutputManager


app = typer.Typer(help="AI-powered web scraping: LLM-inferred CSS selectors for the fields you ask for")
console = Console()
err_console = Console(stderr=True)


@app.command()
def run(
    url: str = typer.Argument(..., help="URL (or local HTML file) to scrape"),
    keys: Optional[str] = typer.Option(
        None,
        "--keys",
        "-k",
        help='Comma-separated list of data fields to extract, e.g. "Product Name,Price"'
    ),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="LLM provider API key"),
    provider: Optional[str] = typer.Option(None, "--provider", help="LLM provider: gemini, openai or anthropic"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model to use (provider default if omitted)"),
    timeout: int = typer.Option(DEFAULT_TIMEOUT_MS, "--timeout", help="Page load timeout in ms"),
    custom_prompt: Optional[str] = typer.Option(None, "--custom-prompt", help="Additional instructions for the AI"),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Save results to this file instead of printing them (.csv for CSV, otherwise JSON)"
    ),
    output_format: Optional[str] = typer.Option(None, "--format", "-f", help="File format: csv or json"),
    retries: int = typer.Option(DEFAULT_MAX_RETRIES, "--retries", help="Maximum scraping attempts"),
    container: Optional[str] = typer.Option(
        None,
        "--container",
        help="CSS selector of the repeated item; fields are then looked up inside each item"
    ),
    static: bool = typer.Option(False, "--static", help="Fetch with plain HTTP instead of a browser (no JavaScript)"),
    headful: bool = typer.Option(False, "--headful", help="Show the browser window"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show warnings and errors")
):
    """Scrape a page and extract the requested fields."""

    _configure_logging(verbose, quiet)
    fmt = _resolve_format(output, output_format)
    config = _build_config(
        keys, api_key, provider, model, timeout, custom_prompt,
        retries, container, static, headful
    )

    console.print(f"[cyan]URL:[/cyan] {url}")
    console.print(f"[cyan]Keys:[/cyan] {', '.join(config.fields)}")

    scraper = FieldScraper(config)
    try:
        result = asyncio.run(scraper.scrape_with_retry(url))
    except ScraperError as e:
        err_console.print(f"[red]Scraping failed: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[green]Extracted {result.total_count} records[/green]")
    if result.total_count == 0:
        console.print("[yellow]No data found. Try adjusting your keys or adding a custom prompt.[/yellow]")

    if output:
        try:
            path = OutputManager.export(result, fmt, output)
        except ScraperError as e:
            err_console.print(f"[red]Export failed: {e}[/red]")
            raise typer.Exit(1)
        console.print(f"[green]Saved to {path}[/green]")
    else:
        console.print(OutputManager.format_console(result), markup=False, highlight=False)
        console.print(JSON(result.model_dump_json(indent=2)))


@app.command()
def selectors(
    url: str = typer.Argument(..., help="URL (or local HTML file) to test"),
    keys: Optional[str] = typer.Option(None, "--keys", "-k", help="Comma-separated list of data fields"),
    api_key: Optional[str] = typer.Option(None, "--api-key"),
    provider: Optional[str] = typer.Option(None, "--provider"),
    model: Optional[str] = typer.Option(None, "--model", "-m"),
    timeout: int = typer.Option(DEFAULT_TIMEOUT_MS, "--timeout"),
    custom_prompt: Optional[str] = typer.Option(None, "--custom-prompt"),
    container: Optional[str] = typer.Option(None, "--container"),
    static: bool = typer.Option(False, "--static"),
    verbose: bool = typer.Option(False, "--verbose", "-v")
):
    """Test LLM selector inference on a URL."""

    _configure_logging(verbose, False)
    config = _build_config(
        keys, api_key, provider, model, timeout, custom_prompt,
        1, container, static, False
    )

    console.print(f"[cyan]Testing selector inference for:[/cyan] {url}")
    scraper = FieldScraper(config)
    try:
        result = asyncio.run(scraper.test_selectors(url))
    except ScraperError as e:
        err_console.print(f"[red]Selector test failed: {e}[/red]")
        raise typer.Exit(1)

    console.print("\n[green]Inferred Selectors:[/green]")
    console.print(JSON(json.dumps(result["selector_map"], indent=2)))

    console.print(f"\n[green]Sample Records ({result['total_sample_count']} found):[/green]")
    console.print(JSON(json.dumps(result["sample_records"], indent=2)))


def _parse_keys(keys: Optional[str]) -> List[str]:
    if not keys:
        return []
    return [key.strip() for key in keys.split(",") if key.strip()]


def _resolve_format(output: Optional[str], output_format: Optional[str]) -> str:
    """Explicit --format wins; otherwise the --output suffix decides."""
    if output_format:
        fmt = output_format.lower()
        if fmt not in ("csv", "json"):
            err_console.print("[red]Error: --format must be csv or json[/red]")
            raise typer.Exit(1)
        return fmt
    if output and Path(output).suffix.lower() == ".csv":
        return "csv"
    return "json"


def _build_config(
    keys: Optional[str],
    api_key: Optional[str],
    provider: Optional[str],
    model: Optional[str],
    timeout: int,
    custom_prompt: Optional[str],
    retries: int,
    container: Optional[str],
    static: bool,
    headful: bool
) -> ScrapeConfig:
    fields = _parse_keys(keys)
    if not fields:
        err_console.print('[red]Error: Please provide data keys with --keys "key1,key2,key3"[/red]')
        raise typer.Exit(1)

    api_key = api_key or settings.api_key
    if not api_key:
        err_console.print("[red]Error: Please provide an API key with --api-key (or set FIELDSCRAPER_API_KEY)[/red]")
        raise typer.Exit(1)

    try:
        return ScrapeConfig(
            fields=fields,
            llm=LLMConfig(
                provider=provider or settings.provider,
                api_key=api_key,
                model=model or settings.model
            ),
            custom_prompt=custom_prompt,
            max_retries=retries,
            timeout_ms=timeout,
            container_selector=container,
            use_browser=not static,
            headless=settings.headless and not headful
        )
    except ValidationError as e:
        err_console.print(f"[red]Error: Invalid options:[/red]\n{e}")
        raise typer.Exit(1)


def _configure_logging(verbose: bool, quiet: bool):
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, markup=False)],
        force=True
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


if __name__ == "__main__":
    app()
