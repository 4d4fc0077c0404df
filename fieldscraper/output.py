"""
Console, CSV and JSON rendering of scraping results.
"""

import csv
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Optional, Union

from .config import CONSOLE_SAMPLE_SIZE
from .errors import ExportError
from .models import ScrapingResult


OutputFormat = Literal["console", "csv", "json"]


def _default_path(extension: str) -> str:
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
    return f"scraped-data-{timestamp}.{extension}"


class OutputManager:
    """Formats and persists a ScrapingResult."""

    @staticmethod
    def to_csv(result: ScrapingResult, output_path: Optional[str] = None) -> Path:
        """
        Write records as CSV, one column per field in request order.

        Args:
            result: Result to export
            output_path: Target file, relative to the working directory

        Returns:
            Absolute path of the written file

        Raises:
            ExportError: If there are no records or the file cannot be written
        """
        if not result.data:
            raise ExportError("No data to export")

        full_path = Path(output_path or _default_path("csv")).resolve()
        try:
            with open(full_path, "w", newline="", encoding="utf-8") as f:
                writer = csv.DictWriter(f, fieldnames=result.metadata.fields, extrasaction="ignore")
                writer.writeheader()
                writer.writerows(result.data)
        except OSError as e:
            raise ExportError(f"Failed to write CSV file: {e}") from e

        return full_path

    @staticmethod
    def to_json(result: ScrapingResult, output_path: Optional[str] = None) -> Path:
        """Write the full result (data and metadata) as pretty-printed JSON."""
        full_path = Path(output_path or _default_path("json")).resolve()
        try:
            full_path.write_text(result.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Failed to write JSON file: {e}") from e

        return full_path

    @staticmethod
    def format_console(result: ScrapingResult, sample_size: int = CONSOLE_SAMPLE_SIZE) -> str:
        metadata = result.metadata
        lines = [
            "",
            "=== Scraping Results ===",
            f"URL: {metadata.source}",
            f"Timestamp: {metadata.timestamp.isoformat()}",
            f"Total Records: {metadata.total_records}",
            f"Keys: {', '.join(metadata.fields)}",
            "",
        ]

        if not result.data:
            lines.append("No data found.")
            return "\n".join(lines) + "\n"

        shown = result.data[:sample_size]
        lines.append(f"Sample Data (showing {len(shown)} of {len(result.data)} records):")
        lines.append("=" * 80)

        for i, record in enumerate(shown, 1):
            lines.append("")
            lines.append(f"Record {i}:")
            for key in metadata.fields:
                lines.append(f"  {key}: {record.get(key) or 'N/A'}")

        if len(result.data) > sample_size:
            lines.append("")
            lines.append(f"... and {len(result.data) - sample_size} more records")

        return "\n".join(lines) + "\n"

    @classmethod
    def export(
        cls,
        result: ScrapingResult,
        fmt: OutputFormat,
        output_path: Optional[str] = None
    ) -> Union[Path, str]:
        """Console returns the formatted text; csv/json return the written path."""
        if fmt == "console":
            return cls.format_console(result)
        if fmt == "csv":
            return cls.to_csv(result, output_path)
        if fmt == "json":
            return cls.to_json(result, output_path)
        raise ValueError(f"Unknown output format: {fmt}")
