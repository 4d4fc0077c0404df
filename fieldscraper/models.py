from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import DEFAULT_MAX_RETRIES, DEFAULT_PROVIDER, DEFAULT_TIMEOUT_MS


Provider = Literal["gemini", "openai", "anthropic"]


class LLMConfig(BaseModel):
    """Settings for the text-completion provider."""
    provider: Provider = DEFAULT_PROVIDER
    api_key: str = Field(..., min_length=1)
    model: Optional[str] = None
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)


class ScrapeConfig(BaseModel):
    """Everything one scraping run needs besides the URL."""
    fields: List[str] = Field(..., description="Ordered field names, one column each")
    llm: LLMConfig
    custom_prompt: Optional[str] = None
    max_retries: int = Field(DEFAULT_MAX_RETRIES, ge=1)
    timeout_ms: int = Field(DEFAULT_TIMEOUT_MS, gt=0)
    container_selector: Optional[str] = None
    max_html_chars: Optional[int] = Field(None, gt=0)
    use_browser: bool = True
    headless: bool = True

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v):
        cleaned = [name.strip() for name in v]
        if not cleaned:
            raise ValueError("At least one field must be specified")
        if any(not name for name in cleaned):
            raise ValueError("Field names must not be blank")
        if len(set(cleaned)) != len(cleaned):
            raise ValueError("Field names must be unique")
        return cleaned

    @field_validator("custom_prompt", "container_selector")
    @classmethod
    def blank_to_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v


class SelectorMap(BaseModel):
    """Mapping of field names to CSS selectors, one entry per requested field."""
    selectors: Dict[str, str]
    fallback_fields: List[str] = Field(default_factory=list)
    container_selector: Optional[str] = None

    @field_validator("selectors")
    @classmethod
    def validate_selectors(cls, v):
        empty = [name for name, selector in v.items() if not selector or not selector.strip()]
        if empty:
            raise ValueError(f"Empty selector for fields: {empty}")
        return v

    @property
    def fields(self) -> List[str]:
        return list(self.selectors.keys())


class ResultMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    timestamp: datetime
    total_records: int
    fields: List[str]


class ScrapingResult(BaseModel):
    """Records from one successful run plus run metadata."""
    model_config = ConfigDict(frozen=True)

    data: List[Dict[str, str]]
    metadata: ResultMetadata

    @classmethod
    def build(cls, source: str, fields: List[str], records: List[Dict[str, str]]) -> "ScrapingResult":
        return cls(
            data=records,
            metadata=ResultMetadata(
                source=source,
                timestamp=datetime.now(timezone.utc),
                total_records=len(records),
                fields=list(fields),
            ),
        )

    @property
    def total_count(self) -> int:
        return self.metadata.total_records
