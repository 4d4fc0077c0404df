"""
Text-completion clients used for selector inference.

Every provider exposes the same single coroutine, ``generate_text``. Transport,
authentication and quota problems all surface as ``CompletionError``.
"""

import logging
from abc import ABC, abstractmethod
import httpx

from .config import (
    COMPLETION_TIMEOUT,
    DEFAULT_MODELS,
    DEFAULT_TEMPERATURE,
    GEMINI_API_URL,
    OPENAI_API_URL,
)
from .errors import CompletionError, UnsupportedProviderError
from .models import LLMConfig

logger = logging.getLogger(__name__)


class CompletionClient(ABC):
    """Submit a prompt, receive text."""

    def __init__(self, config: LLMConfig):
        self.config = config
        self.api_key = config.api_key
        self.model = config.model or DEFAULT_MODELS[config.provider]
        self.temperature = (
            config.temperature if config.temperature is not None else DEFAULT_TEMPERATURE
        )

    @abstractmethod
    async def generate_text(self, prompt: str) -> str:
        """Return the completion text for ``prompt``."""


class GeminiClient(CompletionClient):
    """Google Gemini through the generateContent REST endpoint."""

    async def generate_text(self, prompt: str) -> str:
        logger.debug("Sending %d-char prompt to Gemini (%s)", len(prompt), self.model)
        try:
            async with httpx.AsyncClient(timeout=COMPLETION_TIMEOUT) as client:
                response = await client.post(
                    GEMINI_API_URL.format(model=self.model),
                    headers={
                        "x-goog-api-key": self.api_key,
                        "Content-Type": "application/json"
                    },
                    json={
                        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                        "generationConfig": {"temperature": self.temperature}
                    }
                )
                response.raise_for_status()
                result = response.json()

            parts = result["candidates"][0]["content"]["parts"]
            return "".join(part.get("text", "") for part in parts)

        except httpx.HTTPStatusError as e:
            raise CompletionError(
                f"Gemini API error {e.response.status_code}: {e.response.text[:300]}"
            ) from e
        except httpx.HTTPError as e:
            raise CompletionError(f"Gemini request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise CompletionError(f"Unexpected Gemini response: {e!r}") from e


class OpenAIClient(CompletionClient):
    """OpenAI chat completions."""

    async def generate_text(self, prompt: str) -> str:
        logger.debug("Sending %d-char prompt to OpenAI (%s)", len(prompt), self.model)
        try:
            async with httpx.AsyncClient(timeout=COMPLETION_TIMEOUT) as client:
                response = await client.post(
                    OPENAI_API_URL,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json"
                    },
                    json={
                        "model": self.model,
                        "messages": [
                            {
                                "role": "system",
                                "content": "You are an expert web scraping analyst. You reply with valid JSON only."
                            },
                            {
                                "role": "user",
                                "content": prompt
                            }
                        ],
                        "temperature": self.temperature
                    }
                )
                response.raise_for_status()
                result = response.json()

            return result["choices"][0]["message"]["content"] or ""

        except httpx.HTTPStatusError as e:
            if e.response.status_code == 429:
                raise CompletionError("OpenAI rate limit or quota exceeded (429)") from e
            raise CompletionError(
                f"OpenAI API error {e.response.status_code}: {e.response.text[:300]}"
            ) from e
        except httpx.HTTPError as e:
            raise CompletionError(f"OpenAI request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise CompletionError(f"Unexpected OpenAI response: {e!r}") from e


class AnthropicClient(CompletionClient):
    """Reserved; not implemented yet."""

    async def generate_text(self, prompt: str) -> str:
        raise UnsupportedProviderError("anthropic")


_PROVIDERS = {
    "gemini": GeminiClient,
    "openai": OpenAIClient,
    "anthropic": AnthropicClient,
}


def create_client(config: LLMConfig) -> CompletionClient:
    """Pick the client class for the configured provider."""
    client_cls = _PROVIDERS.get(config.provider)
    if client_cls is None:
        raise UnsupportedProviderError(config.provider)
    return client_cls(config)
