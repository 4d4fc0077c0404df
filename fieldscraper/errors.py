"""
Error types raised by the scraping pipeline.

Only errors marked ``retryable`` make the retry loop try again; anything
else is raised to the caller straight away.
"""


class ScraperError(Exception):
    """Base class for all fieldscraper errors."""
    retryable = False


class RenderError(ScraperError):
    """Browser start-up or page navigation failed."""
    retryable = True


class CompletionError(ScraperError):
    """The text-completion service could not produce an answer."""
    retryable = True

    def __init__(self, cause):
        self.cause = cause
        super().__init__(f"completion failed: {cause}")


class UnsupportedProviderError(CompletionError):
    """A provider that is known but has no implementation yet."""
    retryable = False

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"unsupported provider '{provider}' (not implemented yet)")


class ExportError(ScraperError):
    """Writing a result to disk failed."""


class RetryExhaustedError(ScraperError):
    """Every attempt failed; carries the last underlying error."""

    def __init__(self, attempts: int, last_error: Exception):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Scraping failed after {attempts} attempts. Last error: {last_error}"
        )
