"""
Bounded exponential-backoff retries for whole scraping attempts.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from .config import DEFAULT_MAX_RETRIES, RETRY_BASE_DELAY
from .errors import RetryExhaustedError, ScraperError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = RETRY_BASE_DELAY
) -> T:
    """
    Run ``operation`` until it succeeds or the attempts run out.

    After failed attempt ``n`` the loop waits ``2 ** n * base_delay`` seconds.
    Only retryable ``ScraperError`` subclasses trigger another attempt; other
    exceptions propagate immediately.

    Args:
        operation: Zero-argument coroutine factory; called once per attempt
        max_retries: Total number of attempts
        base_delay: Backoff unit in seconds

    Raises:
        RetryExhaustedError: After ``max_retries`` failed attempts
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    last_error = None

    for attempt in range(1, max_retries + 1):
        logger.info("Attempt %d/%d", attempt, max_retries)
        try:
            return await operation()
        except ScraperError as e:
            if not e.retryable:
                raise
            last_error = e
            logger.warning("Attempt %d failed: %s", attempt, e)

        if attempt < max_retries:
            delay = (2 ** attempt) * base_delay
            logger.warning("Waiting %.1fs before retry...", delay)
            await asyncio.sleep(delay)

    raise RetryExhaustedError(max_retries, last_error) from last_error
