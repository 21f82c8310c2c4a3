import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sitewave.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

NON_RETRYABLE_MARKERS = ("unauthorized", "401", "bad request", "400", "quota exceeded")


def should_not_retry(error: Exception) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in NON_RETRYABLE_MARKERS)


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    context: str | None = None,
    max_retries: int | None = None,
    retry_delay: float | None = None,
) -> T:
    """
    Await ``operation()`` up to ``max_retries`` times, sleeping
    ``retry_delay * attempt`` seconds between attempts. Auth, bad-request and
    quota errors are raised without retrying.
    """
    attempts = max_retries if max_retries is not None else settings.AI_MAX_RETRIES
    delay = retry_delay if retry_delay is not None else settings.AI_RETRY_DELAY
    suffix = f" ({context})" if context else ""

    last_error: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except Exception as exc:
            last_error = exc
            logger.warning("AI request attempt %s failed%s: %s", attempt, suffix, exc)
            if should_not_retry(exc):
                break
            if attempt < attempts:
                await asyncio.sleep(delay * attempt)

    logger.error("AI request failed after retries%s: %s", suffix, last_error)
    if last_error is None:
        raise RuntimeError("execute_with_retry needs at least one attempt")
    raise last_error
