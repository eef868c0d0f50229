"""
Backoff for database connectivity.

The API lifespan and the data generator script both check the database
before doing any work; a Postgres container that is still starting should
cost a few seconds, not a crashed process.
"""

import asyncio
import functools
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError

logger = logging.getLogger("hc_stock.utils.retry")

T = TypeVar("T")

TRANSIENT_MESSAGES = ("timeout", "connection refused", "connection reset", "temporarily")


@dataclass(frozen=True)
class RetryConfig:
    """How many extra attempts to make and how long to wait between them"""

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True

    def get_delay(self, retry_count: int) -> float:
        """Delay before retry number ``retry_count`` (0-based), capped at max_delay."""
        delay = min(self.base_delay * self.exponential_base ** retry_count, self.max_delay)
        if self.jitter:
            delay *= random.uniform(0.9, 1.1)
        return delay


def should_retry(exc: BaseException) -> bool:
    """True when ``exc`` looks like the database is unreachable rather than broken."""
    if isinstance(exc, (asyncio.TimeoutError, OSError, OperationalError, InterfaceError)):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    message = str(exc).lower()
    return any(fragment in message for fragment in TRANSIENT_MESSAGES)


def retry_with_backoff_async(
    config: Optional[RetryConfig] = None,
    on_retry: Optional[Callable[[int, BaseException, float], Any]] = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Retry an async callable on transient errors.

    ``on_retry(attempt, exc, delay)`` is called before each sleep. Non-transient
    errors and the final failure propagate unchanged.
    """
    config = config or RetryConfig()

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except Exception as exc:
                    if not should_retry(exc) or attempt >= config.max_retries:
                        logger.error(f"{func.__name__} failed after {attempt + 1} attempt(s): {exc}")
                        raise
                    delay = config.get_delay(attempt)
                    logger.warning(f"{func.__name__} unavailable ({exc}); retry {attempt + 1} in {delay:.1f}s")
                    if on_retry:
                        on_retry(attempt, exc, delay)
                    await asyncio.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
