"""
Retry decorator with exponential backoff for query-engine calls

Provides retry logic for transient failures with:
- Exponential backoff (base 2.0) capped at max_delay
- Jitter to prevent thundering herd
- Transient-error classification (connection, timeout, ...)
- Callback support for metrics integration

Usage:
    from src.utils.retry import retry_query

    @retry_query(max_retries=2, base_delay=1.0)
    def count_rows(cursor, query):
        cursor.execute(query)
        return cursor.fetchone()[0]
"""

import logging
import random
import time
from collections.abc import Callable
from functools import wraps
from typing import Any

logger = logging.getLogger(__name__)

# Substrings of exception messages/type names that indicate a transient failure
TRANSIENT_ERROR_PATTERNS = (
    "connection",
    "timeout",
    "timed out",
    "broken pipe",
    "network error",
    "communication link failure",
    "unable to connect",
    "can't connect",
    "ttransportexception",
    "socket",
)

TRANSIENT_ERROR_TYPES = (
    "connectionerror",
    "timeouterror",
    "operationalerror",
    "interfaceerror",
)


def is_retryable_query_exception(exception: Exception) -> bool:
    """
    Determine if a query failure is transient and worth retrying

    Syntax errors, missing tables and permission problems are not retryable.

    Args:
        exception: The exception to check

    Returns:
        True if the exception is retryable, False otherwise
    """
    exception_str = str(exception).lower()
    exception_type = type(exception).__name__.lower()

    if exception_type in TRANSIENT_ERROR_TYPES:
        return True

    return any(
        pattern in exception_str or pattern in exception_type
        for pattern in TRANSIENT_ERROR_PATTERNS
    )


def compute_backoff_delay(
    attempt: int,
    base_delay: float,
    max_delay: float = 60.0,
    jitter: bool = True,
) -> float:
    """
    Delay before retry number `attempt` (0-based)

    Jitter is +/-25% of the delay, with a floor of 0.1s.
    """
    delay = min(base_delay * (2.0 ** attempt), max_delay)
    if jitter:
        jitter_amount = delay * 0.25
        delay = max(0.1, delay + random.uniform(-jitter_amount, jitter_amount))
    return delay


def retry_query(
    max_retries: int = 2,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    jitter: bool = True,
    is_retryable: Callable[[Exception], bool] = is_retryable_query_exception,
    on_retry: Callable[[int, Exception, float], None] | None = None,
):
    """
    Decorator that retries transient query failures with exponential backoff

    Non-retryable exceptions and the last failure are re-raised unchanged.

    Args:
        max_retries: Maximum number of retry attempts (0 disables retrying)
        base_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        jitter: Add random jitter to the delay
        is_retryable: Classifier deciding whether an exception is transient
        on_retry: Callback function(attempt, exception, delay) called on each retry

    Returns:
        Decorated function with retry logic
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            func_name = getattr(func, '__name__', 'function')

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)

                except Exception as e:
                    if not is_retryable(e):
                        logger.error(
                            f"Non-retryable error in {func_name}: {type(e).__name__}: {e}"
                        )
                        raise

                    if attempt == max_retries:
                        logger.error(
                            f"Max retries ({max_retries}) exceeded for {func_name}: "
                            f"{type(e).__name__}: {e}"
                        )
                        raise

                    delay = compute_backoff_delay(attempt, base_delay, max_delay, jitter)

                    logger.warning(
                        f"Transient error in {func_name} "
                        f"(attempt {attempt + 1}/{max_retries}): "
                        f"{type(e).__name__}: {e}. Retrying in {delay:.2f}s..."
                    )

                    if on_retry:
                        try:
                            on_retry(attempt + 1, e, delay)
                        except Exception as callback_error:
                            logger.error(f"Error in retry callback: {callback_error}")

                    time.sleep(delay)

            raise RuntimeError(f"Unexpected error in retry logic for {func_name}")

        return wrapper
    return decorator
