"""
Retry with exponential backoff for transient database errors.

Usage:
    from querydiff.utils.retry import retry_database_operation

    @retry_database_operation(max_retries=3, base_delay=1.0)
    def fetch(cursor, query):
        cursor.execute(query)
        return cursor.fetchall()
"""

import logging
import random
import time
from collections.abc import Callable
from functools import wraps
from typing import Any, Optional

logger = logging.getLogger(__name__)

_RETRYABLE_PATTERNS = (
    "connection",
    "timeout",
    "timed out",
    "deadlock",
    "lock wait timeout",
    "server closed the connection",
    "communication link failure",
    "broken pipe",
    "network error",
)

_RETRYABLE_TYPES = ("operationalerror", "interfaceerror", "connectionerror", "timeouterror")


def is_retryable_db_exception(exception: Exception) -> bool:
    """
    Decide whether a driver exception is transient.

    Connection drops, timeouts and deadlocks are retryable; syntax errors,
    missing tables and constraint violations are not.
    """
    message = str(exception).lower()
    type_name = type(exception).__name__.lower()

    if type_name in _RETRYABLE_TYPES:
        return True
    return any(p in message or p in type_name for p in _RETRYABLE_PATTERNS)


def backoff_delay(attempt: int, base_delay: float, max_delay: float = 60.0) -> float:
    """Exponential delay for a 0-based attempt, with +/-25% jitter and a 0.1s floor."""
    delay = min(base_delay * (2.0 ** attempt), max_delay)
    jitter = delay * 0.25
    return max(0.1, delay + random.uniform(-jitter, jitter))


def retry_database_operation(
    max_retries: int = 3,
    base_delay: float = 1.0,
    on_retry: Optional[Callable[[int, Exception, float], None]] = None,
):
    """
    Retry the decorated call on transient database errors.

    Non-retryable errors propagate immediately; after max_retries the last
    error propagates.

    Args:
        max_retries: Retries after the first attempt
        base_delay: Delay before the first retry, in seconds
        on_retry: Callback(attempt, exception, delay) invoked before sleeping
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            func_name = getattr(func, "__name__", "function")

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if not is_retryable_db_exception(e):
                        logger.error(
                            f"Non-retryable database error in {func_name}: "
                            f"{type(e).__name__}: {e}"
                        )
                        raise
                    if attempt == max_retries:
                        logger.error(
                            f"Max retries ({max_retries}) exceeded for {func_name}: "
                            f"{type(e).__name__}: {e}"
                        )
                        raise

                    delay = backoff_delay(attempt, base_delay)
                    logger.warning(
                        f"Retryable database error in {func_name} "
                        f"(attempt {attempt + 1}/{max_retries}): "
                        f"{type(e).__name__}: {e}. Retrying in {delay:.2f}s..."
                    )
                    if on_retry:
                        on_retry(attempt + 1, e, delay)
                    time.sleep(delay)

        return wrapper
    return decorator
