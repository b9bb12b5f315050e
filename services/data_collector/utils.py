"""
Helpers shared by the quote provider client: retry policy and call timing.
"""
import time
import logging
from functools import wraps
from typing import Callable, Tuple, Type
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

logger = logging.getLogger(__name__)


def retry_on_error(
    max_attempts: int = 3,
    min_wait: float = 1,
    max_wait: float = 8,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,)
):
    """
    Build a tenacity retry decorator with exponential backoff.

    Only ``exceptions`` trigger another attempt; anything else propagates on
    the first failure. After the last attempt the original exception is
    re-raised rather than wrapped in ``tenacity.RetryError``.

    Args:
        max_attempts: Total attempts, including the first call
        min_wait: Lower bound of the backoff in seconds
        max_wait: Upper bound of the backoff in seconds
        exceptions: Exception types worth retrying (transient network errors)
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(exceptions),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )


def log_execution_time(func: Callable) -> Callable:
    """Log how long a provider call took, or how long it ran before failing."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        started = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.warning(f"{func.__name__} failed after {elapsed_ms:.0f} ms: {e}")
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"{func.__name__} took {elapsed_ms:.0f} ms")
        return result

    return wrapper
