"""Bounded retry helper.

Only faults listed as retryable trigger another attempt; anything else
propagates on the first occurrence.
"""

import logging
from typing import Callable, Optional, Tuple, Type, TypeVar

from .errors import RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_call(
    fn: Callable[[], T],
    attempts: int,
    retryable: Tuple[Type[BaseException], ...],
    subject: str,
    action: str = "processed",
    on_retry: Optional[Callable[[int, BaseException], None]] = None,
) -> T:
    """Call fn until it succeeds or attempts run out.

    Each attempt re-runs fn from scratch; there is no delay between attempts.

    Args:
        fn: Zero-argument callable performing one complete attempt
        attempts: Total number of attempts (>= 1)
        retryable: Exception types that justify another attempt
        subject: Name of the thing being operated on, used in the final error
        action: Past-tense verb for the final error, e.g. "downloaded"
        on_retry: Optional hook called with (attempt_number, error) after
            each failed retryable attempt

    Returns:
        Whatever fn returns on the first successful attempt

    Raises:
        RetryExhaustedError: If every attempt failed with a retryable error
        Exception: Any non-retryable error raised by fn, unchanged
    """
    if attempts < 1:
        raise ValueError(f"attempts must be >= 1, got {attempts}")

    last_error: Optional[BaseException] = None
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except retryable as e:
            last_error = e
            logger.debug("Attempt %d/%d for %s failed: %s", attempt, attempts, subject, e)
            if on_retry is not None:
                on_retry(attempt, e)

    raise RetryExhaustedError(subject, attempts, last_error, action) from last_error
