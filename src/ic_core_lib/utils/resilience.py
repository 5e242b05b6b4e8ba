"""Retry policies for storage backend startup.

Only establishing a backend connection is retried; incident operations
themselves never are, a failed write is reported to the caller instead.
"""

import logging
from typing import Callable, TypeVar

from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
    RetryCallState,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def log_retry_attempt(retry_state: RetryCallState) -> None:
    """before_sleep hook naming the function and the last error."""
    outcome = retry_state.outcome.exception() if retry_state.outcome else "Unknown"
    name = getattr(retry_state.fn, "__name__", repr(retry_state.fn))
    logger.warning(
        f"[Storage] Retry attempt {retry_state.attempt_number} for "
        f"{name} after {retry_state.seconds_since_start:.1f}s. "
        f"Exception: {outcome}"
    )


# Backend connection verification at startup
# - Wait 2^x seconds between attempts (1s, 2s, 4s, 8s)
# - Stop after 5 attempts
# - Re-raise the last exception if every attempt fails
storage_startup_retry = retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    before_sleep=log_retry_attempt,
    reraise=True,
)


def create_custom_retry(
    max_attempts: int = 5,
    min_wait: float = 1,
    max_wait: float = 8,
    multiplier: float = 1,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Create a retry decorator with specific parameters.

    Args:
        max_attempts: Maximum number of attempts
        min_wait: Minimum wait between attempts (seconds)
        max_wait: Maximum wait between attempts (seconds)
        multiplier: Exponential backoff multiplier

    Returns:
        A retry decorator configured with the specified parameters

    Example:
        ```python
        # Fail fast in tests
        quick_retry = create_custom_retry(max_attempts=2, min_wait=0, max_wait=0)

        @quick_retry
        def ping():
            client.ping()
        ```
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
