"""Retry handler with exponential backoff.

Used for downloads only. Pattern search never retries: its failures are
programming errors, not transient conditions.
"""

from __future__ import annotations

import logging
import time
from http.client import IncompleteRead
from typing import Callable, TypeVar
from urllib.error import HTTPError, URLError

logger = logging.getLogger(__name__)

# Default retry settings
DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_DELAY = 2.0  # seconds
MAX_DELAY_CAP = 60.0  # cap exponential backoff


class DownloadError(Exception):
    """Raised when a download operation fails after all retries."""

    pass


# Errors that should trigger retry
RETRYABLE_ERRORS = (
    URLError,
    HTTPError,
    ConnectionError,
    TimeoutError,
    IncompleteRead,
    OSError,  # Includes various network-related errors
)


T = TypeVar("T")


class RetryHandler:
    """Handles retries with exponential backoff."""

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        max_delay: float = MAX_DELAY_CAP,
    ) -> None:
        """Initialize retry handler.

        Args:
            max_retries: Maximum number of retry attempts.
            initial_delay: Initial delay between retries in seconds.
            max_delay: Maximum delay cap for exponential backoff.
        """
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.max_delay = max_delay

    def execute(
        self,
        func: Callable[[], T],
        operation_name: str,
        retryable_errors: tuple[type[Exception], ...] = RETRYABLE_ERRORS,
    ) -> T:
        """Execute function with retry logic.

        Args:
            func: Callable to execute.
            operation_name: Name for logging purposes.
            retryable_errors: Tuple of exception types that trigger retry.

        Returns:
            Result from func()

        Raises:
            DownloadError: After all retries exhausted, or on an HTTP client error.
        """
        delay = self.initial_delay
        last_error: Exception | None = None

        for attempt in range(self.max_retries + 1):
            try:
                return func()
            except retryable_errors as e:
                last_error = e

                # HTTP 4xx errors (client errors) are not retried, except 429
                if isinstance(e, HTTPError) and 400 <= e.code < 500 and e.code != 429:
                    raise DownloadError(f"{operation_name} failed: HTTP {e.code}") from e

                if attempt == self.max_retries:
                    break

                logger.warning(
                    "%s failed (attempt %d/%d), retrying in %.1fs: %s",
                    operation_name,
                    attempt + 1,
                    self.max_retries + 1,
                    delay,
                    e,
                )
                time.sleep(delay)
                delay = min(delay * 2, self.max_delay)

        raise DownloadError(
            f"{operation_name} failed after {self.max_retries + 1} attempts: {last_error}"
        ) from last_error


def with_retry(
    func: Callable[[], T],
    operation_name: str,
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    max_delay: float = MAX_DELAY_CAP,
) -> T:
    """Convenience function for executing with retry."""
    handler = RetryHandler(
        max_retries=max_retries,
        initial_delay=initial_delay,
        max_delay=max_delay,
    )
    return handler.execute(func, operation_name)
