"""Retry with backoff for transient transport failures.

Only the reachability probe retries: a check that fails is a compatibility
finding, not something to paper over.

Transient (Retryable):
- Connection timeouts and refused connections
- Read timeouts
- Server errors (5xx) and throttling (429)

Permanent (Not Retryable):
- Everything else, including malformed URLs and 4xx responses
"""

import time
from typing import Any, Callable, Optional, Sequence

import httpx
from botocore.exceptions import ConnectTimeoutError, ReadTimeoutError

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

# Raised once a request outlives the client timeout.
TIMEOUT_ERRORS = (ConnectTimeoutError, ReadTimeoutError, httpx.TimeoutException)


class RetryExhausted(Exception):
    """Raised when all retry attempts have been exhausted."""

    def __init__(
        self,
        message: str,
        attempts: int,
        last_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


def is_retryable_error(error: Exception) -> bool:
    """Determine if an error is transient and worth retrying."""
    if isinstance(error, (httpx.ConnectError, httpx.ConnectTimeout, httpx.ReadTimeout,
                          httpx.RemoteProtocolError)):
        return True

    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code in RETRYABLE_STATUS_CODES

    return False


def retry_with_backoff(
    func: Callable[..., Any],
    max_attempts: int = 3,
    delays: Sequence[float] = (1.0, 2.0),
    args: tuple = (),
    kwargs: Optional[dict] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """Call ``func`` until it succeeds or a permanent error occurs.

    Args:
        func: The function to execute.
        max_attempts: Maximum number of attempts (including first try).
        delays: Delay in seconds before each retry; the last entry is
                reused once the sequence runs out.
        args: Positional arguments to pass to func.
        kwargs: Keyword arguments to pass to func.
        sleep: Sleep function, replaceable in tests.

    Returns:
        The return value of func.

    Raises:
        RetryExhausted: If every attempt failed with a retryable error.
        Exception: A non-retryable error is re-raised immediately.
    """
    if kwargs is None:
        kwargs = {}

    last_error: Optional[Exception] = None

    for attempt in range(1, max_attempts + 1):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            last_error = e

            if not is_retryable_error(e):
                raise

            if attempt >= max_attempts:
                break

            sleep(delays[min(attempt - 1, len(delays) - 1)])

    raise RetryExhausted(
        f"Operation failed after {max_attempts} attempts",
        attempts=max_attempts,
        last_error=last_error,
    ) from last_error
