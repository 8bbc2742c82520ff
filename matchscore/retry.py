"""
Retry and circuit breaking for calls to the external provider.

Scoring logic never retries on its own; these helpers are applied only at
the provider boundary (matchscore.providers).
"""

import threading
import time
import functools
from typing import Callable, Type, Tuple, Optional
from datetime import datetime

from .errors import CircuitOpenError


class RetryError(Exception):
    """Raised when all retry attempts are exhausted."""
    pass


def exponential_backoff(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable] = None,
):
    """
    Decorator for retrying functions with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts (0 = no retries)
        base_delay: Initial delay in seconds
        max_delay: Maximum delay between retries in seconds
        exponential_base: Base for exponential calculation (delay *= base)
        exceptions: Tuple of exceptions to catch and retry
        on_retry: Optional callback function(attempt, exception, delay)

    Example:
        @exponential_backoff(max_retries=2, base_delay=0.5)
        def post_inference(url, payload):
            return requests.post(url, json=payload, timeout=30)
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            delay = base_delay

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_retries:
                        raise RetryError(
                            f"Failed after {max_retries + 1} attempts: {str(e)}"
                        ) from e

                    current_delay = min(delay, max_delay)
                    if on_retry:
                        on_retry(attempt + 1, e, current_delay)

                    time.sleep(current_delay)
                    delay *= exponential_base

        return wrapper
    return decorator


class CircuitBreaker:
    """
    Circuit breaker that stops hammering a provider which keeps failing.

    States:
    - CLOSED: Normal operation, requests pass through
    - OPEN: Too many failures, requests are refused with CircuitOpenError
    - HALF_OPEN: One trial request is allowed after the recovery timeout;
      other requests are refused until it settles

    Shared by the concurrent summarize threads, so state changes are locked.
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60,
        expected_exception: Type[Exception] = Exception,
        name: str = "provider",
    ):
        """
        Initialize circuit breaker.

        Args:
            failure_threshold: Number of failures before opening circuit
            recovery_timeout: Seconds to wait before attempting recovery
            expected_exception: Exception type that counts as failure
            name: Label used in the CircuitOpenError message
        """
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exception = expected_exception
        self.name = name

        self.failure_count = 0
        self.last_failure_time: Optional[datetime] = None
        self.state = self.CLOSED
        self._lock = threading.Lock()

    def call(self, func: Callable, *args, **kwargs):
        """
        Execute function with circuit breaker protection.

        Raises:
            CircuitOpenError: If circuit is OPEN, or HALF_OPEN with a trial in flight
            Original exception: If function fails in CLOSED/HALF_OPEN state
        """
        with self._lock:
            trial = self._admit()

        try:
            result = func(*args, **kwargs)
        except self.expected_exception:
            self._on_failure()
            raise
        except Exception:
            if trial:
                # Not a provider failure; let the next call try again.
                with self._lock:
                    self.state = self.OPEN
            raise
        self._on_success()
        return result

    def _admit(self) -> bool:
        """Decide whether a call may proceed. Returns True for a half-open trial."""
        if self.state == self.CLOSED:
            return False
        if self.state == self.OPEN and self._should_attempt_reset():
            self.state = self.HALF_OPEN
            return True
        if self.state == self.HALF_OPEN:
            raise CircuitOpenError(
                f"Circuit breaker for {self.name} is HALF_OPEN; a trial call is in flight",
                capability=self.name,
            )
        raise CircuitOpenError(
            f"Circuit breaker for {self.name} is OPEN. "
            f"Retry after {self._time_until_reset():.0f}s",
            capability=self.name,
        )

    def _should_attempt_reset(self) -> bool:
        if self.last_failure_time is None:
            return True

        elapsed = (datetime.now() - self.last_failure_time).total_seconds()
        return elapsed >= self.recovery_timeout

    def _time_until_reset(self) -> float:
        if self.last_failure_time is None:
            return 0

        elapsed = (datetime.now() - self.last_failure_time).total_seconds()
        return max(0, self.recovery_timeout - elapsed)

    def _on_success(self):
        with self._lock:
            self.failure_count = 0
            self.state = self.CLOSED

    def _on_failure(self):
        with self._lock:
            self.failure_count += 1
            self.last_failure_time = datetime.now()

            # A failed trial call in HALF_OPEN reopens immediately
            if self.state == self.HALF_OPEN or self.failure_count >= self.failure_threshold:
                self.state = self.OPEN


def should_retry_http_status(status_code: int) -> bool:
    """
    Check if HTTP status code indicates a retryable error.

    The inference API answers 503 while a model is still loading, so 503
    is the most common retryable status in practice.
    """
    retryable_codes = {
        408,  # Request Timeout
        429,  # Too Many Requests
        500,  # Internal Server Error
        502,  # Bad Gateway
        503,  # Service Unavailable / model loading
        504,  # Gateway Timeout
    }

    return status_code in retryable_codes
