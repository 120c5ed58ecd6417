"""
Retry handler with exponential backoff, jitter, and circuit breaker for
document store calls.
"""

import logging
import random
import threading
import time
from typing import Any, Callable, Optional

from scaffold_ledger.errors import StoreError
from scaffold_ledger.services.error_classifier import ErrorClassifier

logger = logging.getLogger(__name__)


class RetryExhaustedError(StoreError):
    """Raised when all retry attempts for a store call have failed."""

    def __init__(self, message: str, last_error: Optional[Exception] = None):
        self.last_error = last_error
        super().__init__(message)


class CircuitBreakerError(StoreError):
    """Raised when the circuit breaker is open and calls are short-circuited."""

    pass


class RetryHandler:
    """
    Retries transient store failures with exponential backoff and jitter.

    Features:
    - Exponential backoff capped at ``max_delay``
    - Circuit breaker that opens after repeated exhausted calls
    - Thread-safe circuit state
    - Pluggable retry condition (defaults to ``ErrorClassifier.is_retryable``)

    Example:
        >>> handler = RetryHandler(max_retries=2, base_delay=0)
        >>> handler.execute_with_retry(lambda: "ok")
        'ok'
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_base: float = 2,
        jitter_factor: float = 0.1,
        circuit_breaker_threshold: int = 10,
        circuit_breaker_timeout: float = 60.0,
        retry_condition: Optional[Callable[[Exception], bool]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize retry handler.

        Args:
            max_retries: Retries after the first attempt
            base_delay: Delay before the first retry (seconds)
            max_delay: Upper bound for a single delay (seconds)
            exponential_base: Growth factor between retries
            jitter_factor: Random spread applied to each delay (0.0 to 1.0)
            circuit_breaker_threshold: Exhausted calls before the circuit opens
            circuit_breaker_timeout: Seconds before an open circuit is retried
            retry_condition: Predicate deciding whether an exception is retried
            sleep: Sleep function (replaced in tests)
        """
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter_factor = jitter_factor
        self.circuit_breaker_threshold = circuit_breaker_threshold
        self.circuit_breaker_timeout = circuit_breaker_timeout
        self.retry_condition = retry_condition or ErrorClassifier().is_retryable
        self._sleep = sleep

        self._circuit_open = False
        self._circuit_opened_at = 0.0
        self._failure_count = 0

        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Any) -> "RetryHandler":
        """Build a handler from ``MAX_RETRIES`` and ``RETRY_DELAY``."""
        return cls(max_retries=settings.max_retries, base_delay=settings.retry_delay)

    def _calculate_delay(self, attempt: int) -> float:
        delay = min(self.base_delay * (self.exponential_base**attempt), self.max_delay)
        jitter = random.uniform(-self.jitter_factor, self.jitter_factor) * delay
        return max(0.0, delay + jitter)

    def _is_circuit_open(self) -> bool:
        with self._lock:
            if not self._circuit_open:
                return False
            if time.time() - self._circuit_opened_at >= self.circuit_breaker_timeout:
                logger.info("Circuit breaker half-open, allowing a trial call")
                return False
            return True

    def _record_success(self):
        with self._lock:
            self._failure_count = 0
            if self._circuit_open:
                logger.info("Circuit breaker closed after successful call")
                self._circuit_open = False

    def _record_failure(self):
        with self._lock:
            self._failure_count += 1
            if (
                not self._circuit_open
                and self._failure_count >= self.circuit_breaker_threshold
            ):
                logger.warning(
                    f"Circuit breaker opened after {self._failure_count} failures"
                )
                self._circuit_open = True
                self._circuit_opened_at = time.time()

    def execute_with_retry(self, func: Callable, *args, **kwargs) -> Any:
        """
        Call ``func`` and retry it while the failure is retryable.

        Returns:
            Whatever ``func`` returns

        Raises:
            CircuitBreakerError: If the circuit is open
            RetryExhaustedError: If every attempt failed with a retryable error
            Exception: The original exception when it is not retryable
        """
        if self._is_circuit_open():
            raise CircuitBreakerError("Circuit breaker is open")

        func_name = getattr(func, "__name__", repr(func))
        for attempt in range(self.max_retries + 1):
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                if not self.retry_condition(e):
                    raise

                if attempt >= self.max_retries:
                    logger.warning(
                        f"Max retries ({self.max_retries}) exceeded for {func_name}"
                    )
                    self._record_failure()
                    raise RetryExhaustedError(
                        f"Max retries ({self.max_retries}) exceeded. "
                        f"Last error: {type(e).__name__}: {e}",
                        last_error=e,
                    ) from e

                delay = self._calculate_delay(attempt)
                logger.debug(
                    f"Retrying {func_name} in {delay:.2f}s "
                    f"(attempt {attempt + 1}/{self.max_retries + 1}): "
                    f"{type(e).__name__}: {e}"
                )
                self._sleep(delay)
                continue

            if attempt > 0:
                logger.info(f"{func_name} succeeded after {attempt} retries")
            self._record_success()
            return result
