"""
Store access and write-path services.

This package provides:
- Retry with exponential backoff, jitter and a circuit breaker
- Classification of store errors into retryable / not found / fatal
- The transaction service that creates, updates and deletes records

Only the store-access helpers are re-exported here because the store
backends import them; import ``TransactionService`` from
``scaffold_ledger.services.transaction_service``.
"""

from scaffold_ledger.services.error_classifier import ErrorClassifier, ErrorType
from scaffold_ledger.services.retry_handler import (
    CircuitBreakerError,
    RetryExhaustedError,
    RetryHandler,
)

__all__ = [
    "CircuitBreakerError",
    "ErrorClassifier",
    "ErrorType",
    "RetryExhaustedError",
    "RetryHandler",
]
