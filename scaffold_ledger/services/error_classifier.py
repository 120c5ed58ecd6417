"""
Error classification for document store calls.

Separates transient failures (rate limits, server errors, dropped
connections) that are worth retrying from permanent ones, and translates
raw transport exceptions into the ledger's own error types.
"""

import logging
import socket
from enum import Enum
from typing import Optional

import httplib2
import requests.exceptions
from googleapiclient.errors import HttpError

from scaffold_ledger.errors import LedgerError, NotFoundError, StoreError

logger = logging.getLogger(__name__)

_NETWORK_ERRORS = (
    socket.timeout,
    TimeoutError,
    ConnectionError,
    httplib2.HttpLib2Error,
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
)


class ErrorType(Enum):
    """Classification of store errors."""

    RETRYABLE = "retryable"  # 429, 5xx, network
    NOT_FOUND = "not_found"  # 404, failed exists precondition
    FATAL = "fatal"  # other 4xx, permission
    UNKNOWN = "unknown"


def _status_of(exception: HttpError) -> int:
    return int(getattr(exception.resp, "status", 0) or 0)


class ErrorClassifier:
    """
    Classifies store exceptions and maps them to ledger errors.

    Features:
    - HTTP status classification for Firestore REST responses
    - Network error detection across httplib2, requests and sockets
    - Translation to NotFoundError / StoreError
    """

    def classify(self, exception: Exception) -> ErrorType:
        """
        Classify an exception.

        Args:
            exception: The exception raised by a store call

        Returns:
            ErrorType classification
        """
        if isinstance(exception, HttpError):
            status_code = _status_of(exception)
            if status_code == 429 or 500 <= status_code < 600:
                return ErrorType.RETRYABLE
            # Firestore answers a failed exists precondition with 404 or 412
            if status_code in (404, 412):
                return ErrorType.NOT_FOUND
            if 400 <= status_code < 500:
                return ErrorType.FATAL

        if isinstance(exception, _NETWORK_ERRORS):
            return ErrorType.RETRYABLE

        return ErrorType.UNKNOWN

    def is_retryable(self, exception: Exception) -> bool:
        """Check if an exception should be retried."""
        return self.classify(exception) == ErrorType.RETRYABLE

    def get_error_description(self, exception: Exception) -> str:
        """
        Get a human-readable error description.

        Args:
            exception: The exception to describe

        Returns:
            Error description string
        """
        error_type = self.classify(exception)

        if isinstance(exception, HttpError):
            status_code = _status_of(exception)
            if status_code == 429:
                return f"Rate limit error (HTTP 429) - {error_type.value}"
            if 500 <= status_code < 600:
                return f"Server error (HTTP {status_code}) - {error_type.value}"
            if status_code in (401, 403):
                return f"Permission error (HTTP {status_code}) - {error_type.value}"
            if 400 <= status_code < 500:
                return f"Client error (HTTP {status_code}) - {error_type.value}"

        timeouts = (socket.timeout, TimeoutError, requests.exceptions.Timeout)
        if isinstance(exception, timeouts):
            return f"Network timeout error - {error_type.value}"

        if isinstance(exception, _NETWORK_ERRORS):
            return f"Network connection error - {error_type.value}"

        return f"{type(exception).__name__}: {exception} - {error_type.value}"

    def to_ledger_error(
        self,
        exception: Exception,
        collection: str,
        document_id: Optional[str] = None,
    ) -> LedgerError:
        """
        Translate a raw store exception into a ledger error.

        Ledger errors pass through unchanged. A not-found response becomes
        ``NotFoundError`` when the target document is known; everything else
        becomes ``StoreError``.

        Args:
            exception: Exception raised by the store call
            collection: Collection being accessed
            document_id: Document being accessed, if any

        Returns:
            The ledger error to raise
        """
        if isinstance(exception, LedgerError):
            return exception

        error_type = self.classify(exception)
        if error_type == ErrorType.NOT_FOUND and document_id is not None:
            return NotFoundError(collection, document_id)

        target = f"{collection}/{document_id}" if document_id else collection
        description = self.get_error_description(exception)
        logger.debug(f"Store call on {target} failed: {description}")
        return StoreError(f"Store operation on {target} failed: {description}")
