"""
Error types for the Statsig client.

Transport failures are split into retryable and final errors so the
retrier can decide what to do with them.
"""

import json
from enum import Enum
from typing import Optional

import httpx


class ErrorCategory(str, Enum):
    """Categories of errors for classification."""

    NETWORK = "network"
    HTTP_STATUS = "http_status"
    DECODE = "decode"
    ENCODE = "encode"
    UNINITIALIZED = "uninitialized"
    UNKNOWN = "unknown"


class StatsigError(Exception):
    """Base exception for all Statsig client errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        status_code: Optional[int] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.status_code = status_code
        self.retryable = retryable

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, category={self.category})"


class NetworkError(StatsigError):
    """Raised when no response could be obtained from the server."""

    def __init__(self, message: str = "Network error"):
        super().__init__(
            message,
            category=ErrorCategory.NETWORK,
            status_code=None,
            retryable=True,
        )


class HTTPStatusError(StatsigError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, status_code: int, retryable: bool = False):
        super().__init__(
            f"http response error code: {status_code}",
            category=ErrorCategory.HTTP_STATUS,
            status_code=status_code,
            retryable=retryable,
        )


class DecodeError(StatsigError):
    """Raised when a successful response body is not valid JSON."""

    def __init__(self, message: str = "Failed to decode response body"):
        super().__init__(message, category=ErrorCategory.DECODE, retryable=False)


class EncodeError(StatsigError):
    """Raised when a request body cannot be serialized to JSON."""

    def __init__(self, message: str = "Failed to encode request body"):
        super().__init__(message, category=ErrorCategory.ENCODE, retryable=False)


class UninitializedError(StatsigError, RuntimeError):
    """Raised when the global client is used before initialize()."""

    def __init__(self, operation: str):
        super().__init__(
            f"must initialize() statsig before calling {operation}",
            category=ErrorCategory.UNINITIALIZED,
        )
        self.operation = operation


def classify_error(error: Exception) -> StatsigError:
    """
    Classify an exception into a StatsigError.

    Args:
        error: The original exception

    Returns:
        A classified StatsigError
    """
    if isinstance(error, StatsigError):
        return error

    if isinstance(error, httpx.DecodingError):
        return DecodeError(str(error) or "Failed to decode response body")

    if isinstance(error, httpx.TransportError):
        return NetworkError(str(error) or error.__class__.__name__)

    if isinstance(error, json.JSONDecodeError):
        return DecodeError(str(error))

    if isinstance(error, (TypeError, ValueError)):
        return EncodeError(str(error))

    return StatsigError(str(error))
