"""
Retry utility with exponential backoff.

Backoff grows by a fixed factor of 10 per attempt and carries no jitter.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger("statsig_client.retry")

BACKOFF_MULTIPLIER = 10
DEFAULT_MAX_RETRIES = 5
DEFAULT_INITIAL_BACKOFF_MS = 1000

RETRYABLE_STATUS_CODES = frozenset({408, 500, 502, 503, 504, 522, 524, 599})


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry behavior."""

    max_retries: int = DEFAULT_MAX_RETRIES
    """Maximum number of retry attempts after the first one."""

    initial_backoff_ms: int = DEFAULT_INITIAL_BACKOFF_MS
    """Sleep before the first retry, in milliseconds."""

    max_total_backoff_ms: Optional[int] = None
    """Ceiling on the summed sleep of one call. None means unbounded."""

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.initial_backoff_ms < 0:
            raise ValueError("initial_backoff_ms must be non-negative")


NO_RETRY = RetryPolicy(max_retries=0, initial_backoff_ms=0)


@dataclass
class RequestOutcome(Generic[T]):
    """Result of a single attempt."""

    should_retry: bool
    error: Optional[Exception] = None
    data: Optional[T] = None


@dataclass
class RetryResult(Generic[T]):
    """Result of a retry operation."""

    success: bool
    data: Optional[T] = None
    error: Optional[Exception] = None
    attempts: int = 1
    total_backoff: float = 0.0


def is_retryable_status(status_code: int) -> bool:
    """Check if an HTTP status code is worth another attempt."""
    return status_code in RETRYABLE_STATUS_CODES


def calculate_backoff(attempt: int, policy: RetryPolicy) -> float:
    """
    Calculate the backoff delay before a retry.

    Args:
        attempt: Retry number (0-indexed)
        policy: Retry policy

    Returns:
        Delay in seconds
    """
    return policy.initial_backoff_ms * (BACKOFF_MULTIPLIER**attempt) / 1000.0


def max_call_duration(policy: RetryPolicy) -> float:
    """Worst-case total sleep of a call made with this policy, in seconds."""
    total = sum(calculate_backoff(i, policy) for i in range(policy.max_retries))
    if policy.max_total_backoff_ms is not None:
        total = min(total, policy.max_total_backoff_ms / 1000.0)
    return total


def execute_with_retry(
    fn: Callable[[], RequestOutcome[T]],
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], Any] = time.sleep,
) -> RetryResult[T]:
    """
    Run an attempt function until it reports a terminal outcome.

    The sleep between attempts blocks only the calling thread.

    Args:
        fn: Attempt function reporting whether it is worth retrying
        policy: Retry policy
        sleep: Sleep function, injectable for tests

    Returns:
        RetryResult with success status and data/error
    """
    cfg = policy or NO_RETRY
    remaining = cfg.max_retries
    backoff = cfg.initial_backoff_ms / 1000.0
    total_backoff = 0.0
    attempts = 0

    while True:
        attempts += 1
        outcome = fn()

        if not outcome.should_retry:
            return RetryResult(
                success=outcome.error is None,
                data=outcome.data,
                error=outcome.error,
                attempts=attempts,
                total_backoff=total_backoff,
            )

        if remaining <= 0:
            return RetryResult(
                success=False,
                error=outcome.error,
                attempts=attempts,
                total_backoff=total_backoff,
            )

        if (
            cfg.max_total_backoff_ms is not None
            and (total_backoff + backoff) * 1000 > cfg.max_total_backoff_ms
        ):
            logger.debug(f"Retry budget of {cfg.max_total_backoff_ms}ms exhausted")
            return RetryResult(
                success=False,
                error=outcome.error,
                attempts=attempts,
                total_backoff=total_backoff,
            )

        logger.debug(f"Attempt {attempts} failed ({outcome.error}), retrying in {backoff}s")
        remaining -= 1
        sleep(backoff)
        total_backoff += backoff
        backoff *= BACKOFF_MULTIPLIER
