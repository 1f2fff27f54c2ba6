"""
HTTP transport to the Statsig API.

Every exchange is a JSON POST. Retrying calls replay the same encoded body
on each attempt.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import httpx

from statsig_client.errors import (
    DecodeError,
    EncodeError,
    HTTPStatusError,
    classify_error,
)
from statsig_client.retry import (
    DEFAULT_INITIAL_BACKOFF_MS,
    NO_RETRY,
    RequestOutcome,
    RetryPolicy,
    execute_with_retry,
    is_retryable_status,
)

logger = logging.getLogger("statsig_client.transport")

DEFAULT_API = "https://statsigapi.net/v1"
DEFAULT_SDK_TYPE = "python-sdk"
DEFAULT_SDK_VERSION = "0.1.0"
DEFAULT_TIMEOUT_MS = 5000

API_KEY_HEADER = "STATSIG-API-KEY"
CLIENT_TIME_HEADER = "STATSIG-CLIENT-TIME"


@dataclass(frozen=True)
class StatsigMetadata:
    """SDK identity sent along with every payload."""

    sdk_type: str = DEFAULT_SDK_TYPE
    sdk_version: str = DEFAULT_SDK_VERSION

    def to_dict(self) -> dict:
        return {"sdkType": self.sdk_type, "sdkVersion": self.sdk_version}


@dataclass(frozen=True)
class TransportConfig:
    """Connection settings owned by a single Transport."""

    sdk_key: str
    """Server secret key sent with every request."""

    api: str = DEFAULT_API
    """Base URL for the API, without a trailing slash."""

    metadata: StatsigMetadata = field(default_factory=StatsigMetadata)
    """SDK type and version."""

    timeout_ms: int = DEFAULT_TIMEOUT_MS
    """Per-attempt request timeout in milliseconds."""

    @classmethod
    def create(
        cls,
        sdk_key: str,
        api: Optional[str] = None,
        sdk_type: Optional[str] = None,
        sdk_version: Optional[str] = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> "TransportConfig":
        """Build a config, defaulting every empty value."""
        return cls(
            sdk_key=sdk_key,
            api=(api or DEFAULT_API).rstrip("/"),
            metadata=StatsigMetadata(
                sdk_type=sdk_type or DEFAULT_SDK_TYPE,
                sdk_version=sdk_version or DEFAULT_SDK_VERSION,
            ),
            timeout_ms=timeout_ms,
        )


class Transport:
    """
    Sends JSON payloads to the Statsig API.

    Example:
        ```python
        with Transport("secret-key") as transport:
            transport.retryable_post_request("log_event", {"events": []}, retries=3)
        ```
    """

    def __init__(
        self,
        sdk_key: str,
        api: Optional[str] = None,
        sdk_type: Optional[str] = None,
        sdk_version: Optional[str] = None,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        max_total_backoff_ms: Optional[int] = None,
        http_client: Optional[httpx.Client] = None,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        """
        Initialize the transport.

        Args:
            sdk_key: Server secret key
            api: Base URL override
            sdk_type: SDK type reported to the server
            sdk_version: SDK version reported to the server
            timeout_ms: Per-attempt request timeout
            max_total_backoff_ms: Ceiling on the sleep of one retrying call
            http_client: Client to send requests with, owned by the caller
            sleep: Sleep function used between retries
        """
        self._config = TransportConfig.create(
            sdk_key, api, sdk_type, sdk_version, timeout_ms=timeout_ms
        )
        self._max_total_backoff_ms = max_total_backoff_ms
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout_ms / 1000)
        self._sleep = sleep

    @property
    def config(self) -> TransportConfig:
        return self._config

    @property
    def metadata(self) -> StatsigMetadata:
        return self._config.metadata

    def post_request(self, endpoint: str, body: Any) -> Any:
        """Send a request once, without retrying."""
        return self.send(endpoint, body, NO_RETRY)

    def retryable_post_request(self, endpoint: str, body: Any, retries: int) -> Any:
        """Send a request, retrying transient failures up to `retries` times."""
        policy = RetryPolicy(
            max_retries=retries,
            initial_backoff_ms=DEFAULT_INITIAL_BACKOFF_MS,
            max_total_backoff_ms=self._max_total_backoff_ms,
        )
        return self.send(endpoint, body, policy)

    def send(self, endpoint: str, body: Any, policy: RetryPolicy) -> Any:
        """
        POST a JSON body and decode the JSON response.

        Args:
            endpoint: Path relative to the API base URL
            body: JSON-serializable request object
            policy: Retry policy for this call

        Returns:
            The decoded response body, or None for an empty body

        Raises:
            StatsigError: When the last attempt failed
        """
        try:
            content = json.dumps(body).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise EncodeError(f"Failed to encode request body: {e}") from e

        url = self._url(endpoint)
        result = execute_with_retry(
            lambda: self._attempt(url, content),
            policy,
            sleep=self._sleep,
        )

        if not result.success:
            raise result.error  # type: ignore

        return result.data

    def _url(self, endpoint: str) -> str:
        return f"{self._config.api}/{endpoint.lstrip('/')}"

    def _headers(self) -> dict:
        return {
            API_KEY_HEADER: self._config.sdk_key,
            "Content-Type": "application/json",
            CLIENT_TIME_HEADER: str(int(time.time() * 1000)),
        }

    def _attempt(self, url: str, content: bytes) -> RequestOutcome:
        """Single request attempt."""
        try:
            response = self._client.post(url, content=content, headers=self._headers())
        except httpx.RequestError as e:
            logger.debug(f"Request to {url} failed: {e!r}")
            classified = classify_error(e)
            return RequestOutcome(should_retry=classified.retryable, error=classified)

        if response.is_success:
            if not response.content:
                return RequestOutcome(should_retry=False)
            try:
                return RequestOutcome(should_retry=False, data=response.json())
            except ValueError as e:
                return RequestOutcome(should_retry=False, error=DecodeError(str(e)))

        retryable = is_retryable_status(response.status_code)
        return RequestOutcome(
            should_retry=retryable,
            error=HTTPStatusError(response.status_code, retryable=retryable),
        )

    def close(self) -> None:
        """Close the underlying HTTP client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
