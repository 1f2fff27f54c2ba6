"""Configuration classes for the Statsig client."""

from dataclasses import dataclass, field
from typing import Dict, Optional

from statsig_client.retry import RetryPolicy
from statsig_client.transport import DEFAULT_TIMEOUT_MS

DEFAULT_EVENT_BUFFER_SIZE = 500


@dataclass
class Environment:
    """Environment tier and parameters attached to every user."""

    tier: Optional[str] = None
    params: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, str]:
        # An explicit tier replaces params["tier"].
        result = dict(self.params)
        if self.tier:
            result["tier"] = self.tier
        return result


@dataclass
class Options:
    """Advanced options for the Statsig client."""

    api: Optional[str] = None
    """Base URL override for the API."""

    environment: Environment = field(default_factory=Environment)
    """Environment passed through to evaluation."""

    local_mode: bool = False
    """Never talk to the network; non-overridden lookups return defaults."""

    timeout_ms: int = DEFAULT_TIMEOUT_MS
    """Per-attempt request timeout in milliseconds."""

    retry: RetryPolicy = field(default_factory=RetryPolicy)
    """Retry policy for event flushes."""

    max_retry_duration_ms: Optional[int] = None
    """Ceiling on the total backoff sleep of one retrying call."""

    event_buffer_size: int = DEFAULT_EVENT_BUFFER_SIZE
    """Number of buffered events that triggers a background flush."""

    sdk_type: Optional[str] = None
    sdk_version: Optional[str] = None
