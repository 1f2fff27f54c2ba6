"""
Statsig Python client - feature gates and dynamic configs.

Usage:
    import statsig_client as statsig

    statsig.initialize("secret-key")

    if statsig.check_gate(statsig.User(user_id="123"), "new_checkout"):
        # Gate is on
        pass

    statsig.shutdown()
"""

from statsig_client.errors import (
    StatsigError,
    NetworkError,
    HTTPStatusError,
    DecodeError,
    EncodeError,
    UninitializedError,
    ErrorCategory,
)
from statsig_client.retry import (
    RETRYABLE_STATUS_CODES,
    RequestOutcome,
    RetryPolicy,
    RetryResult,
    calculate_backoff,
    execute_with_retry,
    is_retryable_status,
    max_call_duration,
)
from statsig_client.transport import (
    DEFAULT_API,
    StatsigMetadata,
    Transport,
    TransportConfig,
)
from statsig_client.models import DynamicConfig, Event, User
from statsig_client.config import Environment, Options
from statsig_client.overrides import OverrideStore
from statsig_client.evaluator import RemoteEvaluator, NetworkEvaluator
from statsig_client.events import EventLogger
from statsig_client.client import StatsigClient
from statsig_client.statsig import (
    initialize,
    get_instance,
    check_gate,
    get_config,
    get_experiment,
    override_gate,
    override_config,
    log_event,
    log_immediate,
    shutdown,
)

__version__ = "0.1.0"
__all__ = [
    # Global client
    "initialize",
    "get_instance",
    "check_gate",
    "get_config",
    "get_experiment",
    "override_gate",
    "override_config",
    "log_event",
    "log_immediate",
    "shutdown",
    # Client
    "StatsigClient",
    "Options",
    "Environment",
    # Models
    "User",
    "Event",
    "DynamicConfig",
    # Overrides
    "OverrideStore",
    # Evaluation
    "RemoteEvaluator",
    "NetworkEvaluator",
    # Events
    "EventLogger",
    # Transport
    "DEFAULT_API",
    "StatsigMetadata",
    "Transport",
    "TransportConfig",
    # Retry
    "RETRYABLE_STATUS_CODES",
    "RequestOutcome",
    "RetryPolicy",
    "RetryResult",
    "calculate_backoff",
    "execute_with_retry",
    "is_retryable_status",
    "max_call_duration",
    # Errors
    "StatsigError",
    "NetworkError",
    "HTTPStatusError",
    "DecodeError",
    "EncodeError",
    "UninitializedError",
    "ErrorCategory",
]
