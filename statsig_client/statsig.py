"""
Process-wide Statsig client.

`initialize()` constructs the shared client exactly once, even when called
from several threads at the same time. Every other function raises
UninitializedError until it has.
"""

import threading
from typing import Any, Dict, List, Optional

from statsig_client.client import StatsigClient
from statsig_client.config import Options
from statsig_client.errors import UninitializedError
from statsig_client.models import DynamicConfig, Event, User

_instance: Optional[StatsigClient] = None
_instance_lock = threading.Lock()


def initialize(sdk_key: str, options: Optional[Options] = None) -> None:
    """
    Initialize the global client with the given server secret key.

    Only the first call has an effect.
    """
    global _instance
    if _instance is not None:
        return
    with _instance_lock:
        if _instance is None:
            _instance = StatsigClient(sdk_key, options)


def get_instance() -> StatsigClient:
    """Get the global client."""
    return _require("get_instance")


def _require(operation: str) -> StatsigClient:
    instance = _instance
    if instance is None:
        raise UninitializedError(operation)
    return instance


def check_gate(user: User, gate: str) -> bool:
    """Check the value of a gate for the given user."""
    return _require("check_gate").check_gate(user, gate)


def get_config(user: User, config: str) -> DynamicConfig:
    """Get the dynamic config value for the given user."""
    return _require("get_config").get_config(user, config)


def get_experiment(user: User, experiment: str) -> DynamicConfig:
    """Get the config value of an experiment for the given user."""
    return _require("get_experiment").get_experiment(user, experiment)


def override_gate(gate: str, value: bool) -> None:
    """Override the value of a gate for every user."""
    _require("override_gate").override_gate(gate, value)


def override_config(config: str, value: Dict[str, Any]) -> None:
    """Override the value of a dynamic config for every user."""
    _require("override_config").override_config(config, value)


def log_event(event: Event) -> None:
    """Log an event to the Statsig console."""
    _require("log_event").log_event(event)


def log_immediate(events: List[Event]) -> Any:
    """Send events to the Statsig server immediately."""
    return _require("log_immediate").log_immediate(events)


def shutdown() -> None:
    """
    Flush pending events and clean up.

    Using any other function afterwards is undefined.
    """
    instance = _instance
    if instance is None:
        return
    instance.shutdown()
