"""
Statsig client for gate and config evaluation.
"""

import dataclasses
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional

import httpx

from statsig_client.config import Options
from statsig_client.evaluator import NetworkEvaluator, RemoteEvaluator
from statsig_client.events import EventLogger
from statsig_client.models import DynamicConfig, Event, User
from statsig_client.overrides import OverrideStore
from statsig_client.transport import Transport

logger = logging.getLogger("statsig_client")


class StatsigClient:
    """
    Statsig client.

    Overrides always win. Without an override the client asks the remote
    evaluator, or returns a default (False, empty config) in local mode.

    Example:
        ```python
        client = StatsigClient("secret-key", Options(local_mode=True))
        client.override_gate("new_checkout", True)

        if client.check_gate(User(user_id="123"), "new_checkout"):
            # Gate is on
            pass

        client.shutdown()
        ```
    """

    def __init__(
        self,
        sdk_key: str,
        options: Optional[Options] = None,
        *,
        http_client: Optional[httpx.Client] = None,
        evaluator: Optional[RemoteEvaluator] = None,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        """
        Initialize the Statsig client.

        Args:
            sdk_key: Server secret key
            options: Advanced options
            http_client: HTTP client for the transport, owned by the caller
            evaluator: Remote evaluator replacing the network one
            sleep: Sleep function used between retries
        """
        self._options = options or Options()
        self._environment = self._options.environment.to_dict()
        self._transport = Transport(
            sdk_key,
            self._options.api,
            self._options.sdk_type,
            self._options.sdk_version,
            timeout_ms=self._options.timeout_ms,
            max_total_backoff_ms=self._options.max_retry_duration_ms,
            http_client=http_client,
            sleep=sleep,
        )
        self._overrides = OverrideStore()

        retry = self._options.retry
        if retry.max_total_backoff_ms is None and self._options.max_retry_duration_ms is not None:
            retry = dataclasses.replace(
                retry, max_total_backoff_ms=self._options.max_retry_duration_ms
            )
        self._logger = EventLogger(
            self._transport,
            retry,
            environment=self._environment,
            max_buffer_size=self._options.event_buffer_size,
            enabled=not self._options.local_mode,
        )

        self._evaluator: Optional[RemoteEvaluator] = None
        if not self._options.local_mode:
            self._evaluator = evaluator or NetworkEvaluator(self._transport, self._environment)

        self._shutdown_lock = threading.Lock()
        self._shutdown = False

    @property
    def local_mode(self) -> bool:
        return self._evaluator is None

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def check_gate(self, user: User, gate: str) -> bool:
        """
        Check the value of a gate for a user.

        Args:
            user: User to evaluate for
            gate: Gate name

        Returns:
            The override if one is set, otherwise the evaluated value

        Raises:
            StatsigError: When remote evaluation fails
        """
        value, found = self._overrides.get_gate_override(gate)
        if found:
            return value

        if self._evaluator is None:
            logger.debug(f"Local mode, returning default for gate {gate}")
            return False

        value, found = self._evaluator.check_gate(user, gate)
        return value if found else False

    def get_config(self, user: User, config: str) -> DynamicConfig:
        """
        Get the value of a dynamic config for a user.

        Returns:
            The override if one is set, otherwise the evaluated config;
            an empty config in local mode
        """
        value, found = self._overrides.get_config_override(config)
        if found:
            return DynamicConfig(name=config, value=value)

        if self._evaluator is None:
            logger.debug(f"Local mode, returning default for config {config}")
            return DynamicConfig(name=config)

        result, found = self._evaluator.get_config(user, config)
        return result if found else DynamicConfig(name=config)

    def get_experiment(self, user: User, experiment: str) -> DynamicConfig:
        """Get the config value of an experiment for a user."""
        return self.get_config(user, experiment)

    def override_gate(self, gate: str, value: bool) -> None:
        """Always return `value` for this gate, for every user."""
        self._overrides.set_gate_override(gate, value)

    def override_config(self, config: str, value: Dict[str, Any]) -> None:
        """Always return `value` for this config, for every user."""
        self._overrides.set_config_override(config, value)

    def log_event(self, event: Event) -> None:
        """Queue an event. Delivery failures are not reported."""
        self._logger.log(event)

    def log_immediate(self, events: List[Event]) -> Any:
        """
        Send events to the server right away.

        Returns:
            The decoded response body

        Raises:
            StatsigError: When the request fails
        """
        return self._logger.log_immediate(events)

    def shutdown(self) -> None:
        """
        Flush buffered events and release network resources.

        The client must not be used afterwards.
        """
        with self._shutdown_lock:
            if self._shutdown:
                logger.debug("Client already shut down")
                return
            self._shutdown = True

        self._logger.shutdown()
        if self._evaluator is not None:
            self._evaluator.close()
        self._transport.close()

    def __enter__(self) -> "StatsigClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()
