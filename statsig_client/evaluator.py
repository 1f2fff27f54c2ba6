"""
Remote evaluation of gates and configs.
"""

from typing import Dict, Optional, Tuple

from statsig_client.models import DynamicConfig, User
from statsig_client.transport import Transport


class RemoteEvaluator:
    """Evaluates gates and configs somewhere other than this process."""

    def check_gate(self, user: User, name: str) -> Tuple[bool, bool]:
        """Return (value, found) for a gate."""
        raise NotImplementedError

    def get_config(self, user: User, name: str) -> Tuple[DynamicConfig, bool]:
        """Return (config, found) for a config or experiment."""
        raise NotImplementedError

    def close(self) -> None:
        pass


class NetworkEvaluator(RemoteEvaluator):
    """
    Asks the Statsig API for every evaluation.

    Each lookup is a single request without retries; transport errors are
    raised to the caller.
    """

    def __init__(self, transport: Transport, environment: Optional[Dict[str, str]] = None):
        self._transport = transport
        self._environment = environment or None

    def check_gate(self, user: User, name: str) -> Tuple[bool, bool]:
        response = self._transport.post_request(
            "check_gate",
            {
                "user": user.to_dict(self._environment),
                "gateName": name,
                "statsigMetadata": self._transport.metadata.to_dict(),
            },
        )
        if not isinstance(response, dict) or "value" not in response:
            return False, False
        return bool(response["value"]), True

    def get_config(self, user: User, name: str) -> Tuple[DynamicConfig, bool]:
        response = self._transport.post_request(
            "get_config",
            {
                "user": user.to_dict(self._environment),
                "configName": name,
                "statsigMetadata": self._transport.metadata.to_dict(),
            },
        )
        if not isinstance(response, dict) or not isinstance(response.get("value"), dict):
            return DynamicConfig(name), False
        return (
            DynamicConfig(
                name=response.get("name") or name,
                value=response["value"],
                rule_id=response.get("rule_id") or "",
            ),
            True,
        )
