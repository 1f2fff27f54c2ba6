"""
Thread-safe store for locally set gate and config values.
"""

import copy
import threading
from typing import Any, Dict, Optional, Tuple


class OverrideStore:
    """
    Gate and config overrides shared between threads.

    A single lock guards both mappings. Config values are copied on the way
    in and on the way out, so callers never hold a reference into the store.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._gates: Dict[str, bool] = {}
        self._configs: Dict[str, Dict[str, Any]] = {}

    def set_gate_override(self, name: str, value: bool) -> None:
        """Always return `value` for gate `name`."""
        with self._lock:
            self._gates[name] = value

    def set_config_override(self, name: str, value: Dict[str, Any]) -> None:
        """Always return `value` for config `name`, replacing any prior map."""
        snapshot = copy.deepcopy(value)
        with self._lock:
            self._configs[name] = snapshot

    def get_gate_override(self, name: str) -> Tuple[bool, bool]:
        """
        Look up a gate override.

        Returns:
            (value, found); value is False when not found
        """
        with self._lock:
            if name in self._gates:
                return self._gates[name], True
        return False, False

    def get_config_override(self, name: str) -> Tuple[Optional[Dict[str, Any]], bool]:
        """
        Look up a config override.

        Returns:
            (copy of the value, found); value is None when not found
        """
        with self._lock:
            if name not in self._configs:
                return None, False
            value = self._configs[name]
        return copy.deepcopy(value), True

    def remove_gate_override(self, name: str) -> None:
        with self._lock:
            self._gates.pop(name, None)

    def remove_config_override(self, name: str) -> None:
        with self._lock:
            self._configs.pop(name, None)

    def clear(self) -> None:
        """Drop every override."""
        with self._lock:
            self._gates.clear()
            self._configs.clear()
