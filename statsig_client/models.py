"""
Value objects exchanged with the Statsig API.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class User:
    """User the gates and configs are evaluated for."""

    user_id: str
    email: Optional[str] = None
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    country: Optional[str] = None
    locale: Optional[str] = None
    app_version: Optional[str] = None
    custom: Dict[str, Any] = field(default_factory=dict)
    private_attributes: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self, environment: Optional[Dict[str, str]] = None) -> dict:
        """Convert to the JSON shape the API expects, skipping empty fields."""
        fields = {
            "userID": self.user_id,
            "email": self.email,
            "ip": self.ip,
            "userAgent": self.user_agent,
            "country": self.country,
            "locale": self.locale,
            "appVersion": self.app_version,
            "custom": self.custom,
            "privateAttributes": self.private_attributes,
            "statsigEnvironment": environment,
        }
        return {key: value for key, value in fields.items() if value}


@dataclass
class Event:
    """A custom event reported to the Statsig console."""

    event_name: str
    user: Optional[User] = None
    value: Optional[Any] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    time: int = field(default_factory=lambda: int(time.time() * 1000))
    """Milliseconds since epoch."""

    def to_dict(self, environment: Optional[Dict[str, str]] = None) -> dict:
        result: Dict[str, Any] = {"eventName": self.event_name, "time": self.time}
        if self.user is not None:
            result["user"] = self.user.to_dict(environment)
        if self.value is not None:
            result["value"] = self.value
        if self.metadata:
            result["metadata"] = self.metadata
        return result


@dataclass
class DynamicConfig:
    """
    Configuration payload evaluated for a user.

    The typed getters return the fallback when the key is missing or holds
    a value of another type.
    """

    name: str
    value: Dict[str, Any] = field(default_factory=dict)
    rule_id: str = ""

    def get(self, key: str, fallback: Any = None) -> Any:
        return self.value.get(key, fallback)

    def get_string(self, key: str, fallback: str = "") -> str:
        return self._typed(key, str, fallback)

    def get_number(self, key: str, fallback: float = 0) -> float:
        value = self.value.get(key)
        # bool is an int subclass
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
        return fallback

    def get_bool(self, key: str, fallback: bool = False) -> bool:
        return self._typed(key, bool, fallback)

    def get_array(self, key: str, fallback: Optional[List[Any]] = None) -> List[Any]:
        return self._typed(key, list, [] if fallback is None else fallback)

    def get_map(self, key: str, fallback: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._typed(key, dict, {} if fallback is None else fallback)

    def _typed(self, key: str, kind: type, fallback: Any) -> Any:
        value = self.value.get(key)
        return value if isinstance(value, kind) else fallback
