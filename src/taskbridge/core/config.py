"""Connection settings for the time-series endpoint.

The active configuration is immutable. Saving a new one replaces the
instance held by the bridge, so concurrent readers never observe a
half-updated config.
"""

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

DEFAULT_MEASUREMENT = "tasks"
ENV_PREFIX = "TASKBRIDGE"

# Serialized key first, then the keys older plugin builds persisted.
_KEY_ALIASES = {
    "endpoint_url": ("endpointUrl", "url"),
    "auth_token": ("authToken", "token"),
    "measurement_name": ("measurementName", "measurement"),
}


def _first_str(data: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str):
            return value
    return None


@dataclass(frozen=True)
class BridgeConfig:
    """Connection settings for the line protocol endpoint.

    Attributes:
        endpoint_url: Write URL of the time-series database.
        auth_token: Token sent in the Authorization header.
        measurement_name: Measurement used for exported points.
    """

    endpoint_url: str = ""
    auth_token: str = field(default="", repr=False)
    measurement_name: str = DEFAULT_MEASUREMENT

    @property
    def is_complete(self) -> bool:
        """Return True if both the URL and the token are set."""
        return bool(self.endpoint_url) and bool(self.auth_token)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BridgeConfig":
        """Build a config from a loosely-typed mapping.

        Accepts camelCase keys as well as the legacy url/token/measurement
        keys. Values that are not strings are treated as absent.
        """
        values = {
            name: value
            for name, keys in _KEY_ALIASES.items()
            if (value := _first_str(data, keys)) is not None
        }
        return cls(**values)

    @classmethod
    def from_json(cls, raw: str) -> "BridgeConfig":
        """Parse a persisted config.

        Raises:
            ValueError: If raw is not a JSON object.
        """
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("Persisted configuration is not a JSON object")
        return cls.from_mapping(data)

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> "BridgeConfig":
        """Build a config from <PREFIX>_URL, <PREFIX>_TOKEN, <PREFIX>_MEASUREMENT."""
        measurement = os.getenv(f"{prefix}_MEASUREMENT", "").strip()
        return cls(
            endpoint_url=os.getenv(f"{prefix}_URL", "").strip(),
            auth_token=os.getenv(f"{prefix}_TOKEN", "").strip(),
            measurement_name=measurement or DEFAULT_MEASUREMENT,
        )

    def to_dict(self) -> dict[str, str]:
        """Serialize to the persisted camelCase shape."""
        return {
            "endpointUrl": self.endpoint_url,
            "authToken": self.auth_token,
            "measurementName": self.measurement_name,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
