"""Shared types for sensor uplinks and decoded payloads."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any


class DecodeError(ValueError):
    """Raised when an uplink cannot be decoded."""


@dataclass
class Uplink:
    """A single uplink message as delivered by a network server.

    ``data`` holds the raw radio payload. ``json_object`` holds the JSON
    object the network server may have decoded already. It is kept as
    raw bytes; a string or a mapping given here is stored as JSON bytes.
    """

    dev_eui: str = ""
    sensor_type: str = ""
    fport: int = 0
    data: bytes = b""
    json_object: bytes | None = None
    timestamp: datetime | None = None

    def __post_init__(self) -> None:
        self.data = bytes(self.data)
        if isinstance(self.json_object, str):
            self.json_object = self.json_object.encode("utf-8")
        elif isinstance(self.json_object, Mapping):
            self.json_object = json.dumps(dict(self.json_object)).encode("utf-8")
        elif self.json_object is not None:
            self.json_object = bytes(self.json_object)

    def decoded_object(self) -> Any:
        """Parse ``json_object`` and return the resulting value."""
        if self.json_object is None:
            raise DecodeError("unexpected end of JSON input")
        try:
            return json.loads(self.json_object)
        except (ValueError, UnicodeDecodeError) as exc:
            raise DecodeError(f"invalid JSON object: {exc}") from exc


class SensorPayload:
    """Base class for the payloads that decoders produce."""

    def battery_level(self) -> int | None:
        """Battery level reported by the sensor, if any."""
        return None

    def error(self) -> tuple[str, list[str]]:
        """Error code and messages reported by the sensor."""
        return "", []