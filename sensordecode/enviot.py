"""Decoder for Enviot snow depth and climate sensors."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sensordecode.base import DecodeError, SensorPayload, Uplink


@dataclass(frozen=True)
class EnviotPayload(SensorPayload):
    """Values from the ``payload`` member of an Enviot JSON object."""

    battery: int | None = None
    humidity: float | None = None
    sensor_status: int = 0
    snow_height: int | None = None
    temperature: float | None = None

    def battery_level(self) -> int | None:
        return self.battery

    def error(self) -> tuple[str, list[str]]:
        return "", []


def _as_int(name: str, value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"failed to unmarshal enviot payload: {name} is not a number")
    if isinstance(value, float):
        if not value.is_integer():
            raise DecodeError(
                f"failed to unmarshal enviot payload: {name} is not an integer"
            )
        value = int(value)
    return value


def _as_float(name: str, value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"failed to unmarshal enviot payload: {name} is not a number")
    return float(value)


def _as_object(name: str, value: Any) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise DecodeError(f"failed to unmarshal enviot payload: {name} is not an object")
    return value


def decoder(event: Uplink) -> EnviotPayload:
    """Decode the JSON object the network server attached to the uplink."""
    try:
        document = event.decoded_object()
    except DecodeError as exc:
        raise DecodeError(f"failed to unmarshal enviot payload: {exc}") from exc

    values = _as_object("payload", _as_object("object", document).get("payload"))

    return EnviotPayload(
        battery=_as_int("battery", values.get("battery")),
        humidity=_as_float("humidity", values.get("humidity")),
        sensor_status=_as_int("sensorStatus", values.get("sensorStatus")) or 0,
        snow_height=_as_int("snowHeight", values.get("snowHeight")),
        temperature=_as_float("temperature", values.get("temperature")),
    )