"""Decoder for Senlab T temperature probes."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from sensordecode.base import DecodeError, SensorPayload, Uplink

_SINGLE_PROBE = 1
_DUAL_PROBE = 12
_READING_ERRORS = (-46.75, 85.0)


@dataclass(frozen=True)
class SenlabPayload(SensorPayload):
    """Probe id, battery percentage and temperature."""

    id: int = 0
    battery: int = 0
    temperature: float = 0.0

    def battery_level(self) -> int | None:
        return self.battery

    def error(self) -> tuple[str, list[str]]:
        return "", []


def decode(data: bytes) -> SenlabPayload:
    """Decode ``| ID(1) | Battery(1) | Internal(n) | Temp(2) |``."""
    if not data:
        raise DecodeError("payload too short")

    payload = SenlabPayload()
    probe = data[0]

    if probe == _SINGLE_PROBE:
        if len(data) < 2:
            raise DecodeError("payload too short")
        (raw,) = struct.unpack(">h", data[-2:])
        payload = SenlabPayload(
            id=probe,
            battery=data[1] * 100 // 254,
            temperature=raw / 16.0,
        )
    elif probe == _DUAL_PROBE:
        raise DecodeError("unsupported dual probe payload")

    if payload.temperature in _READING_ERRORS:
        raise DecodeError("sensor reading error")

    return payload


def decoder(event: Uplink) -> SenlabPayload:
    """Decode an uplink carrying at least four bytes."""
    if len(event.data) < 4:
        raise DecodeError("payload too short")
    return decode(event.data)