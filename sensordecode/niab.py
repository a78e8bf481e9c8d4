"""Decoder for NIAB fill level sensors."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from sensordecode.base import DecodeError, SensorPayload, Uplink


@dataclass(frozen=True)
class NiabPayload(SensorPayload):
    """Battery, temperature and distance from a NIAB sensor."""

    battery: int = 0
    temperature: float = 0.0
    distance: float | None = None

    def battery_level(self) -> int | None:
        return self.battery

    def error(self) -> tuple[str, list[str]]:
        return "", []


def decode(data: bytes) -> NiabPayload:
    """Decode the 4 byte NIAB frame."""
    if len(data) < 4:
        raise DecodeError("payload too short")
    if len(data) > 4:
        raise DecodeError("payload too long")

    temp = data[1]
    if temp > 127:
        temp -= 255

    (distance,) = struct.unpack_from(">h", data, 2)
    if distance == -1:
        raise DecodeError("sensor reading error")

    return NiabPayload(
        battery=data[0] * 100 // 255,
        temperature=float(temp),
        distance=distance / 1000.0,
    )


def decoder(event: Uplink) -> NiabPayload:
    """Decode the uplink's JSON object bytes as a NIAB frame."""
    return decode(event.json_object or b"")