"""Decoder for VEGAPULS Air radar level sensors."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass

from sensordecode.base import DecodeError, SensorPayload, Uplink

_FLOAT32 = struct.Struct(">f")

_PACKET_LENGTHS = {2: 11, 8: 11, 12: 20}

# Distance unit codes and their factor towards metres.
_FEET = 44
_METRES = 45
_INCHES = 47
_MILLIMETRES = 49
_UNIT_FACTORS = {
    _FEET: 0.3048,
    _INCHES: 0.0254,
    _MILLIMETRES: 1000.0,
}

_FAHRENHEIT = 33


@dataclass(frozen=True)
class VegapulsPayload(SensorPayload):
    """Battery, distance and temperature from a VEGAPULS sensor."""

    battery: int | None = None
    distance: float | None = None
    temperature: float | None = None
    unit: int | None = None

    def battery_level(self) -> int | None:
        return self.battery

    def error(self) -> tuple[str, list[str]]:
        return "", []


def _f32(value: float) -> float:
    try:
        return _FLOAT32.unpack(_FLOAT32.pack(value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def decode(data: bytes) -> VegapulsPayload:
    """Decode a measurement packet of type 2, 8 or 12."""
    if not data:
        raise DecodeError("incomplete or partial payload")

    indicator = data[0]
    length = _PACKET_LENGTHS.get(indicator)
    if length is None:
        raise DecodeError("unknown packet indicator")
    if len(data) < length:
        raise DecodeError("incomplete or partial payload")

    pos = 0 if indicator == 2 else -1

    (distance,) = _FLOAT32.unpack_from(data, pos + 2)
    factor = _UNIT_FACTORS.get(data[pos + 6])
    if factor is not None:
        distance = _f32(distance * _f32(factor))

    if indicator == 2:
        length += 1

    battery = data[length - 5]
    temperature = (data[length - 4] << 8 | data[length - 3]) / 10
    if data[length - 2] == _FAHRENHEIT:
        temperature = (temperature - 32) * 5 / 9

    return VegapulsPayload(battery=battery, distance=distance, temperature=temperature)


def decoder(event: Uplink) -> VegapulsPayload:
    """Decode the raw data of an uplink."""
    return decode(event.data)