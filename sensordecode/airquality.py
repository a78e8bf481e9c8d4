"""Decoder for air quality sensors reporting particles, NO2 and climate."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass

from sensordecode.base import DecodeError, SensorPayload, Uplink


@dataclass(frozen=True)
class AirQualityPayload(SensorPayload):
    """Measurements from an air quality sensor."""

    pm10_raw: float = 0.0
    pm10: float | None = None
    pm25_raw: float = 0.0
    pm25: float | None = None
    temperature: float | None = None
    humidity: float | None = None
    sensor_error: int = 0
    no2: float | None = None

    def battery_level(self) -> int | None:
        return None

    def error(self) -> tuple[str, list[str]]:
        return "", []


def _particle_density(raw: float) -> float:
    if raw <= 0:
        return 0.0
    return max(math.log(raw) * 6.6462 + 4.9307, 0.0)


def decode(data: bytes) -> AirQualityPayload:
    """Decode the 12 byte little-endian measurement frame."""
    if len(data) < 12:
        raise DecodeError("not enough bytes to decode")

    pm10_raw, pm25_raw, raw_temp, raw_hum, sensor_error, raw_no2 = struct.unpack_from(
        "<6H", data
    )

    pm10 = pm10_raw / 10.0
    pm25 = pm25_raw / 10.0
    temperature = ((raw_temp - 2732) & 0xFFFF) / 10.0
    humidity = raw_hum / 10.0
    no2 = max(raw_no2 / 100.0 - 100.0 + 1.98, 0.0)

    return AirQualityPayload(
        pm10_raw=pm10,
        pm10=_particle_density(pm10),
        pm25_raw=pm25,
        pm25=_particle_density(pm25),
        temperature=temperature,
        humidity=humidity,
        sensor_error=sensor_error,
        no2=no2,
    )


def decoder(event: Uplink) -> AirQualityPayload:
    """Decode an uplink; only fPort 2 carries measurements."""
    if event.fport != 2:
        raise DecodeError("invalid fPort")
    return decode(event.data)