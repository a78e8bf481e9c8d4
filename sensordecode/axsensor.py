"""Decoder for axsensor level, pressure and climate sensors."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from sensordecode.base import DecodeError, SensorPayload, Uplink


@dataclass(frozen=True)
class AxsensorPayload(SensorPayload):
    """Measurements from an axsensor device."""

    distance: float | None = None
    level: float | None = None
    pressure: float | None = None
    temperature: float | None = None
    relative_humidity: float | None = None
    vbat: float | None = None

    def battery_level(self) -> int | None:
        if self.vbat is None:
            return None
        return int(self.vbat)

    def error(self) -> tuple[str, list[str]]:
        return "", []


def _field_width(tag: int) -> int:
    if tag < 0x40:
        return 1
    if tag < 0x80:
        return 2
    if tag < 0xC0:
        return 3
    return 5


def decode(data: bytes) -> AxsensorPayload:
    """Decode a tagged axsensor frame."""
    values: dict[str, float] = {}
    idx = 0
    limit = len(data) // 2

    try:
        while idx < limit:
            tag = data[idx]
            if tag == 0x80:
                (raw,) = struct.unpack_from("<h", data, idx + 1)
                values["distance"] = raw / 10.0
                values["level"] = float(1400 - int(raw / 10))
            elif tag == 0xA1:
                values["pressure"] = (data[idx + 1] + data[idx + 2] * 256) * 100.0
            elif tag == 0xA2:
                (raw,) = struct.unpack_from("<H", data, idx + 1)
                values["temperature"] = raw / 10
            elif tag == 0xA3:
                values["relative_humidity"] = (
                    (data[idx + 1] + data[idx + 2] * 256) / 1024 * 100
                )
            elif tag == 0xA4:
                (raw,) = struct.unpack_from("<H", data, idx + 1)
                values["vbat"] = float(raw)
            idx += _field_width(tag)
    except (IndexError, struct.error) as exc:
        raise DecodeError("truncated axsensor payload") from exc

    return AxsensorPayload(**values)


def decoder(event: Uplink) -> AxsensorPayload:
    """Decode an uplink; only fPort 2 carries measurements."""
    if event.fport != 2:
        raise DecodeError("invalid fPort")
    return decode(event.data)