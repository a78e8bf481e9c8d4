"""Decoder for Sensefarm soil moisture multisensors."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any

from sensordecode.base import DecodeError, SensorPayload, Uplink

# Header value -> (field name, struct format, whether values accumulate).
_FIELDS: dict[int, tuple[str, str, bool]] = {
    0x01: ("temperature", ">f", False),
    0x06: ("battery_voltage", ">h", False),
    0x13: ("resistances", ">i", True),
    0x15: ("soil_moistures", ">h", True),
    0x16: ("transmission_reason", ">b", False),
    0x17: ("protocol_version", ">h", False),
}

_LABELS = {
    "temperature": "temperature",
    "battery_voltage": "battery",
    "resistances": "resistance",
    "soil_moistures": "soil moisture",
    "transmission_reason": "transmission reason",
    "protocol_version": "protocol version",
}


@dataclass(frozen=True)
class SensefarmPayload(SensorPayload):
    """Measurements from a Sensefarm multisensor."""

    transmission_reason: int = 0
    protocol_version: int = 0
    battery_voltage: int = 0
    resistances: tuple[int, ...] = ()
    soil_moistures: tuple[int, ...] = ()
    temperature: float = 0.0

    def battery_level(self) -> int | None:
        return self.battery_voltage

    def error(self) -> tuple[str, list[str]]:
        return "", []


def decode(data: bytes) -> SensefarmPayload:
    """Decode a multisensor message, one header byte per sensor value."""
    if not data:
        raise DecodeError("input payload array is empty")

    values: dict[str, Any] = {"resistances": [], "soil_moistures": []}
    i = 0
    while i < len(data):
        field = _FIELDS.get(data[i] >> 3)
        if field is not None:
            name, fmt, repeated = field
            try:
                (value,) = struct.unpack_from(fmt, data, i + 1)
            except struct.error as exc:
                raise DecodeError(f"failed to read {_LABELS[name]}: {exc}") from exc
            if repeated:
                values[name].append(value)
            else:
                values[name] = value
            i += struct.calcsize(fmt)
        i += 1

    values["resistances"] = tuple(values["resistances"])
    values["soil_moistures"] = tuple(values["soil_moistures"])
    return SensefarmPayload(**values)


def decoder(event: Uplink) -> SensefarmPayload:
    """Decode an uplink carrying at least a header byte and a value."""
    if len(event.data) < 2:
        raise DecodeError("payload too short")
    return decode(event.data)