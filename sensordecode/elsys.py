"""Decoder for Elsys climate, CO2 and digital input sensors."""

from __future__ import annotations

import math
import struct
from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable

from sensordecode.base import DecodeError, SensorPayload, Uplink

_FLOAT32 = struct.Struct("<f")

_HALF_VOLTAGE_CAPACITY = 3.4177
_CALIBRATION_FACTOR = 21.347


class _Tag(IntEnum):
    TEMP = 0x01
    RH = 0x02
    ACC = 0x03
    LIGHT = 0x04
    MOTION = 0x05
    CO2 = 0x06
    VDD = 0x07
    ANALOG1 = 0x08
    GPS = 0x09
    PULSE1 = 0x0A
    PULSE1_ABS = 0x0B
    EXT_TEMP1 = 0x0C
    EXT_DIGITAL = 0x0D
    PRESSURE = 0x14
    OCCUPANCY = 0x11
    WATERLEAK = 0x12
    EXT_TEMP2 = 0x19
    EXT_DIGITAL2 = 0x1A


@dataclass(frozen=True)
class ElsysPayload(SensorPayload):
    """Measurements from an Elsys sensor."""

    temperature: float | None = None
    external_temperature: float | None = None
    external_temperature2: float | None = None
    humidity: int | None = None
    x: int | None = None
    y: int | None = None
    z: int | None = None
    light: int | None = None
    motion: int | None = None
    co2: int | None = None
    vdd: int | None = None
    analog1: int | None = None
    lat: float | None = None
    lon: float | None = None
    pulse: int | None = None
    pulse_abs: int | None = None
    pressure: float | None = None
    occupancy: int | None = None
    digital_input: bool | None = None
    digital_input2: bool | None = None
    waterleak: int | None = None

    def battery_level(self) -> int | None:
        return self.vdd

    def error(self) -> tuple[str, list[str]]:
        return "", []


def _f32(value: float) -> float:
    try:
        return _FLOAT32.unpack(_FLOAT32.pack(value))[0]
    except OverflowError as exc:
        raise DecodeError(f"value {value} out of range for float32") from exc


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def convert_volt_to_percent(millivolts: int) -> float:
    """Estimate the battery's state of charge in percent from its voltage."""
    volts = _round_half_away(millivolts / 1000.0 * 100) / 100

    if volts >= 3.6:
        return 100.0
    if volts < 3.3:
        return 0.0

    soc = 100 * (1 / (1 + math.exp(-_CALIBRATION_FACTOR * (volts - _HALF_VOLTAGE_CAPACITY))))
    return _round_half_away(soc * 100) / 100


def _integer(low: int, high: int) -> Callable[[str, Any], int]:
    def convert(name: str, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(f"cannot unmarshal {value!r} into integer field {name}")
        if not low <= value <= high:
            raise DecodeError(f"value {value} out of range for field {name}")
        return value

    return convert


def _float32(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"cannot unmarshal {value!r} into number field {name}")
    return _f32(float(value))


def _digital(name: str, value: Any) -> bool:
    return _integer(-(2**63), 2**63 - 1)(name, value) == 1


_INT8 = _integer(-128, 127)
_UINT8 = _integer(0, 0xFF)
_UINT16 = _integer(0, 0xFFFF)
_UINT32 = _integer(0, 0xFFFFFFFF)

_JSON_FIELDS: dict[str, tuple[str, str, Callable[[str, Any], Any]]] = {
    key.lower(): (key, attr, conv)
    for key, attr, conv in (
        ("temperature", "temperature", _float32),
        ("externalTemperature", "external_temperature", _float32),
        ("externalTemperature2", "external_temperature2", _float32),
        ("humidity", "humidity", _INT8),
        ("light", "light", _UINT16),
        ("motion", "motion", _UINT8),
        ("co2", "co2", _UINT16),
        ("vdd", "vdd", _UINT16),
        ("analog1", "analog1", _UINT16),
        ("pulse1", "pulse", _UINT16),
        ("pulseAbs", "pulse_abs", _UINT32),
        ("pressure", "pressure", _float32),
        ("occupancy", "occupancy", _UINT8),
        ("digital", "digital_input", _digital),
        ("digital2", "digital_input2", _digital),
        ("waterleak", "waterleak", _UINT8),
    )
}


def _from_json(document: Any) -> ElsysPayload:
    if document is None:
        return ElsysPayload()
    if not isinstance(document, Mapping):
        raise DecodeError("cannot unmarshal elsys object: not a JSON object")

    values: dict[str, Any] = {}
    for key, value in document.items():
        field = _JSON_FIELDS.get(str(key).lower())
        if field is None:
            continue
        name, attr, convert = field
        values[attr] = None if value is None else convert(name, value)
    return ElsysPayload(**values)


def _s8(value: int) -> int:
    return value - 0x100 if value > 0x7F else value


def _s16(value: int) -> int:
    return value - 0x10000 if value > 0x7FFF else value


def _u16(data: bytes, pos: int) -> int:
    return data[pos] << 8 | data[pos + 1]


def _u32(data: bytes, pos: int) -> int:
    return data[pos] << 24 | data[pos + 1] << 16 | data[pos + 2] << 8 | data[pos + 3]


def decode_payload(data: bytes) -> ElsysPayload:
    """Decode the binary Elsys type-value frame."""
    values: dict[str, Any] = {}
    i = 0
    try:
        while i < len(data):
            tag = data[i]
            if tag == _Tag.TEMP:
                values["temperature"] = _f32(_s16(_u16(data, i + 1)) / 10)
                i += 2
            elif tag == _Tag.RH:
                values["humidity"] = _s8(data[i + 1])
                i += 1
            elif tag == _Tag.ACC:
                values["x"] = _s8(data[i + 1])
                values["y"] = _s8(data[i + 2])
                values["z"] = _s8(data[i + 3])
                i += 3
            elif tag == _Tag.LIGHT:
                values["light"] = _u16(data, i + 1)
                i += 2
            elif tag == _Tag.MOTION:
                values["motion"] = data[i + 1]
                i += 1
            elif tag == _Tag.CO2:
                values["co2"] = _u16(data, i + 1)
                i += 2
            elif tag == _Tag.VDD:
                values["vdd"] = _u16(data, i + 1)
                i += 2
            elif tag == _Tag.ANALOG1:
                values["analog1"] = _u16(data, i + 1)
                i += 2
            elif tag == _Tag.GPS:
                i += 6
            elif tag == _Tag.PULSE1:
                values["pulse"] = _u16(data, i + 1)
                i += 2
            elif tag == _Tag.PULSE1_ABS:
                values["pulse_abs"] = _u32(data, i + 1)
                i += 4
            elif tag == _Tag.EXT_TEMP1:
                values["external_temperature"] = _f32(_s16(_u16(data, i + 1)) / 10)
                i += 2
            elif tag == _Tag.EXT_TEMP2:
                values["external_temperature2"] = _f32(_s16(_u16(data, i + 1)) / 10)
                i += 2
            elif tag == _Tag.PRESSURE:
                values["pressure"] = _f32(_f32(float(_u32(data, i + 1))) / 1000)
                i += 4
            elif tag == _Tag.OCCUPANCY:
                values["occupancy"] = data[i + 1]
                i += 1
            elif tag == _Tag.WATERLEAK:
                values["waterleak"] = data[i + 1]
                i += 1
            elif tag == _Tag.EXT_DIGITAL:
                values["digital_input"] = data[i + 1] == 1
                i += 1
            elif tag == _Tag.EXT_DIGITAL2:
                values["digital_input2"] = data[i + 1] == 1
                i += 1
            i += 1
    except IndexError as exc:
        raise DecodeError("truncated elsys payload") from exc

    return ElsysPayload(**values)


def decoder(event: Uplink) -> ElsysPayload:
    """Decode an uplink, preferring a JSON object from the network server."""
    if event.json_object is not None:
        return _from_json(event.decoded_object())
    return decode_payload(event.data)