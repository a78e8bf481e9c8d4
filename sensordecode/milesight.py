"""Decoder for Milesight channel-encoded sensors."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any

from sensordecode.base import DecodeError, SensorPayload, Uplink


@dataclass(frozen=True)
class MilesightPayload(SensorPayload):
    """Measurements from a Milesight sensor."""

    battery: int | None = None
    co2: int | None = None
    distance: float | None = None
    humidity: float | None = None
    temperature: float | None = None
    position: str | None = None
    magnet_status: str | None = None

    def battery_level(self) -> int | None:
        return self.battery

    def error(self) -> tuple[str, list[str]]:
        return "", []


def _u16(data: bytes, pos: int) -> int:
    return struct.unpack_from("<H", data, pos)[0]


def _temperature(data: bytes, pos: int) -> float:
    return struct.unpack_from("<h", data, pos)[0] / 10.0


def decode_channels(data: bytes) -> dict[str, Any]:
    """Decode the channel id / channel type frames into a dictionary."""
    decoded: dict[str, Any] = {}
    i = 0
    try:
        while i < len(data):
            channel = (data[i], data[i + 1])
            i += 2
            match channel:
                case (0x01, 0x75):
                    decoded["battery"] = data[i]
                    i += 1
                case (0x03, 0x67):
                    decoded["temperature"] = _temperature(data, i)
                    i += 2
                case (0x03, 0x82) | (0x04, 0x82):
                    decoded["distance"] = _u16(data, i)
                    i += 2
                case (0x05, 0x00):
                    decoded["position"] = "normal" if data[i] == 0 else "tilt"
                    i += 1
                case (0x83, 0x67):
                    decoded["temperature"] = _temperature(data, i)
                    decoded["temperature_abnormal"] = data[i + 2] != 0
                    i += 3
                case (0x84, 0x82):
                    decoded["distance"] = _u16(data, i)
                    decoded["distance_alarming"] = data[i + 2] != 0
                    i += 3
                case (0x04, 0x68):
                    decoded["humidity"] = data[i] / 2.0
                    i += 1
                case (0x05, 0x6A):
                    decoded["activity"] = _u16(data, i)
                    i += 2
                case (0x06, 0x00):
                    decoded["magnet_status"] = data[i]
                    i += 1
                case (0x06, 0x65):
                    decoded["illumination"] = _u16(data, i)
                    decoded["infrared_and_visible"] = _u16(data, i + 2)
                    decoded["infrared"] = _u16(data, i + 4)
                    i += 6
                case (0x07, 0x7D):
                    decoded["co2"] = _u16(data, i)
                    i += 2
    except (IndexError, struct.error) as exc:
        raise DecodeError("truncated milesight payload") from exc
    return decoded


def decode(data: bytes) -> MilesightPayload:
    """Decode a Milesight frame into a payload."""
    channels = decode_channels(data)

    distance = channels.get("distance")
    magnet = channels.get("magnet_status")

    return MilesightPayload(
        battery=channels.get("battery"),
        co2=channels.get("co2"),
        distance=None if distance is None else distance / 1000,
        humidity=channels.get("humidity"),
        temperature=channels.get("temperature"),
        position=channels.get("position"),
        magnet_status=None if magnet is None else ("close" if magnet == 0 else "open"),
    )


def decoder(event: Uplink) -> MilesightPayload:
    """Decode the raw data of an uplink."""
    return decode(event.data)