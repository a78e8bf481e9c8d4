"""Decoder for Sensative strips presence, door and climate sensors."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sensordecode.base import DecodeError, SensorPayload, Uplink

_log = logging.getLogger(__name__)

_CHECK_IN_PORT = 2
_HEADER_LENGTH = 2

# Channels whose values are skipped, with the number of bytes they occupy.
_SKIPPED_CHANNELS = {
    4: 2,  # average temperature report
    7: 2,  # lux report
    8: 2,  # lux2 report
    110: 8,  # check in confirmed
}
_UNKNOWN_CHANNEL_SIZE = 20


@dataclass(frozen=True)
class SensativePayload(SensorPayload):
    """Reports from a Sensative sensor."""

    battery: int | None = None
    temperature: float | None = None
    humidity: float | None = None
    door_report: bool | None = None
    door_alarm: bool | None = None
    presence: bool | None = None
    check_in: bool | None = None

    def battery_level(self) -> int | None:
        return self.battery

    def error(self) -> tuple[str, list[str]]:
        return "", []


def decode(data: bytes) -> SensativePayload:
    """Decode the channel frames that follow the two byte history header."""
    values: dict[str, Any] = {}
    pos = _HEADER_LENGTH

    try:
        while pos < len(data):
            channel = data[pos] & 0x7F
            pos += 1
            size = 1

            if channel == 1:
                values["battery"] = data[pos]
            elif channel == 2:
                size = 2
                if pos + 2 > len(data):
                    raise IndexError(pos)
                raw = data[pos] << 8 | data[pos + 1]
                values["temperature"] = float(raw // 10)
            elif channel == 6:
                values["humidity"] = data[pos] / 2.0
            elif channel == 9:
                values["door_report"] = data[pos] != 0
            elif channel == 10:
                values["door_alarm"] = data[pos] != 0
            elif channel == 21:
                values["presence"] = data[pos] != 0
            elif channel in _SKIPPED_CHANNELS:
                size = _SKIPPED_CHANNELS[channel]
            else:
                _log.debug("unknown channel %d", channel)
                size = _UNKNOWN_CHANNEL_SIZE

            pos += size
    except IndexError as exc:
        raise DecodeError("truncated sensative payload") from exc

    return SensativePayload(**values)


def decoder(event: Uplink) -> SensativePayload:
    """Decode an uplink; fPort 2 is a periodic check-in."""
    if event.fport == _CHECK_IN_PORT:
        return SensativePayload(check_in=True)
    return decode(event.data)