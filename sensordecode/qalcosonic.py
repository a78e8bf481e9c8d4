"""Decoder for Qalcosonic W1 water meters (w1e, w1t, w1h frames and alarms)."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from sensordecode.base import DecodeError, SensorPayload, Uplink

_FPORT = 100
_ALARM_LENGTH = 5
_W1H_LENGTHS = (51, 52)
_W1E_LENGTHS = (43, 44, 45, 46, 47)
_W1T_LENGTH = 47
_ENHANCED_DELTAS = 23
_MAX_CLOCK_SKEW = timedelta(hours=72)
_MAX_LOG_AGE = timedelta(hours=24)

_NO_ERROR = 0x00


class TimeTooFarOffError(DecodeError):
    """Raised when a sensor clock lies too far in the future."""

    def __init__(self, message: str = "sensor time is too far off in the future") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class Value:
    """A logged meter volume and its increase over the previous log entry."""

    volume: float
    delta: float
    timestamp: datetime


@dataclass
class WaterMeterReading:
    """A decoded meter reading with its hourly log values."""

    current: float = 0.0
    last_log_value: int = 0
    volumes: list[Value] = field(default_factory=list)
    frame_version: int = 0
    messages: list[str] = field(default_factory=list)
    status_code: int = 0
    temperature: int | None = None
    timestamp: datetime | None = None
    meter_type: str = ""


@dataclass
class Alarm:
    """An alarm packet sent by the meter."""

    timestamp: datetime
    status_code: int = 0
    messages: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class QalcosonicPayload(SensorPayload):
    """A meter reading, an alarm, or both."""

    reading: WaterMeterReading | None = None
    alarms: Alarm | None = None

    def battery_level(self) -> int | None:
        return None

    def error(self) -> tuple[str, list[str]]:
        if self.reading is not None and self.reading.messages:
            messages = [m for m in self.reading.messages if m != "No error"]
            if self.reading.status_code == _NO_ERROR:
                return "0", messages
            return str(self.reading.status_code), messages
        return "0", []


class _Reader:
    """Sequential little-endian reader over a byte string."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def has(self, size: int) -> bool:
        return self._pos + size <= len(self._data)

    def read(self, fmt: str) -> int:
        unpacker = struct.Struct("<" + fmt)
        if not self.has(unpacker.size):
            raise DecodeError("unexpected EOF")
        (value,) = unpacker.unpack_from(self._data, self._pos)
        self._pos += unpacker.size
        return value

    def rest(self) -> bytes:
        return self._data[self._pos:]


def _utc(epoch: int) -> datetime:
    return datetime.fromtimestamp(epoch, tz=timezone.utc)


def _too_far_off(moment: datetime) -> bool:
    return moment > datetime.now(timezone.utc) + _MAX_CLOCK_SKEW


def _hour_start(moment: datetime) -> datetime:
    return moment.replace(minute=0, second=0, microsecond=0)


def _sensor_time(reader: _Reader) -> datetime:
    moment = _utc(reader.read("I"))
    if _too_far_off(moment):
        raise TimeTooFarOffError()
    return moment


def _extended_deltas(rest: bytes, last_log_value: int, log_time: datetime) -> list[Value]:
    deltas = []
    moment = log_time
    volume = last_log_value
    usable = len(rest) - len(rest) % 2
    for (delta,) in struct.iter_unpack("<H", rest[:usable]):
        moment += timedelta(hours=1)
        volume = (volume + delta) & 0xFFFFFFFF
        deltas.append(Value(volume=float(volume), delta=float(delta), timestamp=moment))
    return deltas


def _unpack_quads(data: bytes) -> list[int]:
    result = []
    for start in range(0, len(data) - 6, 7):
        q = data[start:start + 7]
        result.extend(
            (
                ((q[1] << 8) % 16384) | q[0],
                ((q[3] << 10) % 16384) | q[2] << 2 | q[1] >> 6,
                ((q[5] << 12) % 16384) | q[4] << 4 | q[3] >> 4,
                (q[6] << 6) | q[5] >> 2,
            )
        )
    return result


def _enhanced_deltas(rest: bytes, volume: float, log_time: datetime) -> list[Value]:
    deltas = _unpack_quads(rest + b"\x00")
    if len(deltas) < _ENHANCED_DELTAS:
        raise DecodeError("not enough delta volumes in enhanced payload")

    values = []
    total = volume
    moment = log_time
    for delta in deltas[:_ENHANCED_DELTAS]:
        total += delta
        moment += timedelta(hours=1)
        values.append(Value(volume=total, delta=float(delta), timestamp=moment))
    return values


def w1e(data: bytes) -> WaterMeterReading:
    """Decode a long "extended" frame."""
    reader = _Reader(data)
    sensor_time = _sensor_time(reader)
    status = reader.read("B")
    current = reader.read("I")

    if not reader.has(4):
        raise TimeTooFarOffError()
    logged = _utc(reader.read("I"))
    if _too_far_off(logged):
        raise TimeTooFarOffError()
    log_time = _hour_start(logged)

    if sensor_time - log_time > _MAX_LOG_AGE:
        raise TimeTooFarOffError()

    log_value = reader.read("I")
    volumes = [Value(volume=float(log_value), delta=0.0, timestamp=log_time)]
    volumes.extend(_extended_deltas(reader.rest(), log_value, log_time))

    return WaterMeterReading(
        current=float(current),
        last_log_value=log_value,
        volumes=volumes,
        messages=status_messages(status),
        status_code=status,
        timestamp=sensor_time,
        meter_type="w1e",
    )


def w1t(data: bytes) -> WaterMeterReading:
    """Decode a long "extended" frame that carries a temperature."""
    reader = _Reader(data)
    sensor_time = _sensor_time(reader)
    status = reader.read("B")
    current = reader.read("I")
    temperature = reader.read("H")
    log_time = _hour_start(_utc(reader.read("I")))
    log_value = reader.read("I")

    volumes = [Value(volume=float(log_value), delta=0.0, timestamp=log_time)]
    volumes.extend(_extended_deltas(reader.rest(), log_value, log_time))

    return WaterMeterReading(
        current=float(current),
        last_log_value=log_value,
        volumes=volumes,
        messages=status_messages(status),
        status_code=status,
        temperature=temperature,
        timestamp=sensor_time,
        meter_type="w1t",
    )


def w1h(data: bytes) -> WaterMeterReading:
    """Decode a long "enhanced" frame with 23 packed hourly increments."""
    reader = _Reader(data)
    frame_version = reader.read("B")
    sensor_time = _sensor_time(reader)
    # The first full value is logged at 01:00 the previous day.
    day = datetime(sensor_time.year, sensor_time.month, sensor_time.day, 1, tzinfo=timezone.utc)
    log_time = day - timedelta(days=1)

    status = reader.read("B")
    log_value = reader.read("I")
    volume = float(log_value)

    volumes = [Value(volume=volume, delta=0.0, timestamp=log_time)]
    volumes.extend(_enhanced_deltas(reader.rest(), volume, log_time))

    return WaterMeterReading(
        current=volume + sum(v.delta for v in volumes),
        last_log_value=log_value,
        volumes=volumes,
        frame_version=frame_version,
        messages=status_messages(status),
        status_code=status,
        timestamp=sensor_time,
        meter_type="w1h",
    )


def alarm_packet(data: bytes) -> Alarm:
    """Decode a five byte alarm packet."""
    reader = _Reader(data)
    moment = _utc(reader.read("I"))
    status = reader.read("B")
    return Alarm(timestamp=moment, status_code=status, messages=alarm_status_messages(status))


def status_messages(code: int) -> list[str]:
    """Describe the status byte of a reading."""
    power_low = 0x04
    permanent = 0x08
    temporary = 0x10
    empty_spool = 0x10
    leak = 0x20
    burst = 0xA0
    backflow = 0x60
    freeze = 0x80

    def has(mask: int) -> bool:
        return code & mask == mask

    messages = []
    if code == _NO_ERROR:
        messages.append("No error")
    if has(power_low):
        messages.append("Power low")
    if has(permanent):
        messages.append("Permanent error")
    if has(temporary):
        messages.append("Temporary error")
    if has(empty_spool) and not (has(freeze) or has(leak) or has(burst) or has(backflow)):
        messages.append("Empty spool")
    # priority: freeze; leakage; burst; negative flow
    if has(freeze) and not (has(leak) or has(burst) or has(backflow)):
        messages.append("Freeze")
    if has(leak) and not (has(freeze) or has(burst) or has(backflow)):
        messages.append("Leak")
    if has(burst):
        messages.append("Burst")
    if has(backflow):
        messages.append("Backflow")
    if not messages:
        messages.append("Unknown")
    return messages


_ALARM_MESSAGES = {
    0x00: "No error",
    0x01: "Leak",
    0x02: "Burst",
    0x04: "Low temperature",
    0x08: "Tamper",
    0x20: "Backflow",
}


def alarm_status_messages(code: int) -> list[str]:
    """Describe the status byte of an alarm packet; unknown codes give none."""
    message = _ALARM_MESSAGES.get(code)
    return [] if message is None else [message]


def decode(event: Uplink) -> tuple[WaterMeterReading | None, Alarm | None]:
    """Pick the frame decoder by payload length and decode the uplink."""
    data = event.data
    if len(data) < _ALARM_LENGTH:
        raise DecodeError("decoder not implemented or payload too short")

    if len(data) == _ALARM_LENGTH:
        return None, alarm_packet(data)

    if len(data) in _W1H_LENGTHS:
        frame = w1h
    elif len(data) in _W1E_LENGTHS:
        frame = w1e
    else:
        raise DecodeError(f"unknown payload length {len(data)}")

    try:
        reading = frame(data)
    except TimeTooFarOffError:
        reading = w1t(data)
    return reading, None


def _check_port(event: Uplink) -> None:
    if event.fport != _FPORT:
        raise DecodeError(f"unsupported fPort {event.fport}")


def decoder(event: Uplink) -> QalcosonicPayload:
    """Decode any supported Qalcosonic uplink."""
    _check_port(event)
    reading, alarm = decode(event)
    return QalcosonicPayload(reading=reading, alarms=alarm)


def decoder_w1h(event: Uplink) -> QalcosonicPayload:
    """Decode an uplink known to carry an enhanced frame."""
    _check_port(event)
    if len(event.data) not in _W1H_LENGTHS:
        raise DecodeError(f"unsupported payload length {len(event.data)} for w1h decoder")
    return QalcosonicPayload(reading=w1h(event.data))


def decoder_w1e(event: Uplink) -> QalcosonicPayload:
    """Decode an uplink known to carry an extended frame."""
    _check_port(event)
    if len(event.data) not in _W1E_LENGTHS:
        raise DecodeError(f"unsupported payload length {len(event.data)} for w1e decoder")
    return QalcosonicPayload(reading=w1e(event.data))


def decoder_w1t(event: Uplink) -> QalcosonicPayload:
    """Decode an uplink known to carry an extended frame with temperature."""
    _check_port(event)
    if len(event.data) == _ALARM_LENGTH:
        return QalcosonicPayload(alarms=alarm_packet(event.data))
    if len(event.data) == _W1T_LENGTH:
        return QalcosonicPayload(reading=w1t(event.data))
    raise DecodeError(f"unsupported payload length {len(event.data)} for w1t decoder")