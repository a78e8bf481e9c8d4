import pytest

from sensordecode.base import DecodeError, Uplink
from sensordecode.niab import decode, decoder


def test_niab():
    payload = decode(bytes([0xCC, 0x0F, 0x03, 0xC5]))
    assert payload.battery == 80
    assert payload.temperature == 15.0
    assert payload.distance == 0.965
    assert payload.battery_level() == 80


def test_niab_can_report_minus_temperatures():
    payload = decode(bytes([0xCC, 0xF0, 0x03, 0xC5]))
    assert payload.temperature == -15.0


def test_niab_ignores_read_errors():
    with pytest.raises(DecodeError, match="sensor reading error"):
        decode(bytes([0xCC, 0x0F, 0xFF, 0xFF]))


def test_niab_ignores_truncated_data():
    with pytest.raises(DecodeError, match="too short"):
        decode(bytes([0xCC, 0x0F]))


def test_niab_ignores_too_long_data():
    with pytest.raises(DecodeError, match="too long"):
        decode(bytes([0xCC, 0x0F, 0xFF, 0xFF, 0xFF, 0xFF]))


def test_decoder_reads_object_bytes():
    payload = decoder(Uplink(json_object=bytes([0xCC, 0x0F, 0x03, 0xC5])))
    assert payload.distance == 0.965


def test_decoder_without_object_fails():
    with pytest.raises(DecodeError):
        decoder(Uplink())