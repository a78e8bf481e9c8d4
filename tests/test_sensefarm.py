import pytest

from sensordecode.base import DecodeError, Uplink
from sensordecode.sensefarm import SensefarmPayload, decode, decoder

SAMPLE = "b006b800013008e4980000032fa80006990000043aa9000a08418a8bcc"


def _uplink(hex_data: str) -> Uplink:
    return Uplink(
        dev_eui="0000000000000002",
        sensor_type="cube02",
        fport=2,
        data=bytes.fromhex(hex_data),
    )


def test_basic_decoder():
    payload = decoder(_uplink(SAMPLE))
    assert payload.transmission_reason == 6
    assert payload.protocol_version == 1
    assert payload.battery_voltage == 2276
    assert payload.resistances == (815, 1082)
    assert payload.soil_moistures == (6, 10)
    assert payload.temperature == pytest.approx(17.318, abs=1e-3)


def test_value_count_matches_six_objects():
    payload = decoder(_uplink(SAMPLE))
    # temperature + device + one per resistance and soil moisture
    assert 2 + len(payload.resistances) + len(payload.soil_moistures) == 6


def test_battery_level_is_voltage():
    payload = decoder(_uplink(SAMPLE))
    assert payload.battery_level() == 2276
    assert payload.error() == ("", [])


def test_decoder_rejects_short_payload():
    with pytest.raises(DecodeError, match="payload too short"):
        decoder(_uplink("b0"))


def test_decode_rejects_empty_payload():
    with pytest.raises(DecodeError, match="empty"):
        decode(b"")


def test_decode_truncated_resistance_raises():
    with pytest.raises(DecodeError, match="resistance"):
        decode(bytes.fromhex("98000003"))


def test_decode_signed_battery():
    payload = decode(bytes.fromhex("30ffff"))
    assert payload.battery_voltage == -1


def test_decode_ignores_unknown_headers():
    assert decode(bytes.fromhex("0000")) == SensefarmPayload()