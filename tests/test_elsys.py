import base64

import pytest

from sensordecode.base import DecodeError, Uplink
from sensordecode.elsys import (
    ElsysPayload,
    convert_volt_to_percent,
    decode_payload,
    decoder,
)

ELT2HP = bytes.fromhex("01004b0254070e3a0d0014000f5bea1a00")
ELT2HP_TRUE = bytes.fromhex("010096024e070e1e0d0114000fdcc01a00")
CO2_DATA = base64.b64decode("AQDoAgwEAFoFAgYBqwcONA==")


def _uplink(data=b"", obj=None, fport=5):
    return Uplink(
        dev_eui="0000000000000001",
        sensor_type="elsys",
        fport=fport,
        data=data,
        json_object=obj,
    )


def test_digital1_true():
    payload = decode_payload(base64.b64decode("DQEaAA=="))
    assert payload.digital_input is True
    assert payload.digital_input2 is False


def test_digital1_false():
    payload = decode_payload(base64.b64decode("DQAaAA=="))
    assert payload.digital_input is False


def test_digital1_true_from_json_object():
    event = _uplink(
        base64.b64decode("DQEaAA=="),
        {
            "vdd": 3625,
            "digital": 1,
            "digital2": 0,
            "humidity": 100,
            "pressure": 1012.09,
            "temperature": 23.5,
        },
    )
    payload = decoder(event)
    assert payload.digital_input is True
    assert payload.digital_input2 is False
    assert payload.vdd == 3625
    assert payload.humidity == 100
    assert payload.temperature == 23.5
    assert payload.pressure == pytest.approx(1012.09, rel=1e-6)


def test_json_object_takes_precedence_over_data():
    event = _uplink(base64.b64decode("DQAaAA=="), {"digital": 1, "digital2": 0})
    assert decoder(event).digital_input is True


def test_co2_from_json_object():
    event = _uplink(
        CO2_DATA,
        {"co2": 427, "humidity": 12, "light": 90, "motion": 2, "temperature": 23.2, "vdd": 3636},
    )
    payload = decoder(event)
    assert payload.co2 == 427
    assert payload.humidity == 12
    assert payload.light == 90
    assert payload.motion == 2
    assert payload.vdd == 3636
    assert payload.temperature == pytest.approx(23.2, rel=1e-6)


def test_co2_binary_matches_json_object():
    payload = decode_payload(CO2_DATA)
    assert payload.co2 == 427
    assert payload.humidity == 12
    assert payload.light == 90
    assert payload.motion == 2
    assert payload.vdd == 3636
    assert payload.temperature == pytest.approx(23.2, rel=1e-6)


def test_external_temperature_binary():
    payload = decode_payload(base64.b64decode("Bw2KDADB"))
    assert payload.vdd == 3466
    assert payload.external_temperature == pytest.approx(19.3, rel=1e-6)
    assert payload.temperature is None


def test_external_temperature_json():
    payload = decoder(_uplink(base64.b64decode("Bw2KDADB"), {"externalTemperature": 19.3, "vdd": 3466}))
    assert payload.vdd == 3466
    assert payload.external_temperature == pytest.approx(19.3, rel=1e-6)


def test_elt2hp_decoder():
    payload = decoder(_uplink(ELT2HP))
    assert payload.temperature == 7.5
    assert payload.humidity == 84
    assert payload.vdd == 3642
    assert payload.digital_input is False
    assert payload.digital_input2 is False
    assert payload.pressure == pytest.approx(1006.57, rel=1e-6)
    assert payload.battery_level() == 3642


def test_elt2hp_true():
    payload = decoder(_uplink(ELT2HP_TRUE))
    assert payload.digital_input is True
    assert payload.temperature == 15.0
    assert payload.humidity == 78
    assert payload.vdd == 3614
    assert payload.pressure == pytest.approx(1039.552, rel=1e-6)


@pytest.mark.parametrize(
    "millivolts, percent",
    [(2222, 0.0), (3300, 7.5), (3400, 40.66), (3450, 66.59), (3500, 85.28), (3600, 100.0)],
)
def test_volt_to_percent(millivolts, percent):
    assert convert_volt_to_percent(millivolts) == percent


def test_negative_temperature_and_acceleration():
    payload = decode_payload(bytes([0x01, 0xFF, 0x9C, 0x03, 0xFF, 0x3F, 0x80]))
    assert payload.temperature == pytest.approx(-10.0)
    assert (payload.x, payload.y, payload.z) == (-1, 63, -128)


def test_pulse_counters_and_gps_skip():
    data = bytes([0x09, 1, 2, 3, 4, 5, 6, 0x0A, 0x00, 0x05, 0x0B, 0x00, 0x00, 0x01, 0x00])
    payload = decode_payload(data)
    assert payload.pulse == 5
    assert payload.pulse_abs == 256


def test_unknown_tag_is_skipped():
    payload = decode_payload(bytes([0x3D, 0x07, 0x0E, 0x10]))
    assert payload.vdd == 0x0E10


def test_truncated_payload_raises():
    with pytest.raises(DecodeError):
        decode_payload(bytes([0x01, 0x00]))


def test_fractional_integer_field_raises():
    with pytest.raises(DecodeError):
        decoder(_uplink(obj={"humidity": 12.5}))


def test_out_of_range_integer_field_raises():
    with pytest.raises(DecodeError):
        decoder(_uplink(obj={"humidity": 200}))


def test_non_object_document_raises():
    with pytest.raises(DecodeError):
        decoder(_uplink(obj="[1, 2]"))


def test_keys_match_case_insensitively():
    payload = decoder(_uplink(obj={"VDD": 3000}))
    assert payload.vdd == 3000


def test_error_and_battery_defaults():
    payload = ElsysPayload()
    assert payload.battery_level() is None
    assert payload.error() == ("", [])