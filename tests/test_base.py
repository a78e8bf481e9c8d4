import json

import pytest

from sensordecode.base import DecodeError, SensorPayload, Uplink


def test_sensor_payload_has_no_battery_level():
    assert SensorPayload().battery_level() is None


def test_sensor_payload_reports_no_error():
    assert SensorPayload().error() == ("", [])


def test_uplink_data_is_normalised_to_bytes():
    uplink = Uplink(data=bytearray(b"\x01\x02"))
    assert uplink.data == b"\x01\x02"


def test_uplink_data_from_int_list():
    assert Uplink(data=[1, 255]).data == b"\x01\xff"


def test_mapping_object_round_trips():
    uplink = Uplink(json_object={"x": [1, 2], "y": "z"})
    assert json.loads(uplink.json_object) == {"x": [1, 2], "y": "z"}
    assert uplink.decoded_object() == {"x": [1, 2], "y": "z"}


def test_string_object_is_parsed():
    uplink = Uplink(json_object='{"battery": 86}')
    assert uplink.json_object == b'{"battery": 86}'
    assert uplink.decoded_object() == {"battery": 86}


def test_missing_object_raises():
    with pytest.raises(DecodeError):
        Uplink().decoded_object()


def test_invalid_object_raises_value_error():
    with pytest.raises(ValueError):
        Uplink(json_object="{broken").decoded_object()


def test_defaults():
    uplink = Uplink()
    assert uplink.fport == 0
    assert uplink.data == b""
    assert uplink.json_object is None