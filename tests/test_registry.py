import json

import pytest

from sensordecode.airquality import AirQualityPayload
from sensordecode.base import DecodeError, Uplink
from sensordecode.elsys import ElsysPayload
from sensordecode.niab import NiabPayload
from sensordecode.registry import ERRORS_COUNTER, Registry, default_decoder

ELSYS_OBJECT = {
    "co2": 427,
    "humidity": 12,
    "light": 90,
    "motion": 2,
    "temperature": 23.2,
    "vdd": 3636,
}


def _elsys_uplink(sensor_type="ELSYS"):
    return Uplink(
        dev_eui="0000000000000001",
        sensor_type=sensor_type,
        data=bytes.fromhex("0100e8020c04005a0502060 1ab070e34".replace(" ", "")),
        json_object=json.dumps(ELSYS_OBJECT),
    )


def test_default_decoder_returns_no_payload():
    assert default_decoder(_elsys_uplink()) is None


def test_unknown_sensor_type_uses_default_decoder():
    fn, supported = Registry().get("no-such-sensor")
    assert fn is default_decoder
    assert supported is False


def test_known_type_is_case_insensitive_and_decodes():
    registry = Registry()
    fn, supported = registry.get("Elsys_Codec")
    assert supported is True
    payload = fn(_elsys_uplink("Elsys_Codec"))
    assert isinstance(payload, ElsysPayload)
    assert payload.co2 == 427
    assert payload.vdd == 3636


def test_decoder_without_conversion_is_not_supported():
    fn, supported = Registry().get("qalcosonic/w1t")
    assert supported is False
    with pytest.raises(DecodeError):
        fn(Uplink(fport=1, data=b"\x00" * 47))


@pytest.mark.parametrize(
    "sensor_type",
    ["elsys", "milesight_am100", "tem_lab_14ns", "cube02", "presence", "qalcosonic"],
)
def test_convertible_types_are_supported(sensor_type):
    _, supported = Registry().get(sensor_type)
    assert supported is True


def test_successful_decodes_are_counted_per_type():
    registry = Registry()
    fn, _ = registry.get("niab-fls")
    uplink = Uplink(json_object=bytes([0xCC, 0x0F, 0x03, 0xC5]))
    payload = fn(uplink)
    fn(uplink)
    assert isinstance(payload, NiabPayload)
    assert payload.battery == 80
    assert payload.distance == 0.965
    counts = registry.counts()
    assert counts["diwise.decoding.niab-fls.total"] == 2
    assert ERRORS_COUNTER not in counts


def test_failed_decodes_are_counted_as_errors():
    registry = Registry()
    fn, _ = registry.get("AirQuality")
    with pytest.raises(DecodeError):
        fn(Uplink(fport=3, data=bytes(12)))
    counts = registry.counts()
    assert counts[ERRORS_COUNTER] == 1
    assert "diwise.decoding.AirQuality.total" not in counts


def test_airquality_through_registry():
    registry = Registry()
    fn, supported = registry.get("airquality")
    payload = fn(Uplink(fport=2, data=bytes.fromhex("160011 00bd0a00030000 1d27".replace(" ", ""))))
    assert supported is True
    assert isinstance(payload, AirQualityPayload)
    assert payload.humidity == 76.8
    assert registry.counts() == {"diwise.decoding.airquality.total": 1}


def test_counts_is_a_snapshot():
    registry = Registry()
    snapshot = registry.counts()
    fn, _ = registry.get("niab-fls")
    fn(Uplink(json_object=bytes([0xCC, 0x0F, 0x03, 0xC5])))
    assert snapshot == {}
    assert registry.counts() == {"diwise.decoding.niab-fls.total": 1}