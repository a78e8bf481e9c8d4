"""Lookup of decoders by sensor type, with decoding counters."""

from __future__ import annotations

import logging
import threading
from collections import Counter
from collections.abc import Callable
from typing import Optional

from sensordecode import (
    airquality,
    axsensor,
    elsys,
    enviot,
    milesight,
    niab,
    qalcosonic,
    senlabt,
    sensative,
    sensefarm,
    vegapuls,
)
from sensordecode.base import SensorPayload, Uplink

_log = logging.getLogger(__name__)

DecoderFunc = Callable[[Uplink], Optional[SensorPayload]]

ERRORS_COUNTER = "diwise.decoding.errors.total"

_DECODERS: dict[str, DecoderFunc] = {
    "airquality": airquality.decoder,
    "axsensor": axsensor.decoder,
    "elt_2_hp": elsys.decoder,
    "enviot": enviot.decoder,
    "niab-fls": niab.decoder,
    "qalcosonic": qalcosonic.decoder,
    "qalcosonic/w1t": qalcosonic.decoder_w1t,
    "qalcosonic/w1h": qalcosonic.decoder_w1h,
    "qalcosonic/w1e": qalcosonic.decoder_w1e,
    "vegapuls_air_41": vegapuls.decoder,
    "elsys": elsys.decoder,
    "elsys_codec": elsys.decoder,  # deprecated, use elsys
    "milesight": milesight.decoder,
    "milesight_am100": milesight.decoder,  # deprecated, use milesight
    "senlabt": senlabt.decoder,
    "tem_lab_14ns": senlabt.decoder,  # deprecated, use senlabt
    "cube02": sensefarm.decoder,  # deprecated, use sensefarm
    "sensefarm": sensefarm.decoder,
    "sensative": sensative.decoder,
    "strips_lora_ms_h": sensative.decoder,  # deprecated, use sensative
    "presence": sensative.decoder,  # deprecated, use sensative
}

# Sensor types whose decoded payloads have a dedicated conversion.
_CONVERTIBLE = frozenset(
    {
        "airquality",
        "axsensor",
        "elt_2_hp",
        "enviot",
        "niab-fls",
        "qalcosonic",
        "vegapuls_air_41",
        "elsys",
        "elsys_codec",
        "milesight",
        "milesight_am100",
        "senlabt",
        "tem_lab_14ns",
        "cube02",
        "sensefarm",
        "sensative",
        "strips_lora_ms_h",
        "presence",
    }
)


def default_decoder(event: Uplink) -> None:
    """Decoder for unknown sensor types: logs the event and yields no payload."""
    _log.info("default decoder used", extra={"sensor_type": event.sensor_type})
    return None


def _type_counter(sensor_type: str) -> str:
    return f"diwise.decoding.{sensor_type}.total"


class Registry:
    """Maps sensor types (case-insensitively) to decoders and counts results."""

    def __init__(self) -> None:
        self._decoders = dict(_DECODERS)
        self._counts: Counter[str] = Counter()
        self._lock = threading.Lock()

    def _add(self, name: str) -> None:
        with self._lock:
            self._counts[name] += 1

    def get(self, sensor_type: str) -> tuple[DecoderFunc, bool]:
        """Return the decoder for ``sensor_type`` and whether it is fully supported.

        Known types get a decoder that counts successes per type and failures
        in a shared error counter. Types with a decoder but no dedicated
        conversion are reported as not supported. Unknown types get
        :func:`default_decoder`.
        """
        key = sensor_type.lower()
        fn = self._decoders.get(key)
        if fn is None:
            return default_decoder, False

        counter = _type_counter(sensor_type)

        def counted(event: Uplink) -> Optional[SensorPayload]:
            try:
                payload = fn(event)
            except Exception:
                self._add(ERRORS_COUNTER)
                raise
            self._add(counter)
            return payload

        return counted, key in _CONVERTIBLE

    def counts(self) -> dict[str, int]:
        """Snapshot of the decoding counters, keyed by counter name."""
        with self._lock:
            return dict(self._counts)