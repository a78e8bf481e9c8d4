# sensordecode

Decoders for the binary and JSON uplink payloads sent by common LoRaWAN
sensors. Each decoder turns an uplink's raw bytes (or the JSON object a
network server attached to it) into a small, frozen payload object holding
plain Python values.

## Supported sensors

| Module                    | Devices                                            |
|---------------------------|----------------------------------------------------|
| `sensordecode.airquality` | Particulate matter / NO2 air-quality sensors       |
| `sensordecode.axsensor`   | Axsensor level, pressure, temperature, humidity    |
| `sensordecode.elsys`      | Elsys climate, CO2 and digital input sensors       |
| `sensordecode.enviot`     | Enviot snow-height and climate sensors             |
| `sensordecode.milesight`  | Milesight channel-encoded sensors                  |
| `sensordecode.niab`       | NIAB fill-level sensors                            |
| `sensordecode.qalcosonic` | Qalcosonic W1 water meters (w1e, w1h, w1t, alarms) |
| `sensordecode.senlabt`    | Senlab T temperature probes                        |
| `sensordecode.sensative`  | Sensative Strips (presence, door, climate)         |
| `sensordecode.sensefarm`  | Sensefarm soil moisture and resistance sensors     |
| `sensordecode.vegapuls`   | VEGAPULS Air radar level sensors                   |

## Uplinks

`sensordecode.base.Uplink` is a dataclass describing one uplink message:

- `dev_eui`, `sensor_type` – strings
- `fport` – the LoRaWAN port number
- `data` – the raw radio payload as bytes
- `json_object` – the JSON object decoded by the network server, stored as
  bytes; a `str` or a mapping passed here is converted to JSON bytes
- `timestamp` – an optional `datetime`

`Uplink.decoded_object()` parses `json_object`.

## Usage

Every sensor module has a `decoder(event)` function taking an `Uplink`.
Most modules also expose the byte-level `decode(data)` underneath it
(`elsys` calls it `decode_payload`):

```python
from sensordecode import niab
from sensordecode.base import Uplink
from sensordecode import airquality

payload = niab.decode(bytes([0xCC, 0x0F, 0x03, 0xC5]))
payload.battery_level()   # 80
payload.distance          # 0.965

reading = airquality.decoder(Uplink(fport=2, data=bytes(12)))
```

Some decoders check the port or the length first: `airquality` and
`axsensor` accept only fPort 2, the Qalcosonic decoders only fPort 100, and
`sensative.decoder` treats fPort 2 as a periodic check-in. The `elsys`
decoder uses the uplink's JSON object when there is one and the raw data
otherwise; `enviot` reads only the JSON object.

All payloads share the `SensorPayload` interface:

- `battery_level()` – the battery value the sensor reported, or `None`
- `error()` – a status code and a list of error messages; only the
  Qalcosonic payload fills these in

Malformed, truncated or unsupported payloads raise
`sensordecode.base.DecodeError`, a subclass of `ValueError`.

Other helpers:

- `elsys.convert_volt_to_percent(millivolts)` estimates a battery's state of
  charge in percent from its voltage.
- `milesight.decode_channels(data)` returns every decoded channel as a
  dictionary, including those `MilesightPayload` does not keep.

### Picking a decoder by sensor type

```python
from sensordecode.registry import Registry

registry = Registry()
decode, supported = registry.get("Elsys_Codec")
payload = decode(uplink)
registry.counts()   # {"diwise.decoding.Elsys_Codec.total": 1}
```

`Registry.get` looks types up case-insensitively and accepts current and
legacy names (for instance `"elsys"`, `"elsys_codec"` and `"elt_2_hp"` all
map to the Elsys decoder). It returns the decoder and a flag that is
`False` for the `qalcosonic/w1t`, `qalcosonic/w1h` and `qalcosonic/w1e`
variants and for unknown types. Unknown types get `default_decoder`, which
logs the event and returns `None`.

Decoders returned for known types count their results: successes under
`diwise.decoding.<sensor type>.total`, failures under
`diwise.decoding.errors.total` (the exception is re-raised).
`Registry.counts()` returns a snapshot of those counters.

### Water meters

`sensordecode.qalcosonic` decodes the W1 frame formats directly with
`w1e`, `w1t`, `w1h` and `alarm_packet`; `decode(event)` picks the frame by
payload length and returns a `(WaterMeterReading, Alarm)` pair with one of
them `None`. Status bytes are turned into readable messages by
`status_messages` and `alarm_status_messages`. Readings whose clock lies
more than 72 hours in the future raise `TimeTooFarOffError`; `decode`
then retries the payload as a w1t frame.

## What this package does not do

It only decodes payloads. It does not turn them into LwM2M objects or
SenML records, receive uplinks over MQTT or HTTP, look devices up in a
device registry, store anything, or run as a service.

## Requirements

Python 3.10 or later. No third-party dependencies.