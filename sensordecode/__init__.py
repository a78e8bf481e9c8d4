"""Decoders for LoRaWAN sensor uplink payloads, with a registry by sensor type."""

__version__ = "0.1.0"