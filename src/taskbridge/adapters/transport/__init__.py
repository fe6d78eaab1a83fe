"""Outbound transports for encoded data points."""

from taskbridge.adapters.transport.influx import InfluxLineClient

__all__ = ["InfluxLineClient"]
