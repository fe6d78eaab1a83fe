"""Export task lifecycle data to a time-series database as line protocol."""

from taskbridge.adapters.host.in_memory import InMemoryTaskHost
from taskbridge.adapters.logging import configure_logging
from taskbridge.adapters.transport.influx import InfluxLineClient
from taskbridge.core.config import BridgeConfig
from taskbridge.core.dispatcher import BridgeState, EventDispatcher
from taskbridge.core.encoding.line_protocol import encode_lines, encode_point
from taskbridge.core.enrich import enrich_task, heartbeat_point
from taskbridge.core.errors import (
    BridgeError,
    CacheRefreshError,
    ConfigurationError,
    DeliveryError,
    TransportError,
    UpstreamError,
)
from taskbridge.core.metadata import MetadataCache
from taskbridge.core.models import DataPoint, LifecycleEvent, Severity
from taskbridge.core.ports import DeliveryPort, TaskHostPort
from taskbridge.runtime import TaskBridge

__all__ = [
    "BridgeConfig",
    "BridgeError",
    "BridgeState",
    "CacheRefreshError",
    "ConfigurationError",
    "DataPoint",
    "DeliveryError",
    "DeliveryPort",
    "EventDispatcher",
    "InMemoryTaskHost",
    "InfluxLineClient",
    "LifecycleEvent",
    "MetadataCache",
    "Severity",
    "TaskBridge",
    "TaskHostPort",
    "TransportError",
    "UpstreamError",
    "configure_logging",
    "encode_lines",
    "encode_point",
    "enrich_task",
    "heartbeat_point",
]
