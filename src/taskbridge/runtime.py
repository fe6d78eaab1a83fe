"""Bridge runtime: wires the host, the delivery client and the dispatcher.

The runtime owns all shared state. Host registrations made by start() are
removed by stop(), so a restarted bridge never leaves a stale listener
behind.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from taskbridge.adapters.transport.influx import InfluxLineClient
from taskbridge.core.config import BridgeConfig
from taskbridge.core.dispatcher import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_DEBOUNCE_SECONDS,
    BridgeState,
    EventDispatcher,
)
from taskbridge.core.metadata import MetadataCache
from taskbridge.core.models import LifecycleEvent
from taskbridge.core.ports import DeliveryPort, TaskHostPort, Unregister

logger = logging.getLogger(__name__)

ENTRY_POINT_LABEL = "Task Bridge"


class TaskBridge:
    """Runs the export pipeline against a host application.

    Example:
        ```python
        bridge = TaskBridge(host)
        async with bridge.attached() as dispatcher:
            await dispatcher.handle_message({"type": "PLUGIN_IMPORT_HISTORY"})
        ```

    Args:
        host: Host application port.
        client: Delivery transport. Defaults to a new InfluxLineClient,
            closed by stop().
        debounce_seconds: Quiet period before a task update is sent.
        batch_size: Tasks per write request during a bulk import.
    """

    def __init__(
        self,
        host: TaskHostPort,
        client: DeliveryPort | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        self._host = host
        self._owned_client: InfluxLineClient | None = None
        if client is None:
            client = self._owned_client = InfluxLineClient()
        self._client = client
        self.state = BridgeState(config=BridgeConfig(), cache=MetadataCache(host))
        self.dispatcher = EventDispatcher(
            host,
            self._client,
            self.state,
            debounce_seconds=debounce_seconds,
            batch_size=batch_size,
        )
        self._registrations: list[Unregister] = []

    @property
    def running(self) -> bool:
        return bool(self._registrations)

    async def _load_config(self) -> None:
        raw = await self._host.load_config()
        if not raw:
            logger.info("No persisted configuration found, using defaults")
            return
        try:
            self.state.config = BridgeConfig.from_json(raw)
        except ValueError:
            logger.exception("Failed to parse persisted configuration")
            return
        logger.info("Configuration loaded")

    def _view_model(self) -> dict[str, Any]:
        return {"cfg": self.state.config.to_dict()}

    async def start(self) -> None:
        """Load config, warm the metadata cache and register with the host."""
        if self.running:
            return
        logger.info("Initializing bridge")
        await self._load_config()
        await self.state.cache.refresh()

        for event in LifecycleEvent:
            self._registrations.append(
                self._host.register_hook(event, self.dispatcher.handler_for(event))
            )
        try:
            self._registrations.append(
                self._host.register_entry_point(ENTRY_POINT_LABEL, self._view_model)
            )
        except Exception:
            logger.warning("Entry point registration skipped", exc_info=True)

    async def stop(self) -> None:
        """Unregister from the host and finish in-flight sends."""
        while self._registrations:
            unregister = self._registrations.pop()
            unregister()
        self.dispatcher.close()
        await self.dispatcher.drain()
        if self._owned_client is not None:
            await self._owned_client.aclose()
        logger.info("Bridge stopped")

    @asynccontextmanager
    async def attached(self) -> AsyncIterator[EventDispatcher]:
        """Run the bridge for the duration of the block."""
        await self.start()
        try:
            yield self.dispatcher
        finally:
            await self.stop()
